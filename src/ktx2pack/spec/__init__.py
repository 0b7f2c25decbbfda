"""Job file models and loading."""
