"""KTX2 container layout, packing and assembly."""
