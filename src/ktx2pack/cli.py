"""Command line interface for ktx2pack."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import BuildOptions, build_ktx2, list_formats, plan_dry_run
from .container.errors import KtxError
from .logging import configure_logging
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _build_cmd(args: argparse.Namespace) -> int:
    opts = BuildOptions(
        input_job=args.job,
        output_path=args.output,
        compression_level=args.compression_level,
        workers=args.workers,
        manifest_path=args.emit_manifest,
    )
    build_ktx2(opts)
    return 0


def _plan_cmd(args: argparse.Namespace) -> int:
    plan, plan_dict = plan_dry_run(
        args.job,
        compression_level=args.compression_level,
        workers=args.workers,
    )
    if args.json:
        print(json.dumps(plan_dict, indent=2, sort_keys=True))
    else:
        levels_summary = ",".join(
            f"L{i}@{r.byte_offset}+{r.compressed_byte_length}"
            for i, r in enumerate(plan.levels)
        )
        get_reporter().info(
            f"Plan summary: file_size={plan.file_size} "
            f"descriptor={plan.descriptor.offset}+{plan.descriptor.size} "
            f"levels={levels_summary}"
        )
    return 0


def _formats_cmd(args: argparse.Namespace) -> int:
    formats = list_formats()
    if args.json:
        print(json.dumps(formats, indent=2))
        return 0
    for f in formats:
        print(
            f"{f['code']:>4}  {f['name']:<28} block={f['texel_block_size']:>2}"
            f" dfd={f['descriptor_length']}"
        )
    return 0


def _add_encode_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--compression-level",
        dest="compression_level",
        type=int,
        help="Zstandard level (overrides the job file)",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Compress levels on N threads (default 1)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ktx2pack",
        description="KTX2 container writer with Zstandard supercompression",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("build", help="Encode a job file into a .ktx2 file")
    b.add_argument("job", type=Path)
    b.add_argument("output", type=Path)
    _add_encode_flags(b)
    b.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write manifest JSON (opt-in)",
    )
    b.set_defaults(func=_build_cmd)

    pl = sub.add_parser("plan", help="Compute the layout plan (no write)")
    pl.add_argument("job", type=Path)
    _add_encode_flags(pl)
    pl.add_argument("--json", action="store_true", help="Emit JSON plan")
    pl.set_defaults(func=_plan_cmd)

    f = sub.add_parser("formats", help="List supported formats")
    f.add_argument("--json", action="store_true", help="Emit JSON list")
    f.set_defaults(func=_formats_cmd)

    return p


def _select_reporter(name: str) -> None:
    if name == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif name == "silent":
        set_reporter(SilentReporter())
    elif name == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except KtxError as exc:
        get_reporter().error(str(exc), code=exc.code, context=exc.context or {})
        return 1
    except FileNotFoundError as exc:
        get_reporter().error(f"File not found: {exc.filename or exc}")
        return 1
    finally:
        get_reporter().close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
