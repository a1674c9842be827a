"""Command-line entry point for generating configurations from a spec file."""

from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Iterable, Sequence

from confspace.configuration import Configuration
from confspace.constants import PACKET_COLUMN
from confspace.errors import ConfigurationError
from confspace.loader import generate_from_file

_LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate configurations from a parameter spec")
    parser.add_argument("spec", help="Path to spec file (.properties, .yaml or .json)")
    parser.add_argument("--out", help="Optional output path (csv or jsonl)")
    parser.add_argument("--format", choices={"csv", "jsonl"}, help="Output format override")
    parser.add_argument("--limit", type=int, help="Maximum rows to emit to stdout")
    parser.add_argument("--count", action="store_true", help="Only print the number of configurations")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return parser


def _row(conf: Configuration) -> dict[str, str]:
    return {PACKET_COLUMN: conf.packet, **conf.as_dict()}


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.limit is not None and args.limit < 0:
        parser.error("--limit cannot be negative")

    logging.basicConfig(
        level=_LOG_LEVELS[min(args.verbose, len(_LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )

    confs = generate_from_file(args.spec)

    if args.count:
        print(len(confs))
        return 0

    if args.out:
        out_path = Path(args.out)
        fmt = args.format or out_path.suffix.lstrip(".") or "csv"
        _write_rows(confs, out_path, fmt)
    else:
        limit = len(confs) if args.limit is None else args.limit
        for conf in confs[:limit]:
            print(_row(conf))
        if limit < len(confs):
            print(f"... truncated {len(confs) - limit} rows")

    return 0


def _write_rows(confs: Sequence[Configuration], out: Path, fmt: str) -> None:
    if fmt == "jsonl":
        with out.open("w", encoding="utf-8") as fh:
            for conf in confs:
                fh.write(json.dumps(_row(conf)) + "\n")
        return

    if fmt == "csv":
        params = sorted({name for conf in confs for name in conf})
        with out.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=[PACKET_COLUMN, *params])
            writer.writeheader()
            writer.writerows(_row(conf) for conf in confs)
        return

    raise ValueError(f"Unsupported format: {fmt}")


def entrypoint() -> None:  # pragma: no cover - console entry
    try:
        raise SystemExit(main())
    except ConfigurationError as exc:  # pragma: no cover - console behavior
        raise SystemExit(f"error: {exc}")
