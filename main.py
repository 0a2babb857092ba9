from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from shifter.models.fragment import Direction
from shifter.services.scope_resolver import ScopeResolver
from shifter.services.settings_service import SettingsService
from shifter.services.text_buffer import TextBufferAdapter


def _parse_span(value: str) -> Tuple[int, int]:
    try:
        start, end = value.split(":", 1)
        return int(start), int(end)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected START:END, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shifter",
        description="Shift the value at the caret or selection up or down.",
    )
    parser.add_argument("direction", choices=("up", "down"))
    parser.add_argument("--more", action="store_true", help="shift by the 'more' step size")
    parser.add_argument("--file", dest="file", default=None, help="read text from this file (default: stdin)")
    parser.add_argument("--ext", dest="ext", default=None, help="file extension used for language gating")
    parser.add_argument("--caret", type=int, default=0)
    parser.add_argument(
        "--select", dest="selections", type=_parse_span, action="append", default=[],
        help="selection START:END; repeat for a columnar block",
    )
    parser.add_argument("--choice", choices=("enumerate", "increment"), default=None)
    parser.add_argument("--start", type=int, default=None, help="first number of an enumeration")
    parser.add_argument("--collapse", choices=("yes", "no"), default=None)
    parser.add_argument("--settings", dest="settings", default=None, type=Path)
    parser.add_argument("--verbose", action="store_true")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.file:
        path = Path(args.file)
        text = path.read_text(encoding="utf-8")
        filename: Optional[str] = f"buffer.{args.ext}" if args.ext else path.name
    else:
        text = sys.stdin.read()
        filename = f"buffer.{args.ext}" if args.ext else None

    choices: List[Optional[int]] = []
    if args.choice:
        choices.append(0 if args.choice == "enumerate" else 1)
    if args.collapse:
        choices.append(0 if args.collapse == "yes" else 1)

    adapter = TextBufferAdapter(
        text,
        caret=args.caret,
        selections=args.selections,
        filename=filename,
        choices=choices,
        numbers=[args.start] if args.start is not None else [],
    )
    settings = SettingsService(args.settings).snapshot()
    resolver = ScopeResolver(adapter, settings)
    result = resolver.shift(Direction(args.direction), more=args.more)
    sys.stdout.write(adapter.text)
    return 0 if result.changed else 1


def main() -> int:
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
