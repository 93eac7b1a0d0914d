from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path

from .api import format_files, format_source
from .config import Config
from .errors import ConfigError, FormatInvariantError, ParseError


def _parse_overrides(pairs: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ConfigError(pair, "expected KEY=VALUE")
        out[key.strip()] = value.strip()
    return out


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="bracefmt", description="Format brace-language source files")
    ap.add_argument("paths", nargs="*", help="Files to format (stdin when omitted)")
    ap.add_argument("--check", action="store_true", help="List files that would change; exit 1 if any")
    ap.add_argument("--write", action="store_true", help="Rewrite files in place")
    ap.add_argument(
        "--config",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a style option (repeatable)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config().with_overrides(_parse_overrides(args.config))
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if not args.paths:
        # newline="" keeps `\r\n` so the original line endings can be detected
        stdin = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", newline="")
        try:
            src = stdin.read()
            out = format_source(src, file="<stdin>", config=config)
        except (ParseError, FormatInvariantError, UnicodeDecodeError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        if args.check:
            return int(out != src)
        sys.stdout.write(out)
        return 0

    report = format_files(args.paths, config)
    for failure in report.failures:
        print(f"error: {failure.path}: {failure.error}", file=sys.stderr)

    if args.check:
        for path in report.changed:
            print(path)
        return int(bool(report.changed) or not report.ok)

    for res in report.results:
        if args.write:
            if res.changed:
                with Path(res.path).open("w", encoding="utf-8", newline="") as f:
                    f.write(res.formatted)
        else:
            sys.stdout.write(res.formatted)
    return int(not report.ok)


if __name__ == "__main__":
    raise SystemExit(main())
