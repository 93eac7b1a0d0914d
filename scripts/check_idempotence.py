from __future__ import annotations

import argparse
import sys

from bracefmt import Config, format_source
from bracefmt.testing import generate_sources


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="check_idempotence")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=1000)
    ap.add_argument("--config", action="append", default=[], metavar="KEY=VALUE")
    args = ap.parse_args(argv)

    overrides = dict(pair.partition("=")[::2] for pair in args.config)
    config = Config().with_overrides(overrides)

    bad = 0
    for i, src in enumerate(generate_sources(seed=args.seed, count=args.count)):
        name = f"corpus:{args.seed}:{i}.bf"
        out1 = format_source(src, file=name, config=config)
        out2 = format_source(out1, file=name, config=config)
        if out2 != out1:
            bad += 1
            print(f"non-idempotent formatting at case {i}", file=sys.stderr)

    print(f"{args.count - bad}/{args.count} cases stable")
    return int(bad > 0)


if __name__ == "__main__":
    raise SystemExit(main())
