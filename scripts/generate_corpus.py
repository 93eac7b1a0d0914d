from __future__ import annotations

import argparse
from pathlib import Path

from bracefmt import format_source
from bracefmt.testing import generate_corpus_files


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="generate_corpus", description="Write the generated corpus to disk")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=1000)
    ap.add_argument("--out", type=Path, default=Path("tests/fixtures/generated_corpus"))
    ap.add_argument(
        "--expected",
        action="store_true",
        help="Also write the formatted text of each case next to it as <case>.expected",
    )
    args = ap.parse_args(argv)

    case_dir = args.out.resolve() / f"seed_{args.seed}_count_{args.count}"
    case_dir.mkdir(parents=True, exist_ok=True)

    for name, text in generate_corpus_files(seed=args.seed, count=args.count):
        target = case_dir / name
        target.write_text(text, encoding="utf-8")
        if args.expected:
            formatted = format_source(text, file=str(target))
            target.with_name(name + ".expected").write_text(formatted, encoding="utf-8")

    print(case_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
