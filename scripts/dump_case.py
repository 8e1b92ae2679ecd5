from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from whodunit import config
from whodunit.cases.generator import generate_case
from whodunit.truth.exporters import dump_case


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump every fact of a seeded case.")
    parser.add_argument("--seed", type=int, default=config.SEED)
    parser.add_argument("--out", type=str, default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    case = generate_case(args.seed)
    output = dump_case(case)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as handle:
            handle.write(output)
        print(f"Wrote case dump to {args.out}")
        return

    print(output)


if __name__ == "__main__":
    main()
