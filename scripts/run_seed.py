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
from whodunit.util.rng import replay_seed


def main() -> None:
    parser = argparse.ArgumentParser(description="Print a seeded daily case.")
    parser.add_argument("--seed", type=int, default=config.SEED)
    parser.add_argument("--replay", action="store_true", help="Use a timestamp seed.")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    seed = replay_seed() if args.replay else args.seed
    case = generate_case(seed)

    print(f"Case #{case.case_number} (seed {case.seed}) {case.date}")
    print(f"Victim: {case.victim.name}, {case.victim.occupation}")
    details = case.crime_details
    print(f"Found {details.cause_of_death} in {details.location} around {details.time_of_death}")
    print("Suspects:")
    for suspect in case.roster:
        print(f"- {suspect.name} | {suspect.occupation}")


if __name__ == "__main__":
    main()
