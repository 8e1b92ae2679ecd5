from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from dotenv import load_dotenv

from whodunit import config
from whodunit.cases.generator import generate_case
from whodunit.domain.models import Case, CharacterState
from whodunit.investigation.actions import accuse, ask, ask_with_responder, new_ledger
from whodunit.investigation.results import ActionOutcome
from whodunit.presentation.knowledge import EvidenceLedger
from whodunit.responder import ResponderClient
from whodunit.util.rng import replay_seed


def _choose_character(case: Case) -> CharacterState | None:
    for idx, state in enumerate(case.characters, start=1):
        print(f"{idx}) {state.suspect.name} ({state.suspect.occupation})")
    choice = input("> ").strip()
    if not choice.isdigit():
        return None
    index = int(choice) - 1
    if index < 0 or index >= len(case.characters):
        return None
    return case.characters[index]


def _flag(value: bool) -> str:
    return "yes" if value else "?"


def _print_notebook(case: Case, ledger: EvidenceLedger) -> None:
    print(f"Questions left: {ledger.remaining_questions()}")
    for state in case.characters:
        evidence = ledger.evidence_for(state.id)
        print(
            f"- {state.suspect.name}: motive {_flag(evidence.motive_revealed)}, "
            f"means {_flag(evidence.means_revealed)}, "
            f"opportunity {_flag(evidence.opportunity_revealed)}"
        )
    if ledger.disclosures:
        print("Things you've been told:")
        for record in ledger.disclosures:
            print(f"  {case.name_of(record.from_character_id)}: {record.info}")


def _print_briefing(case: Case) -> None:
    details = case.crime_details
    print(f"Case #{case.case_number} | {case.date}")
    print(f"{case.victim.name}, {case.victim.occupation}, was found dead in {details.location}.")
    print(f"Cause of death: {details.cause_of_death}. Time of death: {details.time_of_death}.")


def _interrogate(case: Case, ledger: EvidenceLedger, client: ResponderClient | None) -> None:
    print("Who do you want to question?")
    target = _choose_character(case)
    if target is None:
        print("No one by that number.")
        return
    print(f"Questioning {target.suspect.name}. Empty line to stop.")
    while True:
        question = input("? ").strip()
        if not question:
            return
        if client is not None:
            result = asyncio.run(ask_with_responder(question, target.id, case, ledger, client))
        else:
            result = ask(question, target.id, case, ledger)
        print(result.text)
        if result.outcome == ActionOutcome.BUDGET_EXHAUSTED:
            return


def _accuse(case: Case, ledger: EvidenceLedger) -> bool:
    print("Who killed them?")
    target = _choose_character(case)
    if target is None:
        print("No one by that number.")
        return False
    result = accuse(target.id, case, ledger)
    print("Correct!" if result.is_correct else "Wrong.")
    print(result.summary)
    return True


def _run_smoke(seed: int | None) -> None:
    case = generate_case(seed)
    ledger = new_ledger(case)
    _print_briefing(case)
    for state in case.characters:
        for question in ("What is your name?", "Where were you at the time of death?"):
            result = ask(question, state.id, case, ledger)
            print(f"[{state.id}] {question} -> {result.text}")
    result = accuse(case.murderer_id, case, ledger)
    print(f"[smoke] accusation correct: {result.is_correct}")


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Interrogate the suspects and name the killer.")
    parser.add_argument("--seed", type=int, default=config.SEED)
    parser.add_argument("--replay", action="store_true", help="Use a timestamp seed.")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Run a short non-interactive path and exit.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    seed = replay_seed() if args.replay else args.seed
    if args.smoke:
        _run_smoke(seed)
        return

    responder_config = config.ResponderConfig.from_env()
    client = ResponderClient(responder_config) if responder_config.enabled else None
    if client is not None and not asyncio.run(client.is_available()):
        print("Dialogue backend is not reachable; suspects will answer from their notes.")
        client = None

    case = generate_case(seed)
    ledger = new_ledger(case)
    _print_briefing(case)

    while True:
        print("")
        print("1) Question a suspect")
        print("2) Review notebook")
        print("3) Make an accusation")
        print("4) Quit")
        choice = input("> ").strip()
        if choice == "1":
            _interrogate(case, ledger, client)
        elif choice == "2":
            _print_notebook(case, ledger)
        elif choice == "3":
            if _accuse(case, ledger):
                return
        elif choice == "4":
            return


if __name__ == "__main__":
    main()
