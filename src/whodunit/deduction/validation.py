"""Accusation checks."""

from __future__ import annotations

from dataclasses import dataclass

from whodunit.domain.models import Case


@dataclass(frozen=True)
class AccusationResult:
    accused_id: str
    is_correct: bool
    murderer_id: str
    summary: str


def is_correct_accusation(case: Case, accused_id: str) -> bool:
    case.character(accused_id)
    return accused_id == case.murderer_id


def validate_accusation(case: Case, accused_id: str) -> AccusationResult:
    correct = is_correct_accusation(case, accused_id)
    accused = case.name_of(accused_id)
    killer = case.name_of(case.murderer_id)
    if correct:
        summary = f"{accused} killed {case.victim.name}. {case.crime_details.how_it_happened}"
    else:
        summary = f"{accused} is innocent. The killer was {killer}."
    return AccusationResult(
        accused_id=accused_id,
        is_correct=correct,
        murderer_id=case.murderer_id,
        summary=summary,
    )
