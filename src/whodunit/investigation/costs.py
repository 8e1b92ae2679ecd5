"""Question budget for an interrogation session."""

from __future__ import annotations

from whodunit.content import ContentTables
from whodunit.presentation.knowledge import EvidenceLedger

QUESTION_COST = 1


def would_exceed_budget(ledger: EvidenceLedger, tables: ContentTables) -> tuple[bool, str]:
    if ledger.questions_asked + QUESTION_COST > ledger.question_limit:
        return True, str(tables.dialogue["budget_exhausted"])
    return False, ""
