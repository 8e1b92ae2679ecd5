"""Tests for the evidence ledger and player actions."""
import pytest

from whodunit.deduction.validation import is_correct_accusation
from whodunit.domain.enums import EvidenceCategory, SecretType
from whodunit.domain.rules import UnknownCharacterError
from whodunit.investigation.actions import accuse, ask, new_ledger
from whodunit.investigation.phrasing import always
from whodunit.investigation.results import ActionOutcome
from whodunit.presentation.evidence import Disclosure, EvidenceUpdate


def test_new_ledger_tracks_every_suspect(case, ledger):
    assert set(ledger.characters) == {state.id for state in case.characters}
    assert ledger.remaining_questions() == 24
    assert not ledger.is_exhausted()


def test_name_reveal_is_idempotent(case, ledger):
    target = case.characters[0]
    first = ask("What is your name?", target.id, case, ledger)
    second = ask("What is your name?", target.id, case, ledger)
    assert first.outcome == second.outcome == ActionOutcome.ANSWERED
    assert ledger.evidence_for(target.id).name_revealed is True
    assert ledger.questions_asked == 2
    assert ledger.disclosures == []
    assert second.remaining_questions == 22


def test_flags_never_flip_back(ledger):
    ledger.apply_update("marcus", EvidenceUpdate.revealing(EvidenceCategory.MOTIVE, "money"))
    ledger.apply_update("marcus", EvidenceUpdate(motive_revealed=False, motive_text="other"))
    ledger.apply_update("marcus", None)
    evidence = ledger.evidence_for("marcus")
    assert evidence.motive_revealed is True
    assert evidence.motive_text == "money"


def test_disclosures_are_deduplicated(ledger):
    disclosure = Disclosure(about_character_id="sarah", info="She was seen", info_type=SecretType.OPPORTUNITY)
    assert ledger.record_disclosure("marcus", disclosure) is True
    assert ledger.record_disclosure("jerome", disclosure) is False
    assert len(ledger.disclosures) == 1
    assert ledger.disclosures_about("sarah", from_character_id="marcus")
    assert ledger.disclosures_about("sarah", from_character_id="jerome") == []


def test_shared_secret_lands_in_the_ledger_once(case, ledger):
    speaker, other = case.characters[0], case.characters[1]
    question = f"Tell me about {other.suspect.first_name}."
    first = ask(question, speaker.id, case, ledger, decide=always)
    second = ask(question, speaker.id, case, ledger, decide=always)
    assert first.new_disclosure is True
    assert second.new_disclosure is False
    assert len(ledger.disclosures_about(other.id)) == 1


def test_budget_exhaustion_is_terminal(case, tables):
    ledger = new_ledger(case, question_limit=2)
    target = case.characters[0]
    ask("What is your name?", target.id, case, ledger)
    ask("What are you carrying?", target.id, case, ledger)
    snapshot = ledger.model_dump()

    result = ask("Where were you at the time of death?", target.id, case, ledger)
    assert result.outcome == ActionOutcome.BUDGET_EXHAUSTED
    assert result.text == tables.dialogue["budget_exhausted"]
    assert result.reply is None
    assert ledger.model_dump() == snapshot
    assert ledger.is_exhausted()


def test_history_is_role_tagged(case, ledger):
    first, second = case.characters[0], case.characters[1]
    ask("What is your name?", first.id, case, ledger)
    ask("What is your name?", second.id, case, ledger)
    history = ledger.history_for(first.id)
    assert [turn["role"] for turn in history] == ["user", "assistant"]
    assert history[0]["content"] == "What is your name?"
    assert first.suspect.name in history[1]["content"]


def test_accusation(case, ledger):
    for state in case.characters:
        assert is_correct_accusation(case, state.id) == (state.id == case.murderer_id)
    wrong = case.others(case.murderer_id)[0]
    result = accuse(wrong.id, case, ledger)
    assert not result.is_correct
    assert ledger.accused_id == wrong.id
    assert ledger.accusation_correct is False
    assert accuse(case.murderer_id, case, ledger).is_correct


def test_accusing_a_stranger_is_a_typed_error(case):
    with pytest.raises(UnknownCharacterError):
        is_correct_accusation(case, "nobody")
