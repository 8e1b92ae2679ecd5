"""Tests for question classification order."""
from whodunit.investigation.intents import INTENT_RULES, Intent, classify
from whodunit.presentation.evidence import Disclosure


def _pair(case):
    target = case.characters[1]
    other = case.characters[2]
    return target, other


def test_rules_are_in_priority_order():
    assert [rule.intent for rule in INTENT_RULES] == [
        Intent.CONFRONT,
        Intent.CONFESS,
        Intent.NAME,
        Intent.ITEM,
        Intent.RELATIONSHIP,
        Intent.OTHER_CHARACTER,
        Intent.SUSPICION,
        Intent.ALIBI,
        Intent.MOTIVE,
        Intent.VICTIM,
        Intent.FALLBACK,
    ]


def test_basic_intents(case):
    target = case.characters[0]
    expectations = {
        "Did you kill them?": Intent.CONFESS,
        "What is your name?": Intent.NAME,
        "What are you carrying?": Intent.ITEM,
        "What was your relationship with the deceased?": Intent.RELATIONSHIP,
        "Who do you think did it?": Intent.SUSPICION,
        "Where were you at the time of death?": Intent.ALIBI,
        "Did you have a grudge?": Intent.MOTIVE,
        "Tell me about the victim.": Intent.VICTIM,
        "Lovely weather today.": Intent.FALLBACK,
    }
    for question, intent in expectations.items():
        assert classify(question, target, case).intent == intent, question


def test_first_match_wins(case):
    target, other = _pair(case)
    name_and_item = classify("What is your name and what are you carrying?", target, case)
    assert name_and_item.intent == Intent.NAME
    item_and_other = classify(
        f"Are you carrying anything {other.suspect.first_name} gave you?", target, case
    )
    assert item_and_other.intent == Intent.ITEM


def test_named_character_is_detected(case):
    target, other = _pair(case)
    result = classify(f"Tell me about {other.suspect.first_name}.", target, case)
    assert result.intent == Intent.OTHER_CHARACTER
    assert result.other_character_id == other.id


def test_victim_name_counts_as_victim_question(case):
    target = case.characters[0]
    surname = case.victim.name.split()[-1]
    assert classify(f"How did you feel about {surname}?", target, case).intent == Intent.VICTIM


def test_confrontation_needs_a_logged_disclosure(case, ledger):
    target, other = _pair(case)
    question = f"{other.suspect.first_name} told me something about you."
    assert classify(question, target, case, ledger).intent == Intent.OTHER_CHARACTER

    secret = other.facts.relationship_with(target.id)
    ledger.record_disclosure(
        other.id,
        Disclosure(about_character_id=target.id, info=secret.secret, info_type=secret.secret_type),
    )
    result = classify(question, target, case, ledger)
    assert result.intent == Intent.CONFRONT
    assert result.source_character_id == other.id
    assert result.disclosure.info == secret.secret


def test_confrontation_requires_the_named_source(case, ledger):
    target, other = _pair(case)
    third = case.characters[3]
    secret = other.facts.relationship_with(target.id)
    ledger.record_disclosure(
        other.id,
        Disclosure(about_character_id=target.id, info=secret.secret, info_type=secret.secret_type),
    )
    question = f"{third.suspect.first_name} told me something about you."
    assert classify(question, target, case, ledger).intent == Intent.OTHER_CHARACTER
