"""Tests for relationship web queries and the case dump."""
from conftest import find_case

from whodunit.domain.enums import VICTIM_ID, Trait
from whodunit.truth.exporters import dump_case
from whodunit.truth.graph import build_web
from whodunit.truth.queries import corroborating_pairs, informants_about, trait_holders


def test_web_holds_every_relationship(case):
    web = build_web(case)
    assert web.graph.number_of_nodes() == len(case.characters) + 1
    assert web.graph.number_of_edges() == len(case.characters) ** 2
    for state in case.characters:
        assert web.relationships_from(state.id) == list(state.facts.relationships)
        assert web.relationship_between(state.id, VICTIM_ID) is not None


def test_everyone_else_knows_a_secret_about_the_killer(case):
    informants = informants_about(case, case.murderer_id)
    assert sorted(informants) == sorted(state.id for state in case.others(case.murderer_id))


def test_informants_filter_by_category(case):
    for trait in Trait:
        for source_id in informants_about(case, case.murderer_id, secret_type=trait.value):
            relationship = case.character(source_id).facts.relationship_with(case.murderer_id)
            assert relationship.secret_type.value == trait.value


def test_killer_holds_every_trait(case):
    for trait in Trait:
        assert case.murderer_id in trait_holders(case, trait)


def test_corroborating_pairs_vouch_for_each_other(case):
    for pair in corroborating_pairs(case):
        first = case.character(pair.character1_id)
        second = case.character(pair.character2_id)
        assert not first.facts.has_opportunity
        assert not second.facts.has_opportunity
        assert first.facts.alibi.is_verifiable and second.facts.alibi.is_verifiable
        assert first.facts.alibi.location == second.facts.alibi.location


def test_every_pair_without_opportunity_corroborates():
    case = find_case(
        lambda c: any(
            not c.character(pair.character1_id).facts.has_opportunity
            and not c.character(pair.character2_id).facts.has_opportunity
            for pair in c.relationship_pairs
        )
    )
    expected = [
        pair
        for pair in case.relationship_pairs
        if not case.character(pair.character1_id).facts.has_opportunity
        and not case.character(pair.character2_id).facts.has_opportunity
    ]
    assert corroborating_pairs(case) == expected


def test_dump_names_the_murderer(case):
    output = dump_case(case)
    assert f"Murderer: {case.murderer_id}" in output
    assert "GUILTY" in output
    assert case.victim.name in output
