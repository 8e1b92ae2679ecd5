"""Tests for the YAML content catalog."""
from pathlib import Path

import pytest
import yaml

import whodunit.content.tables as tables_module
from whodunit.content import ContentError, load_content, parse_content
from whodunit.domain.enums import CauseOfDeath, Opinion, SecretType


def _raw():
    path = Path(tables_module.__file__).with_name("tables.yml")
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def test_load_content_is_cached():
    assert load_content() is load_content()


def test_every_cause_has_a_decoy(tables):
    for cause in CauseOfDeath:
        weapons = tables.weapons_for(cause)
        assert len(weapons) >= 2
        assert all(item.weapon_type == cause for item in weapons)


def test_roster_has_aliases_and_unique_ids(tables):
    ids = [suspect.id for suspect in tables.suspects]
    assert len(ids) == len(set(ids)) == 8
    for suspect in tables.suspects:
        assert suspect.first_name.lower() in suspect.aliases


def test_reason_and_secret_tables_cover_every_key(tables):
    assert set(tables.opinion_reasons) == set(Opinion)
    assert set(tables.secrets) == set(SecretType)


def test_cause_with_single_weapon_is_rejected():
    data = _raw()
    data["weapons"]["shot"] = data["weapons"]["shot"][:1]
    with pytest.raises(ContentError):
        parse_content(data)


def test_shared_alibi_location_cannot_be_a_crime_scene():
    data = _raw()
    data["alibis"]["shared_locations"].append(data["locations"][0])
    with pytest.raises(ContentError):
        parse_content(data)


def test_missing_table_is_rejected():
    data = _raw()
    del data["locations"]
    with pytest.raises(ContentError):
        parse_content(data)


def test_explicit_path_bypasses_cache(tmp_path):
    data = _raw()
    data["locations"] = ["the boathouse"]
    path = tmp_path / "tables.yml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    custom = load_content(path)
    assert custom.locations == ["the boathouse"]
    assert load_content().locations != ["the boathouse"]
