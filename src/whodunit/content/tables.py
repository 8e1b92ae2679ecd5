"""Load the static content catalogs used by the generator and dialogue engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from whodunit.domain.enums import CauseOfDeath, Opinion, SecretType
from whodunit.domain.models import Suspect, Victim


class ContentError(ValueError):
    """The content catalog is structurally incomplete."""


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    description: str
    emoji: str
    weapon_type: CauseOfDeath | None = None


@dataclass(frozen=True)
class PairType:
    type: str
    description: str


@dataclass(frozen=True)
class ElsewhereAlibi:
    description: str
    location: str


@dataclass(frozen=True)
class ContentTables:
    victims: list[Victim]
    suspects: list[Suspect]
    weapons: dict[CauseOfDeath, list[CatalogItem]]
    innocent_items: list[CatalogItem]
    locations: list[str]
    times: list[str]
    killer_motives: list[str]
    weak_motives: list[str]
    no_motive: str
    pair_types: list[PairType]
    victim_relationship_types: list[str]
    relationships_to_victim: list[str]
    opinion_reasons: dict[Opinion, list[str]]
    killer_victim_reason: str
    secrets: dict[SecretType, list[str]]
    victim_secrets: list[str]
    near_scene_alibis: list[str]
    elsewhere_alibis: list[ElsewhereAlibi]
    partner_alibi: str
    shared_alibi_locations: list[str]
    alibi_witnesses: list[str]
    swap_reasons: list[str]
    suspicion: dict[str, str]
    dialogue: dict[str, Any]

    def weapons_for(self, cause: CauseOfDeath) -> list[CatalogItem]:
        return self.weapons[CauseOfDeath(cause)]


_CONTENT_CACHE: ContentTables | None = None


def _content_path() -> Path:
    return Path(__file__).resolve().parent / "tables.yml"


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data or data[key] in (None, "", [], {}):
        raise ContentError(f"content table is missing {key!r}")
    return data[key]


def _item(raw: dict[str, Any], weapon_type: CauseOfDeath | None = None) -> CatalogItem:
    return CatalogItem(
        id=str(raw["id"]),
        name=str(raw["name"]),
        description=str(raw["description"]),
        emoji=str(raw.get("emoji", "")),
        weapon_type=weapon_type,
    )


def _suspect(raw: dict[str, Any]) -> Suspect:
    return Suspect(
        id=str(raw["id"]),
        name=str(raw["name"]),
        occupation=str(raw["occupation"]),
        personality=str(raw["personality"]),
        aliases=tuple(str(alias).lower() for alias in raw.get("aliases", []) or []),
        mannerisms=tuple(str(line) for line in raw.get("mannerisms", []) or []),
    )


def _victim(raw: dict[str, Any]) -> Victim:
    occupation = str(raw["occupation"])
    return Victim(
        name=str(raw["name"]),
        occupation=occupation,
        description=f"The {occupation.lower()}",
        background=str(raw["background"]),
    )


def parse_content(data: dict[str, Any]) -> ContentTables:
    raw_weapons = _require(data, "weapons")
    weapons: dict[CauseOfDeath, list[CatalogItem]] = {}
    for cause in CauseOfDeath:
        entries = raw_weapons.get(cause.value) or []
        # The decoy needs a second weapon of the murder category.
        if len(entries) < 2:
            raise ContentError(f"cause {cause.value!r} needs at least two weapons")
        weapons[cause] = [_item(entry, cause) for entry in entries]

    suspects = [_suspect(entry) for entry in _require(data, "suspects")]
    if len({suspect.id for suspect in suspects}) != len(suspects):
        raise ContentError("suspect ids must be unique")

    innocent_items = [_item(entry) for entry in _require(data, "innocent_items")]
    if len(innocent_items) < len(suspects):
        raise ContentError("need at least one innocent item per roster suspect")

    alibis = _require(data, "alibis")
    shared = set(alibis.get("shared_locations") or [])
    if not shared:
        raise ContentError("content table is missing 'alibis.shared_locations'")
    if shared & set(_require(data, "locations")):
        raise ContentError("shared alibi locations must not double as crime scenes")
    raw_reasons = _require(data, "opinion_reasons")
    raw_secrets = _require(data, "secrets")
    return ContentTables(
        victims=[_victim(entry) for entry in _require(data, "victims")],
        suspects=suspects,
        weapons=weapons,
        innocent_items=innocent_items,
        locations=list(_require(data, "locations")),
        times=list(_require(data, "times")),
        killer_motives=list(_require(data, "killer_motives")),
        weak_motives=list(_require(data, "weak_motives")),
        no_motive=str(_require(data, "no_motive")),
        pair_types=[PairType(**entry) for entry in _require(data, "pair_types")],
        victim_relationship_types=list(_require(data, "victim_relationship_types")),
        relationships_to_victim=list(_require(data, "relationships_to_victim")),
        opinion_reasons={opinion: list(raw_reasons[opinion.value]) for opinion in Opinion},
        killer_victim_reason=str(_require(data, "killer_victim_reason")),
        secrets={secret_type: list(raw_secrets[secret_type.value]) for secret_type in SecretType},
        victim_secrets=list(_require(data, "victim_secrets")),
        near_scene_alibis=list(alibis["near_scene"]),
        elsewhere_alibis=[ElsewhereAlibi(**entry) for entry in alibis["elsewhere"]],
        partner_alibi=str(alibis["with_partner"]),
        shared_alibi_locations=list(alibis["shared_locations"]),
        alibi_witnesses=list(alibis["witnesses"]),
        swap_reasons=list(_require(data, "swap_reasons")),
        suspicion=dict(_require(data, "suspicion")),
        dialogue=dict(_require(data, "dialogue")),
    )


def load_content(path: Path | None = None) -> ContentTables:
    """Load the content catalog from YAML once and cache it."""
    global _CONTENT_CACHE
    if path is None and _CONTENT_CACHE is not None:
        return _CONTENT_CACHE
    content_path = path or _content_path()
    data = yaml.safe_load(content_path.read_text(encoding="utf-8"))
    tables = parse_content(data or {})
    if path is None:
        _CONTENT_CACHE = tables
    return tables
