"""Seeded daily case generator.

Every fact in a case is a pure function of the seed: the generator draws
from a single ``Rng`` stream in a fixed order, so the same seed always
rebuilds the same victim, suspects, items, traits, alibis and murderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging

from whodunit import config
from whodunit.content import CatalogItem, ContentTables, load_content
from whodunit.domain import rules
from whodunit.domain.enums import (
    VICTIM_ID,
    CauseOfDeath,
    Opinion,
    SecretType,
    SuspicionLevel,
    Trait,
)
from whodunit.domain.models import (
    Alibi,
    Case,
    CharacterFacts,
    CharacterItem,
    CharacterState,
    CrimeDetails,
    ItemSwap,
    Motive,
    Relationship,
    RelationshipPair,
    Suspect,
    Victim,
)
from whodunit.truth.graph import RelationshipWeb
from whodunit.util.grammar import near_place
from whodunit.util.rng import Rng, today_seed

logger = logging.getLogger(__name__)

KILLER_INDEX = 0
DEFAULT_RELATIONSHIP_TYPE = "acquaintance"


@dataclass(frozen=True)
class _Scene:
    """Crime-wide facts drawn before any per-character work."""

    victim: Victim
    cause: CauseOfDeath
    location: str
    time: str
    killer_motive: str


def case_number_for(day: date) -> int:
    return (day - config.CASE_EPOCH).days + 1


def _case_date_label(day: date) -> str:
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def _pick_opinion(rng: Rng) -> Opinion:
    return rng.weighted_choice(config.OPINION_WEIGHTS)


def _pick_relationship_pairs(
    rng: Rng, selected: list[Suspect], tables: ContentTables
) -> list[RelationshipPair]:
    max_pairs = max(1, min(config.MAX_RELATIONSHIP_PAIRS, len(selected) // 2))
    count = rng.randint(1, max_pairs)
    order = rng.shuffled(range(len(selected)))
    unused_types = list(tables.pair_types)
    pairs: list[RelationshipPair] = []
    for slot in range(count):
        first = selected[order[2 * slot]]
        second = selected[order[2 * slot + 1]]
        pair_type = rng.choice(unused_types)
        if len(unused_types) > 1:
            unused_types.remove(pair_type)
        pairs.append(
            RelationshipPair(
                character1_id=first.id,
                character2_id=second.id,
                relationship_type=pair_type.type,
            )
        )
    return pairs


def _character_item(item: CatalogItem, owner_id: str, weapon: bool, murder: bool) -> CharacterItem:
    return CharacterItem(
        id=item.id,
        name=item.name,
        description=item.description,
        emoji=item.emoji,
        is_weapon_type=weapon,
        is_murder_weapon=murder,
        original_owner_id=owner_id,
    )


def _assign_items(
    rng: Rng, selected: list[Suspect], cause: CauseOfDeath, tables: ContentTables
) -> tuple[dict[str, CharacterItem], CatalogItem]:
    weapons = rng.shuffled(tables.weapons_for(cause))
    innocent = rng.shuffled(tables.innocent_items)
    decoy_index = rng.randint(1, len(selected) - 1)
    murder_weapon = weapons[0]
    items: dict[str, CharacterItem] = {}
    next_innocent = 0
    for index, suspect in enumerate(selected):
        if index == KILLER_INDEX:
            items[suspect.id] = _character_item(murder_weapon, suspect.id, True, True)
        elif index == decoy_index:
            items[suspect.id] = _character_item(weapons[1], suspect.id, True, False)
        else:
            items[suspect.id] = _character_item(innocent[next_innocent], suspect.id, False, False)
            next_innocent += 1
    return items, murder_weapon


def _apply_item_swaps(
    rng: Rng,
    selected: list[Suspect],
    items: dict[str, CharacterItem],
    tables: ContentTables,
) -> list[ItemSwap]:
    swaps: list[ItemSwap] = []
    for _ in range(rng.randint(0, config.MAX_ITEM_SWAPS)):
        order = rng.shuffled(selected)
        first, second = order[0], order[1]
        first_item = items[first.id]
        items[first.id], items[second.id] = items[second.id], first_item
        swaps.append(
            ItemSwap(
                from_character_id=first.id,
                to_character_id=second.id,
                item_id=first_item.id,
                reason=rng.choice(tables.swap_reasons),
            )
        )
    return swaps


def _draw_innocent_traits(rng: Rng, holds_weapon: bool) -> set[Trait]:
    count = 2 if rng.random() < config.TWO_TRAIT_CHANCE else 1
    drawn = rng.shuffled([Trait.MOTIVE, Trait.MEANS, Trait.OPPORTUNITY])[:count]
    # A weapon-type item already implies MEANS; never let it complete the set.
    if holds_weapon and count == 2 and Trait.MEANS not in drawn:
        drawn[1] = Trait.MEANS
    return set(drawn)


def _assign_traits(
    rng: Rng, selected: list[Suspect], items: dict[str, CharacterItem]
) -> dict[str, set[Trait]]:
    traits: dict[str, set[Trait]] = {}
    for index, suspect in enumerate(selected):
        if index == KILLER_INDEX:
            traits[suspect.id] = {Trait.MOTIVE, Trait.MEANS, Trait.OPPORTUNITY}
            continue
        drawn = _draw_innocent_traits(rng, items[suspect.id].is_weapon_type)
        if items[suspect.id].is_weapon_type:
            drawn.add(Trait.MEANS)
        traits[suspect.id] = drawn
    return traits


def _pair_for(pairs: list[RelationshipPair], suspect_id: str) -> RelationshipPair | None:
    return next((pair for pair in pairs if pair.includes(suspect_id)), None)


def _secret_about(
    rng: Rng,
    target: Suspect,
    target_traits: set[Trait],
    target_item: CharacterItem,
    murder_weapon: CatalogItem,
    scene: _Scene,
    tables: ContentTables,
) -> tuple[str, SecretType]:
    aligned = [
        SecretType(trait.value)
        for trait in (Trait.MOTIVE, Trait.MEANS, Trait.OPPORTUNITY)
        if trait in target_traits
    ]
    secret_type = rng.choice(aligned) if aligned else SecretType.GENERAL
    weapon_name = target_item.name if target_item.is_weapon_type else murder_weapon.name
    template = rng.choice(tables.secrets[secret_type])
    text = template.format_map(
        {
            "name": target.name,
            "weapon": weapon_name,
            "location": scene.location,
            "time": scene.time,
        }
    )
    return text, secret_type


def _victim_relationship(
    rng: Rng, is_killer: bool, scene: _Scene, tables: ContentTables
) -> Relationship:
    if is_killer:
        opinion = Opinion.NEGATIVE
        reason = tables.killer_victim_reason
    else:
        opinion = _pick_opinion(rng)
        reason = rng.choice(tables.opinion_reasons[opinion]).format(target=scene.victim.name)
    return Relationship(
        target_id=VICTIM_ID,
        target_name=scene.victim.name,
        opinion=opinion,
        opinion_reason=reason,
        relationship_type=rng.choice(tables.victim_relationship_types),
        secret=rng.choice(tables.victim_secrets),
        secret_type=SecretType.GENERAL,
    )


def _build_relationships(
    rng: Rng,
    web: RelationshipWeb,
    suspect: Suspect,
    is_killer: bool,
    selected: list[Suspect],
    pairs: list[RelationshipPair],
    traits: dict[str, set[Trait]],
    items: dict[str, CharacterItem],
    murder_weapon: CatalogItem,
    scene: _Scene,
    tables: ContentTables,
) -> None:
    web.add_relationship(suspect.id, _victim_relationship(rng, is_killer, scene, tables))
    pair = _pair_for(pairs, suspect.id)
    for other in selected:
        if other.id == suspect.id:
            continue
        paired = pair is not None and pair.partner_of(suspect.id) == other.id
        opinion = Opinion.POSITIVE if paired else _pick_opinion(rng)
        secret, secret_type = _secret_about(
            rng, other, traits[other.id], items[other.id], murder_weapon, scene, tables
        )
        web.add_relationship(
            suspect.id,
            Relationship(
                target_id=other.id,
                target_name=other.name,
                opinion=opinion,
                opinion_reason=rng.choice(tables.opinion_reasons[opinion]).format(
                    target=other.name
                ),
                relationship_type=pair.relationship_type if paired else DEFAULT_RELATIONSHIP_TYPE,
                secret=secret,
                secret_type=secret_type,
            ),
        )


def _suspicion(
    rng: Rng, index: int, selected: list[Suspect], tables: ContentTables
) -> tuple[SuspicionLevel, tuple[str, ...], str]:
    others = [suspect for position, suspect in enumerate(selected) if position != index]
    if index == KILLER_INDEX:
        scapegoat = rng.choice(others)
        reason = tables.suspicion["deflect"].format(name=scapegoat.name)
        return SuspicionLevel.ONE, (scapegoat.id,), reason
    roll = rng.random()
    if roll < config.SUSPICION_NONE_CUT:
        return SuspicionLevel.NONE, (), tables.suspicion["none"]
    if roll < config.SUSPICION_ONE_CUT:
        if rng.random() < config.SUSPICION_POINTS_AT_KILLER:
            target = selected[KILLER_INDEX]
        else:
            target = rng.choice(others)
        return (
            SuspicionLevel.ONE,
            (target.id,),
            tables.suspicion["one"].format(name=target.name),
        )
    targets = rng.sample(others, 2)
    return (
        SuspicionLevel.MULTIPLE,
        tuple(target.id for target in targets),
        tables.suspicion["multiple"],
    )


def _meeting_spots(
    rng: Rng,
    pairs: list[RelationshipPair],
    selected: list[Suspect],
    traits: dict[str, set[Trait]],
    tables: ContentTables,
) -> dict[str, tuple[str, str]]:
    """Map each member of an alibi-sharing pair to (partner name, shared location)."""
    names = {suspect.id: suspect.name for suspect in selected}
    spots: dict[str, tuple[str, str]] = {}
    for pair in pairs:
        members = (pair.character1_id, pair.character2_id)
        if any(Trait.OPPORTUNITY in traits[member] for member in members):
            continue
        location = rng.choice(tables.shared_alibi_locations)
        spots[pair.character1_id] = (names[pair.character2_id], location)
        spots[pair.character2_id] = (names[pair.character1_id], location)
    return spots


def _alibi(
    rng: Rng,
    suspect: Suspect,
    traits: dict[str, set[Trait]],
    meeting_spots: dict[str, tuple[str, str]],
    scene: _Scene,
    tables: ContentTables,
) -> Alibi:
    if Trait.OPPORTUNITY in traits[suspect.id]:
        template = rng.choice(tables.near_scene_alibis)
        return Alibi(
            description=template.format(location=scene.location),
            is_verifiable=False,
            was_at_crime_scene=True,
            time_accounted_for=scene.time,
            location=near_place(scene.location),
        )
    if suspect.id in meeting_spots:
        partner_name, location = meeting_spots[suspect.id]
        return Alibi(
            description=tables.partner_alibi.format(partner=partner_name, location=location),
            is_verifiable=True,
            was_at_crime_scene=False,
            time_accounted_for=scene.time,
            location=location,
            witness=partner_name,
        )
    spot = rng.choice(tables.elsewhere_alibis)
    is_verifiable = rng.random() < config.VERIFIABLE_ALIBI_CHANCE
    witness = None
    if rng.random() < config.NAMED_WITNESS_CHANCE:
        witness = rng.choice(tables.alibi_witnesses)
    return Alibi(
        description=spot.description,
        is_verifiable=is_verifiable,
        was_at_crime_scene=False,
        time_accounted_for=scene.time,
        location=spot.location,
        witness=witness,
    )


def _motive(
    rng: Rng, is_killer: bool, traits: set[Trait], scene: _Scene, tables: ContentTables
) -> Motive:
    if Trait.MOTIVE not in traits:
        return Motive(description=tables.no_motive, has_motive=False)
    if is_killer:
        return Motive(description=scene.killer_motive, has_motive=True)
    return Motive(description=rng.choice(tables.weak_motives), has_motive=True)


def generate_case(
    seed: int | None = None,
    *,
    today: date | None = None,
    content: ContentTables | None = None,
    suspect_count: int = config.SUSPECT_COUNT,
) -> Case:
    """Build a complete, invariant-checked case from ``seed`` (default: today's seed)."""
    day = today or date.today()
    actual_seed = seed if seed is not None else today_seed(day)
    tables = content or load_content()
    if not config.MIN_SUSPECT_COUNT <= suspect_count <= len(tables.suspects):
        raise ValueError(
            f"suspect_count must be between {config.MIN_SUSPECT_COUNT} "
            f"and {len(tables.suspects)}"
        )
    rng = Rng(actual_seed)

    victim = rng.choice(tables.victims)
    selected = rng.shuffled(tables.suspects)[:suspect_count]
    killer = selected[KILLER_INDEX]
    scene = _Scene(
        victim=victim,
        cause=rng.choice(list(CauseOfDeath)),
        location=rng.choice(tables.locations),
        time=rng.choice(tables.times),
        killer_motive=rng.choice(tables.killer_motives),
    )

    pairs = _pick_relationship_pairs(rng, selected, tables)
    items, murder_weapon = _assign_items(rng, selected, scene.cause, tables)
    swaps = _apply_item_swaps(rng, selected, items, tables)
    traits = _assign_traits(rng, selected, items)
    meeting_spots = _meeting_spots(rng, pairs, selected, traits, tables)

    web = RelationshipWeb()
    web.add_participant(VICTIM_ID, victim.name, role="victim")
    for suspect in selected:
        web.add_participant(suspect.id, suspect.name)

    facts: list[CharacterFacts] = []
    for index, suspect in enumerate(selected):
        is_killer = index == KILLER_INDEX
        _build_relationships(
            rng, web, suspect, is_killer, selected, pairs, traits, items, murder_weapon, scene, tables
        )
        suspicion, suspicion_targets, suspicion_reason = _suspicion(rng, index, selected, tables)
        alibi = _alibi(rng, suspect, traits, meeting_spots, scene, tables)
        motive = _motive(rng, is_killer, traits[suspect.id], scene, tables)
        item = items[suspect.id]
        facts.append(
            CharacterFacts(
                suspect=suspect,
                relationships=tuple(web.relationships_from(suspect.id)),
                relationship_to_victim=rng.choice(tables.relationships_to_victim),
                alibi=alibi,
                item=item,
                motive=motive,
                has_means=item.is_weapon_type or Trait.MEANS in traits[suspect.id],
                is_guilty=is_killer,
                suspicion=suspicion,
                suspicion_targets=suspicion_targets,
                suspicion_reason=suspicion_reason,
            )
        )

    rules.ensure_case_invariants(facts, killer.id, min_characters=config.MIN_SUSPECT_COUNT)

    crime_details = CrimeDetails(
        cause_of_death=scene.cause,
        murder_weapon=murder_weapon.name,
        murder_weapon_id=murder_weapon.id,
        time_of_death=scene.time,
        location=scene.location,
        killer_motive=scene.killer_motive,
        how_it_happened=(
            f"The killer confronted {victim.name} in {scene.location} at {scene.time}. "
            f"Using the {murder_weapon.name}, they committed the murder."
        ),
    )
    case = Case(
        seed=actual_seed,
        case_number=case_number_for(day),
        date=_case_date_label(day),
        victim=victim,
        crime_details=crime_details,
        characters=tuple(CharacterState(facts=entry) for entry in facts),
        murderer_id=killer.id,
        item_swaps=tuple(swaps),
        relationship_pairs=tuple(pairs),
    )
    logger.debug(
        "Generated case #%d from seed %d: victim=%s murderer=%s cause=%s swaps=%d",
        case.case_number,
        actual_seed,
        victim.name,
        killer.id,
        scene.cause.value,
        len(swaps),
    )
    return case
