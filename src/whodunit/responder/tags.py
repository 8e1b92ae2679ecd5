"""Strip and interpret the machine-readable tag on a generated reply."""

from __future__ import annotations

from dataclasses import dataclass
import re

from whodunit.domain.enums import EvidenceCategory, SecretType
from whodunit.domain.models import CharacterState
from whodunit.presentation.evidence import Disclosure, EvidenceUpdate

_TAG = re.compile(r"\[(?:REVEAL:(?P<category>[A-Z]+)|SECRET:(?P<about>[a-z0-9_]+):(?P<info>.+?))\]")


class MalformedReplyError(ValueError):
    """The backend answered with nothing the player could be shown."""


@dataclass(frozen=True)
class ParsedReply:
    text: str
    disclosure: Disclosure | None = None
    evidence_update: EvidenceUpdate | None = None


def _secret_type(speaker: CharacterState | None, about_id: str) -> SecretType:
    if speaker is None:
        return SecretType.GENERAL
    relationship = speaker.facts.relationship_with(about_id)
    return relationship.secret_type if relationship else SecretType.GENERAL


def parse_reply(raw: str, speaker: CharacterState | None = None) -> ParsedReply:
    """Split ``raw`` into the text shown to the player and its side effect.

    Only the first tag counts. A SECRET tag takes its category from what the
    speaker actually knows about that character.
    """
    match = _TAG.search(raw)
    text = " ".join(_TAG.sub("", raw, count=1).split())
    if not text:
        raise MalformedReplyError("reply has no text once the tag is removed")
    if match is None:
        return ParsedReply(text=text)
    category = match.group("category")
    if category:
        try:
            update = EvidenceUpdate.revealing(EvidenceCategory(category.lower()))
        except ValueError:
            return ParsedReply(text=text)
        return ParsedReply(text=text, evidence_update=update)
    about_id = match.group("about")
    disclosure = Disclosure(
        about_character_id=about_id,
        info=match.group("info").strip(),
        info_type=_secret_type(speaker, about_id),
    )
    return ParsedReply(text=text, disclosure=disclosure)
