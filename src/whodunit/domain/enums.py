"""Shared enums for case facts, dialogue and evidence."""

from __future__ import annotations

from enum import StrEnum


class CauseOfDeath(StrEnum):
    STABBED = "stabbed"
    POISONED = "poisoned"
    STRANGLED = "strangled"
    SHOT = "shot"


class Trait(StrEnum):
    MOTIVE = "motive"
    MEANS = "means"
    OPPORTUNITY = "opportunity"


class Opinion(StrEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class SecretType(StrEnum):
    MOTIVE = "motive"
    MEANS = "means"
    OPPORTUNITY = "opportunity"
    GENERAL = "general"


class SuspicionLevel(StrEnum):
    NONE = "none"
    ONE = "one"
    MULTIPLE = "multiple"


class EvidenceCategory(StrEnum):
    NAME = "name"
    RELATIONSHIP = "relationship"
    ITEM = "item"
    MOTIVE = "motive"
    MEANS = "means"
    OPPORTUNITY = "opportunity"


VICTIM_ID = "victim"
