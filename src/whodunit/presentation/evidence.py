"""Evidence records the player accumulates during an interrogation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from whodunit.domain.enums import EvidenceCategory, SecretType


class CharacterEvidence(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name_revealed: bool = False
    relationship_revealed: bool = False
    item_revealed: bool = False
    motive_revealed: bool = False
    means_revealed: bool = False
    opportunity_revealed: bool = False
    motive_text: Optional[str] = None
    means_text: Optional[str] = None
    opportunity_text: Optional[str] = None

    def is_revealed(self, category: EvidenceCategory) -> bool:
        return bool(getattr(self, f"{EvidenceCategory(category).value}_revealed"))


class EvidenceUpdate(BaseModel):
    """Flags raised by one reply. ``None`` leaves the ledger untouched."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name_revealed: Optional[bool] = None
    relationship_revealed: Optional[bool] = None
    item_revealed: Optional[bool] = None
    motive_revealed: Optional[bool] = None
    means_revealed: Optional[bool] = None
    opportunity_revealed: Optional[bool] = None
    motive_text: Optional[str] = None
    means_text: Optional[str] = None
    opportunity_text: Optional[str] = None

    @classmethod
    def revealing(cls, category: EvidenceCategory, text: str | None = None) -> "EvidenceUpdate":
        category = EvidenceCategory(category)
        fields: dict[str, object] = {f"{category.value}_revealed": True}
        if text is not None and category in (
            EvidenceCategory.MOTIVE,
            EvidenceCategory.MEANS,
            EvidenceCategory.OPPORTUNITY,
        ):
            fields[f"{category.value}_text"] = text
        return cls(**fields)

    def merged(self, other: "EvidenceUpdate | None") -> "EvidenceUpdate":
        if other is None:
            return self
        values = self.model_dump()
        for key, value in other.model_dump().items():
            if value is not None and not values.get(key):
                values[key] = value
        return EvidenceUpdate(**values)

    def categories(self) -> list[EvidenceCategory]:
        return [
            category
            for category in EvidenceCategory
            if getattr(self, f"{category.value}_revealed")
        ]


class Disclosure(BaseModel):
    """A secret a speaker shared about another character."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    about_character_id: str
    info: str
    info_type: SecretType = SecretType.GENERAL


class DisclosureRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    from_character_id: str
    about_character_id: str
    info: str
    info_type: SecretType = SecretType.GENERAL


class TranscriptEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    character_id: str
    question: str
    answer: str
