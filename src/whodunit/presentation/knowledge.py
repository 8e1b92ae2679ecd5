"""Caller-owned evidence ledger for one play-through."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from whodunit import config
from whodunit.presentation.evidence import (
    CharacterEvidence,
    Disclosure,
    DisclosureRecord,
    EvidenceUpdate,
    TranscriptEntry,
)

_FLAG_FIELDS = (
    "name_revealed",
    "relationship_revealed",
    "item_revealed",
    "motive_revealed",
    "means_revealed",
    "opportunity_revealed",
)
_TEXT_FIELDS = ("motive_text", "means_text", "opportunity_text")


class EvidenceLedger(BaseModel):
    """What the player has learned so far.

    Flags only ever flip from false to true, disclosures are kept once per
    ``(about_character_id, info)`` and the question budget counts down by
    one per answered question.
    """

    model_config = ConfigDict(extra="forbid")

    characters: dict[str, CharacterEvidence] = Field(default_factory=dict)
    disclosures: list[DisclosureRecord] = Field(default_factory=list)
    questions_asked: int = 0
    question_limit: int = config.QUESTION_LIMIT
    accused_id: Optional[str] = None
    accusation_correct: Optional[bool] = None
    transcript: list[TranscriptEntry] = Field(default_factory=list)

    def evidence_for(self, character_id: str) -> CharacterEvidence:
        return self.characters.setdefault(character_id, CharacterEvidence())

    def apply_update(self, character_id: str, update: EvidenceUpdate | None) -> CharacterEvidence:
        evidence = self.evidence_for(character_id)
        if update is None:
            return evidence
        for name in _FLAG_FIELDS:
            if getattr(update, name):
                setattr(evidence, name, True)
        for name in _TEXT_FIELDS:
            text = getattr(update, name)
            if text and not getattr(evidence, name):
                setattr(evidence, name, text)
        return evidence

    def record_disclosure(self, from_character_id: str, disclosure: Disclosure | None) -> bool:
        """Store a shared secret. Returns False when it is already known."""
        if disclosure is None:
            return False
        for existing in self.disclosures:
            if (
                existing.about_character_id == disclosure.about_character_id
                and existing.info == disclosure.info
            ):
                return False
        self.disclosures.append(
            DisclosureRecord(
                from_character_id=from_character_id,
                about_character_id=disclosure.about_character_id,
                info=disclosure.info,
                info_type=disclosure.info_type,
            )
        )
        return True

    def disclosures_about(
        self, about_character_id: str, from_character_id: str | None = None
    ) -> list[DisclosureRecord]:
        return [
            record
            for record in self.disclosures
            if record.about_character_id == about_character_id
            and (from_character_id is None or record.from_character_id == from_character_id)
        ]

    def remaining_questions(self) -> int:
        return max(0, self.question_limit - self.questions_asked)

    def is_exhausted(self) -> bool:
        return self.remaining_questions() == 0

    def record_question(self, character_id: str, question: str, answer: str) -> None:
        self.questions_asked += 1
        self.transcript.append(
            TranscriptEntry(character_id=character_id, question=question, answer=answer)
        )

    def history_for(self, character_id: str) -> list[dict[str, str]]:
        """Role-tagged turns of the conversation with one character."""
        turns: list[dict[str, str]] = []
        for entry in self.transcript:
            if entry.character_id != character_id:
                continue
            turns.append({"role": "user", "content": entry.question})
            turns.append({"role": "assistant", "content": entry.answer})
        return turns
