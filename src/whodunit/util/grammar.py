"""Lightweight grammar normalization for dialogue strings."""

from __future__ import annotations

import re

_FIRST_ALPHA = re.compile(r"[A-Za-z]")
_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)


def normalize_line(text: str) -> str:
    """Normalize spacing and capitalize the first letter without changing meaning."""
    if not text:
        return text
    stripped = " ".join(text.strip().split())
    if not stripped:
        return stripped
    match = _FIRST_ALPHA.search(stripped)
    if not match:
        return stripped
    idx = match.start()
    # Leave stage directions like "*sighs*" alone.
    if stripped.startswith("*") or stripped[idx].isupper():
        return stripped
    return stripped[:idx] + stripped[idx].upper() + stripped[idx + 1 :]


def place_with_article(place: str) -> str:
    """Ensure location strings read naturally with an article."""
    trimmed = place.strip()
    if _ARTICLE.match(trimmed):
        return trimmed
    return f"the {trimmed}"


def near_place(place: str) -> str:
    """'the study' -> 'near the study'."""
    return f"near {place_with_article(place)}"


def lower_first(text: str) -> str:
    if not text or text.startswith(("I ", "I'")):
        return text
    return text[0].lower() + text[1:]


def indefinite(noun: str) -> str:
    """'ice pick' -> 'an ice pick'."""
    trimmed = noun.strip()
    article = "an" if trimmed[:1].lower() in "aeiou" else "a"
    return f"{article} {trimmed}"
