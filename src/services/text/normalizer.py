"""Text canonicalization shared by matching and search."""

from __future__ import annotations

import re
import unicodedata

_DISALLOWED = re.compile(r"[^a-z0-9а-яё]+")


def normalize(text: str | None) -> str:
    """Return the canonical comparison form of ``text``.

    Diacritics are stripped via compatibility decomposition, everything but
    Latin/Cyrillic letters and digits becomes a space, and whitespace runs are
    collapsed. Empty or missing input yields an empty string.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(text)).lower()
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(_DISALLOWED.sub(" ", stripped).split())
