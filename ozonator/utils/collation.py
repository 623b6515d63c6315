"""
Russian, numeric-aware text collation.

Orders strings the way the grid shows them to a Russian-speaking user:
case and accents are ignored (``ё`` sorts as ``е``), digit runs compare by
numeric value (``"Item 9" < "Item 10"``), and characters are grouped as
punctuation/spaces < digits < Cyrillic < Latin < everything else.
"""
from __future__ import annotations

import re
import unicodedata

_DIGITS_RE = re.compile(r"[0-9]+")

# Letters that are distinct in the Russian alphabet and must keep their mark
_KEEP_MARKED = {"й"}

RANK_SEPARATOR = 0
RANK_DIGITS = 1
RANK_CYRILLIC = 2
RANK_LATIN = 3
RANK_OTHER = 4

CollationKey = tuple[tuple[int, object], ...]


def _fold(text: str) -> str:
    folded = []
    for ch in text.casefold():
        if ch in _KEEP_MARKED:
            folded.append(ch)
            continue
        for part in unicodedata.normalize("NFD", ch):
            if not unicodedata.combining(part):
                folded.append(part)
    return "".join(folded)


def _char_rank(ch: str) -> int:
    if not ch.isalnum():
        return RANK_SEPARATOR
    name = unicodedata.name(ch, "")
    if name.startswith("CYRILLIC"):
        return RANK_CYRILLIC
    if name.startswith("LATIN"):
        return RANK_LATIN
    return RANK_OTHER


def ru_collation_key(text: str) -> CollationKey:
    """
    Build a comparable key for ``text``.

    Every element is a ``(rank, value)`` pair; digit runs carry an ``int``
    value and every other character its folded form, so two keys always
    compare without mixing types.
    """
    folded = _fold(text)
    key: list[tuple[int, object]] = []
    position = 0
    for match in _DIGITS_RE.finditer(folded):
        for ch in folded[position:match.start()]:
            key.append((_char_rank(ch), ch))
        key.append((RANK_DIGITS, int(match.group())))
        position = match.end()
    for ch in folded[position:]:
        key.append((_char_rank(ch), ch))
    return tuple(key)


def compare_text_ru(left: str, right: str) -> int:
    """Three-way comparison (-1, 0, 1) of two strings by Russian collation."""
    left_key = ru_collation_key(left)
    right_key = ru_collation_key(right)
    return (left_key > right_key) - (left_key < right_key)
