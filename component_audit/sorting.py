"""Locale-aware ordering for display names.

Plain string comparison sorts every uppercase letter before every lowercase
one, puts "_" after the digits and pushes accented letters after "z". The
key below compares in three levels instead, the way a collator does:

1. base characters, accents stripped and case folded, with spaces,
   punctuation and symbols before digits and digits before letters
2. accents
3. case, lowercase first

so "button" < "Button" < "buttons", "_1" < "11" and "éclair" sorts next
to "eclair".
"""

from __future__ import annotations

import unicodedata

# Primary weight classes
_PUNCTUATION = 0
_DIGIT = 1
_LETTER = 2


def _char_class(ch: str) -> int:
    category = unicodedata.category(ch)
    if category[0] in "PSZC":
        return _PUNCTUATION
    if category == "Nd":
        return _DIGIT
    return _LETTER


def _strip_accents(text: str) -> tuple[str, str]:
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    marks = "".join(ch if unicodedata.combining(ch) else " " for ch in decomposed)
    return base, marks


def collation_key(text: str) -> tuple:
    """Sort key giving a stable, human-expected alphabetic order."""
    text = text or ""
    base, marks = _strip_accents(text)
    primary = tuple((_char_class(ch), ch) for ch in base.casefold())
    tertiary = tuple(0 if not ch.isupper() else 1 for ch in base)
    return (primary, marks, tertiary, text)


def sort_by_name(items: list[dict], field: str = "name") -> list[dict]:
    """Stable sort of record dicts by one of their display-name fields."""
    return sorted(items, key=lambda item: collation_key(item.get(field, "")))
