"""Text normalization shared by the matching heuristics."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

MIN_TOKEN_LENGTH = 4

_NON_ALNUM = re.compile(r"[\W_]+")


def normalize_title(value: str | None) -> str:
    """Casefold, drop punctuation and collapse whitespace.

    Punctuation is removed rather than replaced, so ``"Meta-analysis"`` and
    ``"metaanalysis"`` normalize identically.
    """

    if not value:
        return ""
    text = unicodedata.normalize("NFKC", value).casefold()
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))
    return " ".join(text.split())


def normalize_text(value: str | None) -> str:
    """Casefold and turn every non-alphanumeric run into a single space."""

    if not value:
        return ""
    text = unicodedata.normalize("NFKC", value).casefold()
    return " ".join(_NON_ALNUM.sub(" ", text).split())


def tokenize(value: str | None) -> list[str]:
    return [token for token in normalize_text(value).split(" ") if len(token) >= MIN_TOKEN_LENGTH]


def token_set(*values: str | None) -> frozenset[str]:
    tokens: set[str] = set()
    for value in values:
        tokens.update(tokenize(value))
    return frozenset(tokens)


def jaccard(left: frozenset[str] | set[str], right: frozenset[str] | set[str]) -> float:
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def unique_normalized(items: Iterable[str] | None) -> tuple[str, ...]:
    """Normalize ``items`` and drop blanks and repeats, keeping first-seen order."""

    if not items:
        return ()
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        normalized = normalize_text(item)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        out.append(normalized)
    return tuple(out)
