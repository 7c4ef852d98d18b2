"""Tiered lexical search over the emoji catalog.

Tiers, in strict priority order:
1. Record name equals the whole query (case-insensitive).
2. Every query word is a whole word of the name.
3. Every query word is a whole word of one keyword entry.
4. Every query word is a substring of the name.
5. Every query word is a substring of one keyword entry.
6. Every query word is a substring of the definition.

A tier is scanned completely, in catalog order, before the next one starts, and
the scan stops as soon as ``limit`` distinct characters were collected.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, Set, Tuple

from .catalog import Catalog, EmojiRecord, split_words, to_char, word_index
from .errors import InvalidInput

SearchResult = List[Tuple[str, EmojiRecord]]
TierPredicate = Callable[[EmojiRecord, str, Sequence[str]], bool]


def query_words(query: str) -> List[str]:
    return [word.lower() for word in query.split()]


def all_words_match(text: str, words: Sequence[str], exact: bool) -> bool:
    lowered = text.lower()
    if exact:
        text_words = set(split_words(lowered))
        return all(word in text_words for word in words)
    return all(word in lowered for word in words)


def _keywords(record: EmojiRecord) -> List[str]:
    return [str(keyword) for keyword in record.get("keywords") or []]


def _name_equals_query(record: EmojiRecord, query: str, words: Sequence[str]) -> bool:
    return str(record.get("name", "")).lower() == query.lower()


def _name_has_words(record: EmojiRecord, query: str, words: Sequence[str]) -> bool:
    return all_words_match(str(record.get("name", "")), words, exact=True)


def _keyword_has_words(record: EmojiRecord, query: str, words: Sequence[str]) -> bool:
    return any(all_words_match(keyword, words, exact=True) for keyword in _keywords(record))


def _name_contains_words(record: EmojiRecord, query: str, words: Sequence[str]) -> bool:
    return all_words_match(str(record.get("name", "")), words, exact=False)


def _keyword_contains_words(record: EmojiRecord, query: str, words: Sequence[str]) -> bool:
    return any(all_words_match(keyword, words, exact=False) for keyword in _keywords(record))


def _definition_contains_words(record: EmojiRecord, query: str, words: Sequence[str]) -> bool:
    definition = record.get("definition")
    if not definition:
        return False
    return all_words_match(str(definition), words, exact=False)


# (predicate, word-index field used to narrow candidates or None for a full scan)
TIERS: Tuple[Tuple[TierPredicate, str | None], ...] = (
    (_name_equals_query, None),
    (_name_has_words, "name"),
    (_keyword_has_words, "keywords"),
    (_name_contains_words, None),
    (_keyword_contains_words, None),
    (_definition_contains_words, None),
)


def _candidate_positions(catalog: Catalog, field: str | None, words: Sequence[str]) -> Iterable[int]:
    """Catalog positions worth checking for a tier, in catalog order."""
    if field is None or not words:
        return range(len(catalog))
    index = word_index(catalog)[field]
    candidates: Set[int] | None = None
    for word in words:
        positions = index.get(word)
        if not positions:
            return ()
        candidates = set(positions) if candidates is None else candidates & positions
        if not candidates:
            return ()
    return sorted(candidates or ())


def search(catalog: Catalog, query: str, limit: int) -> SearchResult:
    """Return up to ``limit`` (character, record) pairs for ``query``, best first."""
    if limit < 1:
        raise InvalidInput(f"result limit must be at least 1, got {limit}")
    words = query_words(query)
    if not words:
        return []
    results: SearchResult = []
    seen: Set[str] = set()
    for predicate, field in TIERS:
        for position in _candidate_positions(catalog, field, words):
            record = catalog[position]
            if not predicate(record, query, words):
                continue
            try:
                char = to_char(record)
            except InvalidInput:
                continue
            if char in seen:
                continue
            seen.add(char)
            results.append((char, record))
            if len(results) >= limit:
                return results
    return results
