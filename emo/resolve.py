"""Turn a query into emoji: memos first, then lexical search, or the AI path."""

from __future__ import annotations

import random
from typing import Iterator, List, Tuple

from .catalog import Catalog, EmojiRecord, load_catalog, to_char
from .errors import InvalidInput
from .memo import MemoStore
from .search import search

ResolutionResult = List[Tuple[str, EmojiRecord | None]]

# Extra search results fetched when a memo occupies the first slot, so a
# collision between the memo and a search hit still leaves enough results.
MEMO_LOOKAHEAD = 5


def resolve(catalog: Catalog, term: str, count: int, memo: str | None = None) -> ResolutionResult:
    """Blend an optional memo with lexical results for ``term``.

    The memo always takes the first slot and never appears again; with
    ``count == 1`` the search is skipped entirely.
    """
    if count < 1:
        raise InvalidInput(f"result count must be at least 1, got {count}")
    if memo is None:
        return list(search(catalog, term, count))
    results: ResolutionResult = [(memo, None)]
    if count == 1:
        return results
    for char, record in search(catalog, term, count + MEMO_LOOKAHEAD):
        if char == memo:
            continue
        results.append((char, record))
        if len(results) >= count:
            break
    return results


def resolve_with_store(catalog: Catalog, store: MemoStore, term: str, count: int) -> ResolutionResult:
    return resolve(catalog, term, count, store.lookup(term))


def format_results(results: ResolutionResult, show_number: bool = False) -> List[str]:
    lines: List[str] = []
    for position, (char, _) in enumerate(results, start=1):
        lines.append(f"{position}. {char}" if show_number else char)
    return lines


def describe(char: str, record: EmojiRecord) -> str:
    definition = record.get("definition") or ""
    return f"{char} - {record['name']} {definition}".rstrip()


def define(catalog: Catalog, text: str) -> str | None:
    """Describe the emoji at the start of ``text``, or the best search hit for it."""
    if not text:
        return None
    first_char = text[0]
    for record in catalog:
        try:
            char = to_char(record)
        except InvalidInput:
            continue
        if char == first_char:
            return describe(char, record)
    results = search(catalog, text, 1)
    if not results:
        return None
    char, record = results[0]
    return describe(char, record)


def random_pick(catalog: Catalog, rng: random.Random | None = None) -> str:
    if not catalog:
        raise InvalidInput("No emojis available")
    record = (rng or random).choice(list(catalog))
    return f"{to_char(record)} - {record['name']}"


def ai_emojis(selector, situation: str, count: int) -> Iterator[str]:
    """Yield ``count`` distinct AI picks for ``situation``; memos are never consulted."""
    seen: List[str] = []
    for _ in range(count):
        emoji = selector.select_emoji_with_exclusions(situation, seen)
        seen.append(emoji)
        yield emoji


def ai_sentences(selector, situation: str, length: int, count: int = 1) -> Iterator[str]:
    for _ in range(count):
        yield selector.generate_emoji_sentence(situation, length)


class SearchGenerator:
    """Single emoji from lexical search."""

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.catalog = catalog

    def generate(self, text: str) -> str:
        catalog = self.catalog if self.catalog is not None else load_catalog()
        results = search(catalog, text, 1)
        if not results:
            raise InvalidInput(f"No emoji found for '{text}'")
        return results[0][0]


class MemoGenerator:
    """Single emoji from the memo mappings."""

    def __init__(self, mappings=None) -> None:
        self.mappings = dict(mappings or {})

    def generate(self, text: str) -> str:
        emoji = self.mappings.get(text)
        if emoji is None:
            raise InvalidInput("No memo found")
        return emoji
