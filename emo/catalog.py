"""The bundled emoji catalog.

Records are plain dicts with ``keywords``, ``unicode`` (``U+XXXX``), ``name``
and the optional ``shortcode`` / ``definition`` fields. Only single code point
records are admitted, so the catalog never holds ZWJ or flag sequences.
"""

from __future__ import annotations

import json
import os
import re
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .errors import InvalidInput, SerializationError

EmojiRecord = Dict[str, object]
Catalog = Sequence[EmojiRecord]
WordIndex = Dict[str, Set[int]]

DATA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "emojis.json")
MAX_CODE_POINT = 0x10FFFF
WORD_BOUNDARY = re.compile(r"[\W_]+")

_CATALOG: List[EmojiRecord] | None = None
_INDEX_CACHE: Tuple[Catalog, Dict[str, WordIndex]] | None = None


def is_single_code_point(record: EmojiRecord) -> bool:
    return " " not in str(record.get("unicode", "")).strip()


def filter_records(records: Iterable[EmojiRecord]) -> List[EmojiRecord]:
    """Drop compound (space separated, multi code point) records, keeping order."""
    return [record for record in records if is_single_code_point(record)]


def parse_records(raw_text: str) -> List[EmojiRecord]:
    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"bundled emoji data is malformed ({exc})") from exc
    if not isinstance(payload, list):
        raise SerializationError("bundled emoji data must be a JSON array")
    records: List[EmojiRecord] = []
    for entry in payload:
        if not isinstance(entry, dict) or "unicode" not in entry or "name" not in entry:
            raise SerializationError(f"bundled emoji record is incomplete: {entry!r}")
        record: EmojiRecord = {
            "keywords": [str(word) for word in entry.get("keywords") or []],
            "unicode": str(entry["unicode"]),
            "name": str(entry["name"]),
            "shortcode": entry.get("shortcode"),
            "definition": entry.get("definition"),
        }
        records.append(record)
    return records


def load_catalog() -> List[EmojiRecord]:
    """Load the bundled catalog once per process and hand back the shared list."""
    global _CATALOG
    if _CATALOG is not None:
        return _CATALOG
    with open(DATA_PATH, encoding="utf-8") as handle:
        raw_text = handle.read()
    _CATALOG = filter_records(parse_records(raw_text))
    return _CATALOG


def to_char(record: EmojiRecord) -> str:
    """Decode a record's ``U+XXXX`` field to its character."""
    raw = str(record.get("unicode", ""))
    parts = raw.split()
    if not parts:
        raise InvalidInput(f"Invalid unicode: {raw}")
    hex_str = parts[0]
    if hex_str.upper().startswith("U+"):
        hex_str = hex_str[2:]
    try:
        code_point = int(hex_str, 16)
    except ValueError:
        raise InvalidInput(f"Invalid hex code: {hex_str}") from None
    if code_point < 0 or code_point > MAX_CODE_POINT or 0xD800 <= code_point <= 0xDFFF:
        raise InvalidInput(f"Invalid code point: {code_point}")
    return chr(code_point)


def split_words(text: str) -> List[str]:
    """Lowercased words of ``text``; any non-alphanumeric character is a boundary."""
    return [word for word in WORD_BOUNDARY.split(text.lower()) if word]


def _build_word_index(catalog: Catalog) -> Dict[str, WordIndex]:
    name_index: WordIndex = defaultdict(set)
    keyword_index: WordIndex = defaultdict(set)
    for position, record in enumerate(catalog):
        for word in split_words(str(record.get("name", ""))):
            name_index[word].add(position)
        for keyword in record.get("keywords") or []:
            for word in split_words(str(keyword)):
                keyword_index[word].add(position)
    return {"name": dict(name_index), "keywords": dict(keyword_index)}


def word_index(catalog: Catalog) -> Dict[str, WordIndex]:
    """Return the name/keyword word index for ``catalog``, building it on first use."""
    global _INDEX_CACHE
    if _INDEX_CACHE is not None and _INDEX_CACHE[0] is catalog:
        return _INDEX_CACHE[1]
    index = _build_word_index(catalog)
    # Only the most recent catalog is kept; in practice that is the bundled one.
    _INDEX_CACHE = (catalog, index)
    return index
