"""User memos: search phrase -> emoji overrides, persisted in config.json."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Tuple

from . import config
from .catalog import Catalog
from .errors import InvalidInput, IOFailure, SerializationError
from .search import search


def default_config() -> Dict[str, object]:
    return {"mappings": {}, "model": None}


def _parse_config(raw_text: str, path: Path) -> Tuple[Dict[str, str], str | None]:
    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"{path} is not valid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise SerializationError(f"{path} must contain a JSON object")
    raw_mappings = payload.get("mappings")
    if raw_mappings is None:
        raw_mappings = {}
    if not isinstance(raw_mappings, dict):
        raise SerializationError(f"{path}: 'mappings' must be an object")
    mappings: Dict[str, str] = {}
    for term, value in raw_mappings.items():
        if not isinstance(value, str) or len(value) != 1:
            raise SerializationError(f"{path}: mapping for {term!r} must be a single character")
        mappings[str(term)] = value
    model = payload.get("model")
    if model is not None and not isinstance(model, str):
        raise SerializationError(f"{path}: 'model' must be a string or null")
    return mappings, model


def is_index(value: str) -> bool:
    """True for strings that name a 1-based result position (e.g. ``"2"``)."""
    return value.isascii() and value.isdigit()


class MemoStore:
    """Read-all / mutate / write-all view over the persisted memo mappings."""

    def __init__(self, mappings: Dict[str, str] | None = None, model: str | None = None,
                 path: Path | None = None) -> None:
        self.mappings: Dict[str, str] = dict(mappings or {})
        self.model = model
        self.path = path

    @classmethod
    def load(cls, path: Path | None = None) -> "MemoStore":
        """Load the store; a missing file is the empty default."""
        path = Path(path) if path is not None else config.config_path()
        if not path.exists():
            return cls(path=path)
        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise IOFailure(f"could not read {path} ({exc})") from exc
        mappings, model = _parse_config(raw_text, path)
        return cls(mappings, model, path)

    def to_dict(self) -> Dict[str, object]:
        payload = default_config()
        payload["mappings"] = dict(self.mappings)
        payload["model"] = self.model
        return payload

    def save(self) -> None:
        path = self.path if self.path is not None else config.config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise IOFailure(f"could not write {path} ({exc})") from exc
        self.path = path

    def lookup(self, term: str) -> str | None:
        return self.mappings.get(term)

    def save_memo(self, term: str, value: str, catalog: Catalog) -> str:
        """Bind ``term`` to an emoji and persist; returns the stored character.

        ``value`` is either the emoji itself (only its first character is kept)
        or a 1-based index into the current search results for ``term``.
        """
        if not term or not value:
            raise InvalidInput("Cannot save mapping for empty search term or emoji")
        if is_index(value):
            index = int(value)
            if index == 0:
                raise InvalidInput("Index must be greater than 0")
            results = search(catalog, term, index)
            if len(results) < index:
                raise InvalidInput(f"Only {len(results)} results found, cannot select index {index}")
            emoji = results[index - 1][0]
        else:
            emoji = value[0]
        self.mappings[term] = emoji
        self.save()
        return emoji

    def erase(self, term: str) -> bool:
        """Remove the memo for ``term``; False (and no write) if there was none."""
        if not term:
            raise InvalidInput("Cannot erase mapping for empty search term")
        if term not in self.mappings:
            return False
        del self.mappings[term]
        self.save()
        return True

    def set_model(self, model_id: str) -> None:
        self.model = model_id
        self.save()

    def list_mappings(self) -> List[Tuple[str, str]]:
        return sorted(self.mappings.items())
