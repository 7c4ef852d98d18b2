"""Per-user configuration location, environment flags and stderr notices."""

from __future__ import annotations

import os
import platform
import sys
from pathlib import Path
from typing import Set


def _env_flag(name: str) -> bool:
    value = os.environ.get(name, "")
    return value.strip().lower() in {"1", "true", "yes", "on", "enable"}


APP_DIR_NAME = "emo"
CONFIG_FILE_NAME = "config.json"
MODELS_DIR_NAME = "models"
DEFAULT_HF_API_BASE = "https://huggingface.co"
DEFAULT_MODEL_SEARCH = "Instruct"

_EMITTED_NOTICES: Set[str] = set()


def torch_disabled() -> bool:
    """True when the AI path was switched off through the environment."""
    return _env_flag("EMO_AI_DISABLE_TORCH")


def hf_api_base() -> str:
    return os.environ.get("EMO_HF_API_BASE", DEFAULT_HF_API_BASE).strip().rstrip("/") or DEFAULT_HF_API_BASE


def model_search_phrase() -> str:
    return os.environ.get("EMO_MODEL_SEARCH", DEFAULT_MODEL_SEARCH).strip() or DEFAULT_MODEL_SEARCH


def config_root() -> Path:
    """Return the per-user configuration root, honouring XDG_CONFIG_HOME."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg_config:
        return Path(xdg_config)
    system = platform.system()
    home = Path.home()
    if system == "Darwin":
        return home / "Library" / "Application Support"
    if system == "Windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return home / "AppData" / "Roaming"
    return home / ".config"


def app_dir() -> Path:
    return config_root() / APP_DIR_NAME


def config_path() -> Path:
    return app_dir() / CONFIG_FILE_NAME


def models_dir() -> Path:
    return app_dir() / MODELS_DIR_NAME


def info(message: str, key: str | None = None) -> None:
    """Write an ``[info]`` line to stderr; with ``key`` set, only once per process."""
    if key is not None:
        if key in _EMITTED_NOTICES:
            return
        _EMITTED_NOTICES.add(key)
    print(f"[info] {message}", file=sys.stderr)
