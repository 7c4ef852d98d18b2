"""Model registry (Hugging Face listing) and local model acquisition.

Nothing here falls back to a built-in model list: if the registry cannot be
reached or a model cannot be fetched, a ConfigurationError is raised.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Dict, List

from . import config
from .errors import ConfigurationError

ModelInfo = Dict[str, object]

REGISTRY_LIMIT = 10
REGISTRY_DETAIL_LIMIT = 6
REQUEST_TIMEOUT = 10
WEIGHT_SUFFIX = ".safetensors"
MARKER_FILE = "config.json"


def _get_json(url: str) -> object:
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=REQUEST_TIMEOUT) as resp:
            return json.load(resp)
    except urllib.error.HTTPError as exc:
        raise ConfigurationError(f"Failed to fetch {url}: HTTP {exc.code}") from exc
    except urllib.error.URLError as exc:
        raise ConfigurationError(f"Failed to fetch {url}: {exc.reason}") from exc
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Failed to fetch {url}: {exc}") from exc


def model_id_for(repo_name: str) -> str:
    """Short id from a repo name, e.g. ``Llama-3.2-1B-Instruct`` -> ``llama-3.2-1b``."""
    parts = [part for part in repo_name.replace("_", "-").split("-") if part]
    return "-".join(parts[:3]).lower()


def format_size(size_mb: int) -> str:
    if size_mb < 1000:
        return f"{size_mb}MB"
    return f"{size_mb / 1000:.1f}GB"


def _weights_size(files: object) -> int | None:
    if not isinstance(files, list):
        return None
    total = 0
    found = False
    for entry in files:
        if not isinstance(entry, dict):
            continue
        path = str(entry.get("path", ""))
        if path.endswith(WEIGHT_SUFFIX):
            found = True
            total += int(entry.get("size") or 0)
    return total if found else None


def describe_model(repo: str, size_bytes: int) -> ModelInfo:
    owner, _, repo_name = repo.rpartition("/")
    size_mb = size_bytes // 1_000_000
    return {
        "id": model_id_for(repo_name),
        "name": repo_name.replace("_", " "),
        "repo": repo,
        "size_mb": size_mb,
        "description": f"{format_size(size_mb)} • by {owner or 'unknown'}",
    }


def fetch_models() -> List[ModelInfo]:
    """List downloadable text-generation models, most downloaded first."""
    api_base = config.hf_api_base()
    query = urllib.parse.urlencode(
        {
            "search": config.model_search_phrase(),
            "pipeline_tag": "text-generation",
            "library": "transformers",
            "sort": "downloads",
            "direction": "-1",
            "limit": str(REGISTRY_LIMIT),
        }
    )
    listing = _get_json(f"{api_base}/api/models?{query}")
    if not isinstance(listing, list) or not listing:
        raise ConfigurationError("No models found from HuggingFace")

    models: List[ModelInfo] = []
    seen_ids = set()
    for entry in listing[:REGISTRY_DETAIL_LIMIT]:
        if not isinstance(entry, dict):
            continue
        repo = str(entry.get("modelId") or entry.get("id") or "")
        if not repo:
            continue
        try:
            files = _get_json(f"{api_base}/api/models/{repo}/tree/main")
        except ConfigurationError:
            # One unreachable repo should not hide the others.
            continue
        size_bytes = _weights_size(files)
        if size_bytes is None:
            continue
        model = describe_model(repo, size_bytes)
        if model["id"] in seen_ids:
            continue
        seen_ids.add(model["id"])
        models.append(model)

    if not models:
        raise ConfigurationError("No compatible models found")
    return models


def find_model(models: List[ModelInfo], model_id: str | None) -> ModelInfo:
    if not models:
        raise ConfigurationError("No models available from HuggingFace")
    if model_id is None:
        return models[0]
    for model in models:
        if model["id"] == model_id:
            return model
    raise ConfigurationError(f"Model '{model_id}' not found")


def local_model_dir(model_id: str, models_dir: Path | None = None) -> Path:
    return (models_dir or config.models_dir()) / model_id


def is_model_present(path: Path) -> bool:
    return (path / MARKER_FILE).is_file()


def download_model(model: ModelInfo, target: Path) -> Path:
    """Fetch ``model`` with transformers and store it under ``target``."""
    try:
        from transformers import AutoModelForCausalLM, AutoTokenizer
    except Exception as exc:
        raise ConfigurationError(f"transformers unavailable ({exc.__class__.__name__})") from exc

    config.info(f"📥 Downloading {model['name']} model ({model['id']})...", key="model-download")
    config.info("This is a one-time download for AI-powered emoji selection.", key="model-download-note")
    repo = str(model["repo"])
    try:
        tokenizer = AutoTokenizer.from_pretrained(repo)
        lm = AutoModelForCausalLM.from_pretrained(repo)
        target.mkdir(parents=True, exist_ok=True)
        tokenizer.save_pretrained(str(target))
        lm.save_pretrained(str(target))
    except Exception as exc:
        raise ConfigurationError(f"Failed to download model: {exc}") from exc
    config.info(f"✅ Model stored in {target}", key="model-stored")
    return target


def resolve_model_path(model_id: str | None = None, models_dir: Path | None = None) -> Path:
    """Return a local directory holding the model, downloading it when absent."""
    if model_id is not None:
        cached = local_model_dir(model_id, models_dir)
        if is_model_present(cached):
            return cached
    model = find_model(fetch_models(), model_id)
    target = local_model_dir(str(model["id"]), models_dir)
    if is_model_present(target):
        return target
    return download_model(model, target)
