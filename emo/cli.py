"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import List, Sequence

from .ai import AiEmojiSelector
from .catalog import load_catalog
from .errors import EmoError, InvalidInput
from .memo import MemoStore
from .models import fetch_models
from .resolve import (
    ai_emojis,
    ai_sentences,
    define,
    format_results,
    random_pick,
    resolve_with_store,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="emo", description="CLI for finding emojis")
    parser.add_argument("-c", "--count", type=int, default=1, help="number of results to show")
    parser.add_argument("-d", "--define", action="store_true", help="define the specified emoji")
    parser.add_argument(
        "-m",
        "--memo",
        dest="save",
        metavar="EMOJI_OR_INDEX",
        help="save a mapping for the search term to a specific emoji or index",
    )
    parser.add_argument("-e", "--erase", action="store_true", help="erase the mapping for the specified search term")
    parser.add_argument("-n", "--number", action="store_true", help="display the number of a given emoji result")
    parser.add_argument("-l", "--list-mappings", action="store_true", help="list all saved mappings")
    parser.add_argument("-r", "--random", action="store_true", help="get a random emoji")
    parser.add_argument("--ai", action="store_true", help="use AI to select the best emoji for your situation")
    parser.add_argument("--model", help="specify the AI model to use")
    parser.add_argument("--list-models", action="store_true", help="list available AI models")
    parser.add_argument(
        "-s",
        "--sentence",
        type=int,
        metavar="LENGTH",
        help="length of each emoji sentence (use with -c for multiple sentences)",
    )
    parser.add_argument("search_terms", nargs="*", help="search term or situation")
    return parser


def handle_list_models() -> None:
    models = fetch_models()
    print("Available models:")
    print("")
    width = max((len(str(model["id"])) for model in models), default=10)
    for model in models:
        print(f"  {str(model['id']):<{width}}  {model['name']}  {model['description']}")
    print("")
    print("To use a model, set it in your config file or use --model <id>")


def handle_list_mappings(store: MemoStore) -> None:
    entries = store.list_mappings()
    if not entries:
        print("No saved mappings.")
        return
    print("Saved mappings:")
    for term, emoji in entries:
        print(f"  {term} → {emoji}")


def handle_save(store: MemoStore, value: str, term: str) -> None:
    emoji = store.save_memo(term, value, load_catalog())
    print(f"{term} ➡ {emoji} ✅")


def handle_erase(store: MemoStore, term: str) -> None:
    if store.erase(term):
        print(f"Mapping for '{term}' erased ✅")
    else:
        print(f"No mapping found for '{term}'")


def handle_ai(store: MemoStore, situation: str, model: str | None, count: int, sentence: int | None) -> None:
    selector = AiEmojiSelector(model or store.model)
    if sentence is not None:
        for line in ai_sentences(selector, situation, sentence, count):
            print(line)
        return
    for emoji in ai_emojis(selector, situation, count):
        print(emoji)


def run(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.list_models:
        handle_list_models()
        return
    if args.list_mappings:
        handle_list_mappings(MemoStore.load())
        return
    if args.random:
        print(random_pick(load_catalog()))
        return

    store = MemoStore.load()

    if args.model:
        store.set_model(args.model)

    terms: List[str] = args.search_terms
    if not terms:
        raise InvalidInput("Please provide a search term or situation")
    term = " ".join(terms)

    if args.ai or args.model:
        handle_ai(store, term, args.model, args.count, args.sentence)
    elif args.erase:
        handle_erase(store, term)
    elif args.save is not None:
        handle_save(store, args.save, term)
    elif args.define:
        description = define(load_catalog(), term)
        if description:
            print(description)
    else:
        results = resolve_with_store(load_catalog(), store, term, args.count)
        for line in format_results(results, args.number):
            print(line)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    try:
        run(argv)
    except EmoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0
