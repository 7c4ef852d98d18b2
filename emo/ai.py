"""AI-assisted emoji selection with a local causal language model.

The flow for one pick:
1. Build a prompt asking for exactly one emoji, listing the emoji to avoid.
2. Pull decoded text fragments from the model one sampled token at a time.
3. Scan every fragment; the first character inside the emoji ranges wins and
   the generation is abandoned right there.
4. If the step or character budget runs out, or the model stops on its own,
   fail with a ConfigurationError that carries the generated text.

There is no lexical fallback: a failed pick is always reported as an error.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, List, Sequence, Tuple

from . import config
from .errors import ConfigurationError
from .models import resolve_model_path

EMOJI_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x1F300, 0x1F9FF),  # pictographs, emoticons, transport, supplemental
    (0x2600, 0x26FF),  # misc symbols
    (0x2700, 0x27BF),  # dingbats
    (0x1F000, 0x1F02F),  # mahjong / domino
    (0x1FA70, 0x1FAFF),  # symbols & pictographs extended-A
)

CONTEXT_SIZE = 2048
TEMPERATURE = 0.2
SAMPLING_SEED = 1234
MAX_GENERATION_STEPS = 20
MAX_GENERATED_CHARS = 50
REPLACEMENT_CHAR = "\ufffd"


def is_emoji_char(ch: str) -> bool:
    code_point = ord(ch)
    return any(low <= code_point <= high for low, high in EMOJI_RANGES)


def build_prompt(situation: str, exclude: Sequence[str] = ()) -> str:
    if not exclude:
        return (
            f"Task: Select ONE emoji that best represents: {situation}. "
            "Reply with only the emoji, nothing else.\nEmoji:"
        )
    return (
        f"Task: Select ONE emoji that best represents: {situation}. "
        f"Do not use: {', '.join(exclude)}. Reply with only the emoji.\nEmoji:"
    )


class TransformersGenerator:
    """Token-by-token text generation over a transformers causal LM.

    ``stream`` returns a lazy generator; closing it abandons the generation.
    """

    def __init__(
        self,
        model_id: str | None = None,
        model_path: Path | None = None,
        context_size: int = CONTEXT_SIZE,
        temperature: float = TEMPERATURE,
        seed: int = SAMPLING_SEED,
        path_resolver: Callable[[str | None], Path] = resolve_model_path,
    ) -> None:
        self.model_id = model_id
        self.model_path = model_path
        self.context_size = context_size
        self.temperature = temperature
        self.seed = seed
        self.path_resolver = path_resolver
        self._torch = None
        self._tokenizer = None
        self._model = None

    def _load(self):
        if self._model is not None:
            return self._torch, self._tokenizer, self._model
        if config.torch_disabled():
            raise ConfigurationError("AI selection disabled via EMO_AI_DISABLE_TORCH environment variable")
        try:
            import torch
            from transformers import AutoModelForCausalLM, AutoTokenizer
        except Exception as exc:
            raise ConfigurationError(f"torch/transformers unavailable ({exc.__class__.__name__})") from exc

        if self.model_path is None:
            self.model_path = self.path_resolver(self.model_id)
        try:
            tokenizer = AutoTokenizer.from_pretrained(str(self.model_path))
            model = AutoModelForCausalLM.from_pretrained(str(self.model_path))
            model.eval()
        except Exception as exc:
            raise ConfigurationError(f"Failed to load model: {exc}") from exc
        self._torch, self._tokenizer, self._model = torch, tokenizer, model
        config.info(f"AI emoji selection enabled ({Path(self.model_path).name}, via transformers).", key="model-ready")
        return torch, tokenizer, model

    def _eos_ids(self, tokenizer, model) -> set:
        ids = set()
        for value in (tokenizer.eos_token_id, getattr(model.generation_config, "eos_token_id", None)):
            if isinstance(value, int):
                ids.add(value)
            elif isinstance(value, (list, tuple)):
                ids.update(int(item) for item in value)
        return ids

    def stream(self, prompt: str) -> Iterator[str]:
        torch, tokenizer, model = self._load()
        return self._generate(torch, tokenizer, model, prompt)

    def _generate(self, torch, tokenizer, model, prompt: str) -> Iterator[str]:
        max_prompt_tokens = max(1, self.context_size // 2)
        inputs = tokenizer(prompt, return_tensors="pt", truncation=True, max_length=max_prompt_tokens)
        input_ids = inputs["input_ids"]
        position = int(input_ids.shape[-1])
        eos_ids = self._eos_ids(tokenizer, model)
        sampler = torch.Generator().manual_seed(self.seed)
        past = None
        generated: List[int] = []
        emitted = ""
        with torch.no_grad():
            while position < self.context_size:
                try:
                    outputs = model(input_ids=input_ids, past_key_values=past, use_cache=True)
                except Exception as exc:
                    raise ConfigurationError(f"Failed to decode: {exc}") from exc
                past = outputs.past_key_values
                logits = outputs.logits[:, -1, :].float()
                probs = torch.softmax(logits / self.temperature, dim=-1)
                next_token = torch.multinomial(probs, num_samples=1, generator=sampler)
                token_id = int(next_token[0, 0])
                if token_id in eos_ids:
                    return
                generated.append(token_id)
                text = tokenizer.decode(generated, skip_special_tokens=True)
                if text.endswith(REPLACEMENT_CHAR):
                    # Partial multi-byte character; wait for the next token.
                    fragment = ""
                elif text.startswith(emitted):
                    fragment = text[len(emitted):]
                    emitted = text
                else:
                    fragment = text
                    emitted = text
                yield fragment
                input_ids = next_token
                position += 1


def consume_for_emoji(
    fragments: Iterator[str],
    exclude: Sequence[str] = (),
    max_steps: int = MAX_GENERATION_STEPS,
    max_chars: int = MAX_GENERATED_CHARS,
) -> str:
    """Return the first emoji in ``fragments`` not in ``exclude``, closing the stream right away."""
    output = ""
    try:
        for step, fragment in enumerate(fragments, start=1):
            output += fragment
            for ch in fragment:
                if is_emoji_char(ch) and ch not in exclude:
                    return ch
            if step >= max_steps or len(output) > max_chars:
                break
    finally:
        close = getattr(fragments, "close", None)
        if close is not None:
            close()
    raise ConfigurationError(
        f"LLM did not generate an emoji. Generated text: '{output}'",
        generated_text=output,
    )


class AiEmojiSelector:
    """Picks emoji for a situation, one model call per emoji."""

    def __init__(self, model_id: str | None = None, generator=None) -> None:
        self.model_id = model_id
        self.generator = generator if generator is not None else TransformersGenerator(model_id)

    def select_emoji(self, situation: str) -> str:
        return self.select_emoji_with_exclusions(situation, [])

    def select_emoji_with_exclusions(self, situation: str, exclude: Sequence[str]) -> str:
        prompt = build_prompt(situation, exclude)
        return consume_for_emoji(self.generator.stream(prompt), exclude)

    def generate_emoji_sentence(self, situation: str, length: int) -> str:
        """Concatenate ``length`` distinct picks; any failed pick fails the sentence."""
        exclude: List[str] = []
        for _ in range(length):
            emoji = self.select_emoji_with_exclusions(situation, exclude)
            exclude.append(emoji)
        return "".join(exclude)
