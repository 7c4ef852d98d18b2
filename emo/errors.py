"""Error kinds surfaced by emo operations."""

from __future__ import annotations


class EmoError(Exception):
    """Base class for every failure the CLI reports as ``Error: <message>``."""

    prefix = ""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}{self.message}"


class IOFailure(EmoError):
    prefix = "IO error: "


class SerializationError(EmoError):
    prefix = "JSON error: "


class InvalidInput(EmoError):
    prefix = "Invalid input: "


class ConfigurationError(EmoError):
    """Model acquisition, loading or inference failed.

    ``generated_text`` holds whatever the model produced before giving up,
    when the failure came from a generation that never yielded an emoji.
    """

    prefix = "Configuration error: "

    def __init__(self, message: str, generated_text: str | None = None) -> None:
        super().__init__(message)
        self.generated_text = generated_text
