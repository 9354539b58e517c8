"""Exception types raised by the Daily Stars services."""
from __future__ import annotations


class DailyStarsError(Exception):
    """Base class for every error raised by this package."""


class CorpusError(DailyStarsError):
    """The reference book could not be loaded or is malformed."""


class MissingCredentialError(DailyStarsError):
    """No OpenRouter API key is configured."""

    def __init__(self, message: str = "OpenRouter API key is not provided. Please add it in the settings.") -> None:
        super().__init__(message)


class IncompleteBirthDetailsError(DailyStarsError, ValueError):
    """A natal chart was requested without all required birth details."""


class GenerationError(DailyStarsError):
    """The completion API returned an error-marked reply."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
