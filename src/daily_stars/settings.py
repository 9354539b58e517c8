from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .schema import ZodiacSign

DEFAULT_MODELS = [
    "openai/gpt-4o",
    "google/gemini-2.5-pro",
    "anthropic/claude-3-haiku",
    "mistralai/mistral-large",
    "meta-llama/llama-3-70b-instruct",
]

DEFAULT_IMAGE_MODELS = [
    "google/gemini-2.5-flash-image-preview",
    "openai/dall-e-3",
    "fal.ai/stable-diffusion-v3-medium",
    "google/imagen-4.0",
    "midjourney",
]

DEFAULT_THEMES = [
    "Mystical & Esoteric",
    "Modern & Actionable",
    "Poetic & Reflective",
    "Humorous & Lighthearted",
    "Stoic & Philosophical",
]

ZODIAC_EMOJI: dict[ZodiacSign, str] = {
    ZodiacSign.ARIES: "♈",
    ZodiacSign.TAURUS: "♉",
    ZodiacSign.GEMINI: "♊",
    ZodiacSign.CANCER: "♋",
    ZodiacSign.LEO: "♌",
    ZodiacSign.VIRGO: "♍",
    ZodiacSign.LIBRA: "♎",
    ZodiacSign.SCORPIO: "♏",
    ZodiacSign.SAGITTARIUS: "♐",
    ZodiacSign.CAPRICORN: "♑",
    ZodiacSign.AQUARIUS: "♒",
    ZodiacSign.PISCES: "♓",
}
BIRTHDAY_EMOJI = "\U0001f382"


@dataclass(slots=True)
class GenerationSettings:
    """Model and style configuration for text and image generation calls."""

    chat_model: str = DEFAULT_MODELS[0]
    image_model: str = DEFAULT_IMAGE_MODELS[0]
    theme: str = DEFAULT_THEMES[0]
    daily_word_count: int = 75
    birthday_word_count: int = 120


@dataclass(slots=True)
class Paths:
    """Locations of the reference book and the persisted key-value state."""

    book_path: str = "data/astrology_book.json"
    state_path: str = ".daily_stars/state.json"
    reports_dir: str = "reports"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> tuple[GenerationSettings, Paths]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple containing generation settings and common path settings.
    """
    load_dotenv()
    defaults = GenerationSettings()
    default_paths = Paths()
    return (
        GenerationSettings(
            chat_model=os.getenv("DAILY_STARS_CHAT_MODEL", defaults.chat_model),
            image_model=os.getenv("DAILY_STARS_IMAGE_MODEL", defaults.image_model),
            theme=os.getenv("DAILY_STARS_THEME", defaults.theme),
            daily_word_count=_int_env("DAILY_STARS_DAILY_WORDS", defaults.daily_word_count),
            birthday_word_count=_int_env("DAILY_STARS_BIRTHDAY_WORDS", defaults.birthday_word_count),
        ),
        Paths(
            book_path=os.getenv("DAILY_STARS_BOOK_PATH", default_paths.book_path),
            state_path=os.getenv("DAILY_STARS_STATE_PATH", default_paths.state_path),
            reports_dir=os.getenv("DAILY_STARS_REPORTS_DIR", default_paths.reports_dir),
        ),
    )
