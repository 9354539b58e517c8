from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True, slots=True)
class Chapter:
    """Single chapter of the reference book."""

    number: str
    title: str
    body: str
    page: str = ""


@dataclass(frozen=True, slots=True)
class Section:
    """Ordered group of chapters inside the reference book."""

    number: str
    title: str
    chapters: tuple[Chapter, ...] = ()
    pages: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Book:
    """Read-only reference corpus used for chat context matching."""

    title: str
    sections: tuple[Section, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Best-scoring chapter returned by the relevance matcher."""

    chapter_title: str
    chapter_body: str


@dataclass(slots=True)
class ChatMessage:
    """Role-tagged message sent to or received from the completion API."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class ZodiacSign(str, Enum):
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


class HoroscopeKey(str, Enum):
    """Every card on the horoscope board: the twelve signs plus birthdays."""

    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"
    TODAYS_BIRTHDAY = "Today's Birthday"

    @property
    def is_birthday(self) -> bool:
        return self is HoroscopeKey.TODAYS_BIRTHDAY

    @classmethod
    def for_sign(cls, sign: ZodiacSign) -> HoroscopeKey:
        return cls(sign.value)


class HoroscopeStatus(str, Enum):
    PENDING = "pending"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True)
class HoroscopeEntry:
    """Generation status and text of one horoscope card."""

    status: HoroscopeStatus = HoroscopeStatus.PENDING
    text: str = ""


@dataclass(slots=True)
class GeneratedImage:
    """Image produced in the current session."""

    id: str
    url: str
    prompt: str


@dataclass(slots=True)
class NatalChartReport:
    """Markdown natal chart reading together with the details it was built from."""

    id: str
    name: str
    birth_date: str
    birth_time: str
    birth_location: str
    reading: str
    user_directive: str = ""


@dataclass(slots=True)
class AugmentedPrompt:
    """User message text after optional reference splicing."""

    final_user_text: str
    used_reference: bool = False
    match: MatchResult | None = field(default=None, repr=False)


@dataclass(slots=True)
class BirthDetails:
    """Birth data a natal chart reading is generated from."""

    name: str
    birth_date: str
    birth_time: str
    birth_location: str

    def missing_fields(self) -> list[str]:
        return [
            label
            for label, value in (
                ("name", self.name),
                ("birth_date", self.birth_date),
                ("birth_time", self.birth_time),
                ("birth_location", self.birth_location),
            )
            if not value or not value.strip()
        ]
