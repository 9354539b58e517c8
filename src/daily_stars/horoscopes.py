"""Daily horoscopes for the twelve signs plus a birthday reading.

Every card is written against the same "cosmic weather report" for the day.
That report is fetched once per date through a `SingleFlight` cache, so
generating all thirteen cards at once costs a single extra request.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Sequence

from opentelemetry import trace

from .credentials import CredentialStore
from .errors import GenerationError
from .openrouter import agenerate_text, is_error
from .prompts import (
    build_horoscope_messages,
    build_horoscope_prompt,
    build_planetary_summary_prompt,
    format_long_date,
)
from .schema import ChatMessage, HoroscopeEntry, HoroscopeKey, HoroscopeStatus
from .settings import GenerationSettings
from .single_flight import SingleFlight
from .tracing import traced_ageneration

logger = logging.getLogger(__name__)


class HoroscopeBoard:
    """One `HoroscopeEntry` per `HoroscopeKey`, all pending on creation."""

    def __init__(self) -> None:
        self._entries: dict[HoroscopeKey, HoroscopeEntry] = {key: HoroscopeEntry() for key in HoroscopeKey}

    def __getitem__(self, key: HoroscopeKey) -> HoroscopeEntry:
        return self._entries[key]

    def __iter__(self):
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def set(self, key: HoroscopeKey, status: HoroscopeStatus, text: str = "") -> HoroscopeEntry:
        entry = HoroscopeEntry(status=status, text=text)
        self._entries[key] = entry
        return entry

    def is_any_loading(self) -> bool:
        return any(entry.status is HoroscopeStatus.LOADING for entry in self._entries.values())

    def has_success(self) -> bool:
        return any(entry.status is HoroscopeStatus.SUCCESS for entry in self._entries.values())

    def reset(self) -> None:
        for key in HoroscopeKey:
            self._entries[key] = HoroscopeEntry()


class HoroscopeGenerator:
    """Write horoscope cards into a board using a shared planetary context."""

    def __init__(
        self,
        settings: GenerationSettings,
        credentials: CredentialStore,
        board: HoroscopeBoard,
        contexts: SingleFlight[str] | None = None,
        tracer: trace.Tracer | None = None,
    ) -> None:
        self.settings = settings
        self.credentials = credentials
        self.board = board
        self.contexts = contexts if contexts is not None else SingleFlight[str](is_failure=is_error)
        self.tracer = tracer

    async def _generate(self, messages: Sequence[ChatMessage], api_key: str) -> str:
        if self.tracer is None:
            return await agenerate_text(self.settings.chat_model, messages, api_key)
        generate = traced_ageneration(agenerate_text, self.tracer)
        return await generate(self.settings.chat_model, messages, api_key)

    async def planetary_context(self, date_text: str, api_key: str) -> str:
        """Return the day's cosmic weather report, fetching it at most once."""
        prompt = build_planetary_summary_prompt(date_text)
        messages = [ChatMessage(role="user", content=prompt)]
        return await self.contexts.do(
            date_text,
            lambda: self._generate(messages, api_key),
        )

    async def generate(
        self,
        key: HoroscopeKey,
        user_directive: str = "",
        day: date | None = None,
    ) -> HoroscopeEntry:
        """Generate one card and store the outcome on the board.

        Args:
            key: Sign or birthday card to write.
            user_directive: Optional instruction overriding the configured tone.
            day: Date of the reading, today when omitted.

        Returns:
            The stored entry, either successful or carrying the error text.

        Raises:
            MissingCredentialError: If no API key is configured.
        """
        api_key = self.credentials.require_api_key()
        self.board.set(key, HoroscopeStatus.LOADING)
        date_text = format_long_date(day or date.today())

        try:
            context = await self.planetary_context(date_text, api_key)
            if is_error(context):
                raise GenerationError(context)

            word_count = self.settings.birthday_word_count if key.is_birthday else self.settings.daily_word_count
            prompt = build_horoscope_prompt(
                key,
                date_text,
                context,
                theme=self.settings.theme,
                word_count=word_count,
                user_directive=user_directive,
            )
            text = await self._generate(build_horoscope_messages(prompt), api_key)
            if is_error(text):
                raise GenerationError(text)
        except GenerationError as exc:
            logger.warning("Horoscope for %s failed: %s", key.value, exc.message)
            return self.board.set(key, HoroscopeStatus.ERROR, exc.message)
        except BaseException:
            # cancelled or crashed mid-flight; the card must not stay loading
            self.board.set(key, HoroscopeStatus.PENDING)
            raise

        return self.board.set(key, HoroscopeStatus.SUCCESS, text)

    async def generate_all(self, user_directive: str = "", day: date | None = None) -> HoroscopeBoard:
        """Generate every card concurrently."""
        self.credentials.require_api_key()
        await asyncio.gather(*(self.generate(key, user_directive=user_directive, day=day) for key in HoroscopeKey))
        return self.board
