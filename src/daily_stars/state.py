"""Application state and the top-level controller that owns it.

Views never reach for globals: they receive the `DailyStars` controller (or
its `AppState`) and read or mutate session data through it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from opentelemetry import trace

from .chat import ChatSession
from .credentials import CredentialStore, KeyValueStore
from .horoscopes import HoroscopeBoard, HoroscopeGenerator
from .images import AspectRatio, create_image, suggest_image_prompt
from .library import load_book
from .natal import export_report, generate_natal_report
from .openrouter import is_error
from .schema import BirthDetails, Book, GeneratedImage, HoroscopeEntry, HoroscopeKey, NatalChartReport
from .settings import GenerationSettings, Paths, load_settings
from .single_flight import SingleFlight


@dataclass
class AppState:
    """Everything generated during one session, plus the stored credential."""

    credentials: CredentialStore
    generated_images: list[GeneratedImage] = field(default_factory=list)
    natal_reports: list[NatalChartReport] = field(default_factory=list)
    horoscopes: HoroscopeBoard = field(default_factory=HoroscopeBoard)
    planetary_contexts: SingleFlight[str] = field(default_factory=lambda: SingleFlight(is_failure=is_error))

    def has_unsaved_content(self) -> bool:
        return bool(self.generated_images or self.natal_reports or self.horoscopes.has_success())


class DailyStars:
    """Controller wiring settings, the reference book and every feature service."""

    def __init__(
        self,
        settings: GenerationSettings,
        paths: Paths,
        book: Book,
        state: AppState,
        tracer: trace.Tracer | None = None,
    ) -> None:
        self.settings = settings
        self.paths = paths
        self.book = book
        self.state = state
        self.horoscope_generator = HoroscopeGenerator(
            settings,
            state.credentials,
            state.horoscopes,
            contexts=state.planetary_contexts,
            tracer=tracer,
        )
        self.chat = ChatSession(book, state.credentials, model=settings.chat_model, tracer=tracer)

    @classmethod
    def from_environment(cls, tracer: trace.Tracer | None = None) -> DailyStars:
        settings, paths = load_settings()
        credentials = CredentialStore(KeyValueStore(paths.state_path))
        return cls(settings, paths, load_book(paths.book_path), AppState(credentials=credentials), tracer=tracer)

    @property
    def credentials(self) -> CredentialStore:
        return self.state.credentials

    async def generate_horoscope(
        self,
        key: HoroscopeKey,
        user_directive: str = "",
        day: date | None = None,
    ) -> HoroscopeEntry:
        return await self.horoscope_generator.generate(key, user_directive=user_directive, day=day)

    async def generate_all_horoscopes(self, user_directive: str = "", day: date | None = None) -> HoroscopeBoard:
        return await self.horoscope_generator.generate_all(user_directive=user_directive, day=day)

    def ask(self, question: str) -> str | None:
        return self.chat.send(question)

    def create_natal_report(
        self,
        details: BirthDetails,
        user_directive: str = "",
        model: str | None = None,
    ) -> NatalChartReport:
        """Generate a natal report and keep it at the top of the session list."""
        api_key = self.credentials.require_api_key()
        report = generate_natal_report(details, model or self.settings.chat_model, api_key, user_directive)
        self.state.natal_reports.insert(0, report)
        return report

    def export_natal_report(self, report: NatalChartReport, directory: str | Path | None = None) -> Path:
        return export_report(report, directory or self.paths.reports_dir)

    def suggest_image_prompt(self) -> str:
        return suggest_image_prompt(self.credentials.require_api_key())

    def create_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
        model: str | None = None,
    ) -> GeneratedImage:
        """Generate an image and keep it at the top of the session gallery."""
        api_key = self.credentials.require_api_key()
        image = create_image(prompt, model or self.settings.image_model, api_key, aspect_ratio=aspect_ratio)
        self.state.generated_images.insert(0, image)
        return image
