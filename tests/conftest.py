"""Shared pytest fixtures for daily_stars unit tests."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from daily_stars.credentials import CredentialStore, KeyValueStore
from daily_stars.schema import Book, Chapter, Section


@pytest.fixture()
def saturn_chapter() -> Chapter:
    return Chapter(
        number="4",
        title="Saturn Returns",
        body="Saturn governs karma and structure. " + "Patience is rewarded over the long arc of life. " * 10,
    )


@pytest.fixture()
def sample_book(saturn_chapter) -> Book:
    return Book(
        title="Astrology",
        sections=(
            Section(
                number="I",
                title="The Heavens",
                chapters=(
                    Chapter(
                        number="1",
                        title="The Signs of the Zodiac",
                        body="The zodiac is divided into twelve signs of thirty degrees each.",
                    ),
                    Chapter(
                        number="2",
                        title="The Planets",
                        body="Venus governs the affections. Mars denotes energy and courage.",
                    ),
                ),
            ),
            Section(
                number="II",
                title="The Horoscope",
                chapters=(
                    Chapter(
                        number="3",
                        title="The Twelve Houses",
                        body="The seventh house governs marriage and partnership.",
                    ),
                    saturn_chapter,
                ),
            ),
        ),
    )


@pytest.fixture()
def empty_book() -> Book:
    return Book(title="Empty")


@pytest.fixture()
def kv_store(tmp_path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "state.json")


@pytest.fixture()
def credentials(kv_store, monkeypatch) -> CredentialStore:
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    store = CredentialStore(kv_store)
    store.set_api_key("sk-or-test")
    return store


@pytest.fixture()
def no_credentials(kv_store, monkeypatch) -> CredentialStore:
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    return CredentialStore(kv_store)


def make_chat_response(content: str | None, images: list | None = None) -> MagicMock:
    """Build a minimal fake chat completion response object."""
    message = MagicMock()
    message.content = content
    message.images = images
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def bind_client(mock_cls: MagicMock) -> MagicMock:
    """Make a patched OpenAI class hand back one client, also from ``with``/``async with``."""
    client = mock_cls.return_value
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    return client
