"""Loading and browsing of the reference astrology book."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

from .errors import CorpusError
from .schema import Book, Chapter, Section

logger = logging.getLogger(__name__)


def _require(record: dict[str, Any], key: str, where: str) -> Any:
    try:
        return record[key]
    except KeyError as exc:
        raise CorpusError(f"Missing '{key}' in {where}.") from exc


def _chapter_from_dict(record: dict[str, Any]) -> Chapter:
    return Chapter(
        number=str(_require(record, "chapter_number", "chapter")),
        title=str(_require(record, "chapter_title", "chapter")),
        body=str(_require(record, "content", "chapter")),
        page=str(record.get("page", "")),
    )


def _section_from_dict(record: dict[str, Any]) -> Section:
    chapters = tuple(_chapter_from_dict(chapter) for chapter in record.get("chapters", []))
    return Section(
        number=str(_require(record, "section_number", "section")),
        title=str(_require(record, "section_title", "section")),
        chapters=chapters,
        pages=tuple(str(page) for page in record.get("pages", [])),
    )


def book_from_dict(record: dict[str, Any]) -> Book:
    """Build a validated Book from its JSON representation.

    Args:
        record: Mapping with `book_title` and a `sections` list.

    Returns:
        Immutable Book instance.

    Raises:
        CorpusError: If a required key is missing or chapter numbers repeat.
    """
    book = Book(
        title=str(_require(record, "book_title", "book")),
        sections=tuple(_section_from_dict(section) for section in record.get("sections", [])),
    )

    seen: set[str] = set()
    for chapter in iter_chapters(book):
        if chapter.number in seen:
            raise CorpusError(f"Duplicate chapter number '{chapter.number}'.")
        seen.add(chapter.number)
    return book


def load_book(path: str | Path = "data/astrology_book.json") -> Book:
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as file_handle:
            record = json.load(file_handle)
    except FileNotFoundError as exc:
        raise CorpusError(f"Reference book not found at {source}.") from exc
    except json.JSONDecodeError as exc:
        raise CorpusError(f"Reference book at {source} is not valid JSON: {exc}") from exc

    book = book_from_dict(record)
    logger.info("Loaded '%s' with %d chapters", book.title, sum(1 for _ in iter_chapters(book)))
    return book


def iter_chapters(book: Book) -> Iterator[Chapter]:
    """Yield every chapter in section/chapter order."""
    for section in book.sections:
        yield from section.chapters


def find_chapter(book: Book, number: str) -> Chapter | None:
    for chapter in iter_chapters(book):
        if chapter.number == number:
            return chapter
    return None


def table_of_contents(book: Book) -> list[tuple[Section, list[Chapter]]]:
    return [(section, list(section.chapters)) for section in book.sections]
