"""Tests for library.py — reference book loading and browsing."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from daily_stars.errors import CorpusError
from daily_stars.library import book_from_dict, find_chapter, iter_chapters, load_book, table_of_contents
from daily_stars.schema import Book

BUNDLED_BOOK = Path(__file__).resolve().parents[1] / "data" / "astrology_book.json"


def _record(chapters_per_section: list[list[str]]) -> dict:
    return {
        "book_title": "Astrology",
        "sections": [
            {
                "section_number": str(section_idx + 1),
                "section_title": f"Section {section_idx + 1}",
                "pages": ["1"],
                "chapters": [
                    {
                        "chapter_number": number,
                        "chapter_title": f"Chapter {number}",
                        "page": "1",
                        "content": f"Body {number}",
                    }
                    for number in numbers
                ],
            }
            for section_idx, numbers in enumerate(chapters_per_section)
        ],
    }


class TestBookFromDict:
    def test_builds_nested_structure(self):
        book = book_from_dict(_record([["1", "2"], ["3"]]))
        assert isinstance(book, Book)
        assert book.title == "Astrology"
        assert len(book.sections) == 2
        assert book.sections[0].chapters[1].title == "Chapter 2"
        assert book.sections[1].chapters[0].body == "Body 3"

    def test_sequences_are_tuples(self):
        book = book_from_dict(_record([["1"]]))
        assert isinstance(book.sections, tuple)
        assert isinstance(book.sections[0].chapters, tuple)

    def test_duplicate_chapter_numbers_rejected(self):
        with pytest.raises(CorpusError, match="Duplicate chapter number '2'"):
            book_from_dict(_record([["1", "2"], ["2"]]))

    def test_missing_title_rejected(self):
        record = _record([["1"]])
        del record["book_title"]
        with pytest.raises(CorpusError, match="book_title"):
            book_from_dict(record)

    def test_missing_chapter_content_rejected(self):
        record = _record([["1"]])
        del record["sections"][0]["chapters"][0]["content"]
        with pytest.raises(CorpusError, match="content"):
            book_from_dict(record)

    def test_no_sections_is_empty_book(self):
        book = book_from_dict({"book_title": "Empty"})
        assert book.sections == ()


class TestLoadBook:
    def test_loads_from_file(self, tmp_path):
        path = tmp_path / "book.json"
        path.write_text(json.dumps(_record([["1", "2"]])), encoding="utf-8")
        book = load_book(path)
        assert [chapter.number for chapter in iter_chapters(book)] == ["1", "2"]

    def test_missing_file_raises_corpus_error(self, tmp_path):
        with pytest.raises(CorpusError, match="not found"):
            load_book(tmp_path / "missing.json")

    def test_invalid_json_raises_corpus_error(self, tmp_path):
        path = tmp_path / "book.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorpusError, match="not valid JSON"):
            load_book(path)

    def test_bundled_book_loads(self):
        book = load_book(BUNDLED_BOOK)
        assert book.sections
        assert find_chapter(book, "4") is not None


class TestBrowsing:
    def test_iter_chapters_in_order(self, sample_book):
        assert [chapter.number for chapter in iter_chapters(sample_book)] == ["1", "2", "3", "4"]

    def test_find_chapter(self, sample_book):
        chapter = find_chapter(sample_book, "3")
        assert chapter is not None
        assert chapter.title == "The Twelve Houses"

    def test_find_chapter_missing(self, sample_book):
        assert find_chapter(sample_book, "99") is None

    def test_table_of_contents(self, sample_book):
        toc = table_of_contents(sample_book)
        assert [section.title for section, _ in toc] == ["The Heavens", "The Horoscope"]
        assert len(toc[1][1]) == 2
