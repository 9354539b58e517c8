"""Keyword-overlap matcher that picks a reference chapter for a chat question.

Scoring is a flat scan over every chapter: each query token adds
``TITLE_HIT_WEIGHT`` when it appears in the chapter title and
``BODY_HIT_WEIGHT`` when it appears in the opening of the chapter body.
The threshold and window below were tuned by hand and are kept as-is.
"""
from __future__ import annotations

from .library import iter_chapters
from .schema import Book, Chapter, MatchResult

# Tokens of this length or shorter carry no signal.
MIN_TOKEN_LENGTH = 3
# Only the opening of a chapter body is scored; the full body is returned.
BODY_PREVIEW_CHARS = 250
TITLE_HIT_WEIGHT = 5
BODY_HIT_WEIGHT = 1
# A chapter must score strictly above this to be used.
MIN_MATCH_SCORE = 3


def query_tokens(query: str) -> list[str]:
    """Lower-cased whitespace tokens longer than ``MIN_TOKEN_LENGTH``."""
    return [token for token in query.lower().split() if len(token) > MIN_TOKEN_LENGTH]


def score_chapter(tokens: list[str], chapter: Chapter) -> int:
    """Score one chapter against pre-tokenized query words.

    Args:
        tokens: Output of `query_tokens`.
        chapter: Chapter to score.

    Returns:
        Sum of title and truncated-body substring hits.
    """
    title = chapter.title.lower()
    preview = chapter.body[:BODY_PREVIEW_CHARS].lower()

    score = 0
    for token in tokens:
        if token in title:
            score += TITLE_HIT_WEIGHT
        if token in preview:
            score += BODY_HIT_WEIGHT
    return score


def find_relevant_context(query: str, book: Book) -> MatchResult | None:
    """Return the best-matching chapter for a free-text question.

    Ties keep the earliest chapter in section/chapter order.

    Args:
        query: User question.
        book: Reference corpus to scan.

    Returns:
        Title and full body of the winning chapter, or `None` when no chapter
        scores above `MIN_MATCH_SCORE`.
    """
    tokens = query_tokens(query)
    if not tokens:
        return None

    best: Chapter | None = None
    best_score = 0
    for chapter in iter_chapters(book):
        score = score_chapter(tokens, chapter)
        if score > best_score:
            best, best_score = chapter, score

    if best is None or best_score <= MIN_MATCH_SCORE:
        return None
    return MatchResult(chapter_title=best.title, chapter_body=best.body)
