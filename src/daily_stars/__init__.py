"""The Daily Stars: astrology content generation with Stella."""

from .matching import find_relevant_context
from .prompts import compose_augmented_prompt
from .schema import AugmentedPrompt, Book, Chapter, ChatMessage, MatchResult, Section

__all__ = [
    "Book",
    "Section",
    "Chapter",
    "ChatMessage",
    "MatchResult",
    "AugmentedPrompt",
    "find_relevant_context",
    "compose_augmented_prompt",
]
