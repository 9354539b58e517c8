from __future__ import annotations

import logging

from opentelemetry import trace

from .credentials import CredentialStore
from .matching import find_relevant_context
from .openrouter import generate_text
from .prompts import CHAT_GREETING, build_chat_messages
from .schema import Book, ChatMessage
from .tracing import traced_generation, traced_matcher

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "openai/gpt-4o"


class ChatSession:
    """Conversation with Stella grounded in the reference book.

    The session owns its message history. Each question is answered from the
    most recent turns plus, when one matches, a chapter of the book.
    """

    def __init__(
        self,
        book: Book,
        credentials: CredentialStore,
        model: str = DEFAULT_CHAT_MODEL,
        tracer: trace.Tracer | None = None,
    ) -> None:
        self.book = book
        self.credentials = credentials
        self.model = model
        self.messages: list[ChatMessage] = [ChatMessage(role="assistant", content=CHAT_GREETING)]
        if tracer is not None:
            self._match = traced_matcher(find_relevant_context, tracer)
            self._generate = traced_generation(generate_text, tracer)
        else:
            self._match = find_relevant_context
            self._generate = generate_text

    def send(self, question: str) -> str | None:
        """Ask a question and record both sides of the exchange.

        Args:
            question: User text; blank input is ignored.

        Returns:
            Assistant reply (error-marked on upstream failure), or `None` for blank input.

        Raises:
            MissingCredentialError: If no API key is configured.
        """
        if not question.strip():
            return None
        api_key = self.credentials.require_api_key()

        history = list(self.messages)
        self.messages.append(ChatMessage(role="user", content=question))
        outgoing = build_chat_messages(history, question, self.book, matcher=self._match)
        logger.debug("Sending chat turn with %d messages", len(outgoing))

        reply = self._generate(self.model, outgoing, api_key)
        self.messages.append(ChatMessage(role="assistant", content=reply))
        return reply

    def reset(self) -> None:
        self.messages = [ChatMessage(role="assistant", content=CHAT_GREETING)]
