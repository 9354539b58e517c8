"""OpenTelemetry tracing for context matching and completion calls.

Usage with an OTLP backend (e.g. Arize Phoenix):

    from daily_stars.tracing import configure_tracing, get_tracer, traced_generation

    configure_tracing(endpoint="http://localhost:6006/v1/traces")
    generate = traced_generation(generate_text, get_tracer("daily-stars.chat"))
    reply = generate("openai/gpt-4o", messages, api_key)

Without an endpoint, spans are printed to stdout.
"""
from __future__ import annotations

from typing import Awaitable, Callable, Sequence

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter

from .openrouter import is_error
from .schema import Book, MatchResult

# OpenInference attribute names
ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_LLM_MODEL_NAME = "llm.model_name"
ATTR_LLM_MESSAGE_COUNT = "llm.input_messages.count"
ATTR_RETRIEVAL_DOCUMENTS = "retrieval.documents"
ATTR_REFERENCE_TITLE = "daily_stars.reference.title"

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "daily-stars",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register a global TracerProvider.

    Args:
        endpoint: OTLP HTTP endpoint to export to. Ignored when *exporter* is given.
        service_name: Service label shown by the observability backend.
        exporter: Pre-built exporter, e.g. ``InMemorySpanExporter`` in tests.

    Returns:
        The configured provider, also installed as the global OTel provider.
    """
    global _provider

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export traces to an OTLP endpoint. "
                "Install it with:\n  pip install 'daily-stars[otlp]'"
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Tracer from the configured provider, or the no-op global one."""
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)


def traced_matcher(
    matcher: Callable[[str, Book], MatchResult | None],
    tracer: trace.Tracer,
) -> Callable[[str, Book], MatchResult | None]:
    """Wrap a relevance matcher so each lookup records a ``context-match`` span."""

    def _wrapped(query: str, book: Book) -> MatchResult | None:
        with tracer.start_as_current_span("context-match") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query)
            result = matcher(query, book)
            span.set_attribute(ATTR_RETRIEVAL_DOCUMENTS, 0 if result is None else 1)
            if result is not None:
                span.set_attribute(ATTR_REFERENCE_TITLE, result.chapter_title)
            span.set_status(trace.StatusCode.OK)
            return result

    return _wrapped


def traced_generation(
    generate: Callable[[str, Sequence, str], str],
    tracer: trace.Tracer,
) -> Callable[[str, Sequence, str], str]:
    """Wrap a ``generate_text``-style callable in a ``generation`` span.

    Error-marked replies set the span status to ERROR even though the wrapped
    callable returned normally.
    """

    def _wrapped(model: str, messages: Sequence, api_key: str) -> str:
        with tracer.start_as_current_span("generation") as span:
            _record_request(span, model, messages)
            try:
                text = generate(model, messages, api_key)
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise
            _record_reply(span, text)
            return text

    return _wrapped


def traced_ageneration(
    generate: Callable[[str, Sequence, str], Awaitable[str]],
    tracer: trace.Tracer,
) -> Callable[[str, Sequence, str], Awaitable[str]]:
    """Async counterpart of `traced_generation` for ``agenerate_text``."""

    async def _wrapped(model: str, messages: Sequence, api_key: str) -> str:
        with tracer.start_as_current_span("generation") as span:
            _record_request(span, model, messages)
            try:
                text = await generate(model, messages, api_key)
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise
            _record_reply(span, text)
            return text

    return _wrapped


def _record_request(span: trace.Span, model: str, messages: Sequence) -> None:
    span.set_attribute(ATTR_LLM_MODEL_NAME, model)
    span.set_attribute(ATTR_LLM_MESSAGE_COUNT, len(messages))


def _record_reply(span: trace.Span, text: str) -> None:
    span.set_attribute(ATTR_OUTPUT_VALUE, text[:500])
    if is_error(text):
        span.set_status(trace.StatusCode.ERROR, text)
    else:
        span.set_status(trace.StatusCode.OK)
