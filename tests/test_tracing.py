"""Tests for tracing.py — spans around matching and generation."""
from __future__ import annotations

import asyncio

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from daily_stars.matching import find_relevant_context
from daily_stars.tracing import (
    ATTR_INPUT_VALUE,
    ATTR_LLM_MESSAGE_COUNT,
    ATTR_LLM_MODEL_NAME,
    ATTR_OUTPUT_VALUE,
    ATTR_REFERENCE_TITLE,
    ATTR_RETRIEVAL_DOCUMENTS,
    configure_tracing,
    traced_ageneration,
    traced_generation,
    traced_matcher,
)


@pytest.fixture()
def exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture()
def tracer(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider.get_tracer("test")


class TestTracedMatcher:
    def test_match_attributes(self, sample_book, tracer, exporter):
        match = traced_matcher(find_relevant_context, tracer)
        result = match("Tell me about Saturn influence", sample_book)

        assert result is not None
        (span,) = exporter.get_finished_spans()
        assert span.name == "context-match"
        assert span.attributes[ATTR_INPUT_VALUE] == "Tell me about Saturn influence"
        assert span.attributes[ATTR_RETRIEVAL_DOCUMENTS] == 1
        assert span.attributes[ATTR_REFERENCE_TITLE] == "Saturn Returns"

    def test_no_match(self, sample_book, tracer, exporter):
        match = traced_matcher(find_relevant_context, tracer)
        assert match("hello there", sample_book) is None

        (span,) = exporter.get_finished_spans()
        assert span.attributes[ATTR_RETRIEVAL_DOCUMENTS] == 0
        assert ATTR_REFERENCE_TITLE not in span.attributes


class TestTracedGeneration:
    def test_success_span(self, tracer, exporter):
        generate = traced_generation(lambda model, messages, api_key: "Clear skies.", tracer)
        assert generate("openai/gpt-4o", [{"role": "user", "content": "hi"}], "k") == "Clear skies."

        (span,) = exporter.get_finished_spans()
        assert span.name == "generation"
        assert span.attributes[ATTR_LLM_MODEL_NAME] == "openai/gpt-4o"
        assert span.attributes[ATTR_LLM_MESSAGE_COUNT] == 1
        assert span.attributes[ATTR_OUTPUT_VALUE] == "Clear skies."
        assert span.status.status_code is StatusCode.OK

    def test_error_marker_sets_error_status(self, tracer, exporter):
        generate = traced_generation(lambda model, messages, api_key: "Error: Could not generate text. x", tracer)
        generate("m", [], "k")

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR

    def test_exception_recorded_and_reraised(self, tracer, exporter):
        def _boom(model, messages, api_key):
            raise RuntimeError("kaboom")

        with pytest.raises(RuntimeError):
            traced_generation(_boom, tracer)("m", [], "k")

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR
        assert any(event.name == "exception" for event in span.events)


class TestTracedAgeneration:
    def test_success_span(self, tracer, exporter):
        async def _generate(model, messages, api_key):
            return "Clear skies."

        generate = traced_ageneration(_generate, tracer)
        assert asyncio.run(generate("openai/gpt-4o", [], "k")) == "Clear skies."

        (span,) = exporter.get_finished_spans()
        assert span.name == "generation"
        assert span.attributes[ATTR_OUTPUT_VALUE] == "Clear skies."
        assert span.status.status_code is StatusCode.OK

    def test_error_marker_sets_error_status(self, tracer, exporter):
        async def _generate(model, messages, api_key):
            return "Error: Could not generate text. x"

        asyncio.run(traced_ageneration(_generate, tracer)("m", [], "k"))

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR

def test_configure_tracing_with_exporter(exporter):
    provider = configure_tracing(service_name="daily-stars-test", exporter=exporter)
    with provider.get_tracer("test").start_as_current_span("probe"):
        pass

    (span,) = exporter.get_finished_spans()
    assert span.name == "probe"
    assert span.resource.attributes["service.name"] == "daily-stars-test"
