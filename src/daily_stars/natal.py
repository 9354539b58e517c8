"""Natal chart readings and their markdown export."""
from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from .errors import GenerationError, IncompleteBirthDetailsError
from .openrouter import generate_text, is_error
from .prompts import build_natal_chart_prompt
from .schema import BirthDetails, ChatMessage, NatalChartReport

logger = logging.getLogger(__name__)


def generate_natal_report(
    details: BirthDetails,
    model: str,
    api_key: str,
    user_directive: str = "",
) -> NatalChartReport:
    """Generate a full natal chart reading for one person.

    Args:
        details: Name, date, time and place of birth; all are required.
        model: OpenRouter chat model id.
        api_key: OpenRouter API key.
        user_directive: Optional persona overriding Stella's default voice.

    Returns:
        NatalChartReport holding the markdown reading.

    Raises:
        IncompleteBirthDetailsError: If any birth detail is blank.
        GenerationError: If the completion API returned an error.
    """
    missing = details.missing_fields()
    if missing:
        raise IncompleteBirthDetailsError(f"Please fill in all birth details (missing: {', '.join(missing)}).")

    prompt = build_natal_chart_prompt(details, user_directive)
    reading = generate_text(model, [ChatMessage(role="user", content=prompt)], api_key)
    if is_error(reading):
        raise GenerationError(reading)

    logger.info("Generated natal chart report for %s", details.name)
    return NatalChartReport(
        id=f"{int(time.time() * 1000)}-{details.name}",
        name=details.name,
        birth_date=details.birth_date,
        birth_time=details.birth_time,
        birth_location=details.birth_location,
        reading=reading,
        user_directive=user_directive,
    )


def report_filename(report: NatalChartReport) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", report.name.strip().lower())
    slug = re.sub(r"\s+", "-", slug.strip()) or "natal-chart"
    return f"{slug}-report.md"


def export_report(report: NatalChartReport, directory: str | Path) -> Path:
    """Write the markdown reading to *directory* and return the file path."""
    destination = Path(directory) / report_filename(report)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(report.reading, encoding="utf-8")
    return destination
