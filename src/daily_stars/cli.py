"""Command line interface for The Daily Stars."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from daily_stars.errors import DailyStarsError, MissingCredentialError
from daily_stars.images import AspectRatio, image_filename
from daily_stars.library import find_chapter, table_of_contents
from daily_stars.natal import report_filename
from daily_stars.schema import BirthDetails, HoroscopeKey, HoroscopeStatus, ZodiacSign
from daily_stars.settings import BIRTHDAY_EMOJI, ZODIAC_EMOJI
from daily_stars.state import DailyStars
from daily_stars.tracing import configure_tracing, get_tracer


console = Console()
app = typer.Typer(help="The Daily Stars - horoscopes, natal charts, images and chat with Stella")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_app(trace: bool = False, trace_endpoint: Optional[str] = None) -> DailyStars:
    tracer = None
    if trace or trace_endpoint:
        configure_tracing(endpoint=trace_endpoint)
        tracer = get_tracer("daily-stars.cli")
    try:
        return DailyStars.from_environment(tracer=tracer)
    except DailyStarsError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


def _fail(exc: DailyStarsError) -> None:
    if isinstance(exc, MissingCredentialError):
        console.print("[yellow]Please set your OpenRouter API key first with `daily-stars set-key`.[/yellow]")
    else:
        console.print(f"[red]{exc}[/red]")
    raise typer.Exit(code=1)


def _card_label(key: HoroscopeKey) -> str:
    if key.is_birthday:
        return f"{BIRTHDAY_EMOJI} {key.value}"
    return f"{ZODIAC_EMOJI[ZodiacSign(key.value)]} {key.value}"


@app.command("set-key")
def set_key(
    api_key: str = typer.Option(..., prompt=True, hide_input=True, help="OpenRouter API key"),
) -> None:
    """Store the OpenRouter API key locally."""
    stars = _load_app()
    stars.credentials.set_api_key(api_key)
    console.print(f"API key saved to [bold]{stars.credentials.store.path}[/bold].")


@app.command()
def library(
    chapter: Optional[str] = typer.Option(None, "--chapter", "-c", help="Chapter number to print"),
) -> None:
    """Browse the reference book."""
    stars = _load_app()
    if chapter is not None:
        item = find_chapter(stars.book, chapter)
        if item is None:
            raise typer.BadParameter(f"Chapter not found: {chapter}")
        console.print(f"[bold]{item.title}[/bold]\n")
        console.print(item.body)
        return

    table = Table(show_header=True, header_style="bold magenta", title=stars.book.title)
    table.add_column("Section")
    table.add_column("Chapter")
    table.add_column("Title")
    for section, chapters in table_of_contents(stars.book):
        for item in chapters:
            table.add_row(f"{section.number}. {section.title}", item.number, item.title)
    console.print(table)


@app.command()
def horoscopes(
    sign: Optional[HoroscopeKey] = typer.Option(None, "--sign", "-s", help="Only generate this card"),
    directive: str = typer.Option("", "--directive", "-d", help="Instruction shaping the tone and focus"),
    trace: bool = typer.Option(False, "--trace", help="Print OpenTelemetry spans"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Generate today's horoscopes."""
    _setup_logging(verbose)
    stars = _load_app(trace=trace)
    try:
        if sign is not None:
            asyncio.run(stars.generate_horoscope(sign, user_directive=directive))
            keys = [sign]
        else:
            asyncio.run(stars.generate_all_horoscopes(user_directive=directive))
            keys = list(HoroscopeKey)
    except DailyStarsError as exc:
        _fail(exc)

    for key in keys:
        entry = stars.state.horoscopes[key]
        style = "red" if entry.status is HoroscopeStatus.ERROR else "bold"
        console.print(f"[{style}]{_card_label(key)}[/{style}]")
        console.print(entry.text + "\n")


def _print_reply(stars: DailyStars, text: str) -> None:
    reply = stars.ask(text)
    if reply is not None:
        console.print(Markdown(reply))


@app.command()
def chat(
    question: Optional[str] = typer.Argument(None, help="Single question; omit for an interactive session"),
    trace: bool = typer.Option(False, "--trace", help="Print OpenTelemetry spans"),
    trace_endpoint: Optional[str] = typer.Option(None, "--trace-endpoint", help="OTLP HTTP endpoint"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Talk to Stella."""
    _setup_logging(verbose)
    stars = _load_app(trace=trace, trace_endpoint=trace_endpoint)
    try:
        if question:
            _print_reply(stars, question)
            return

        console.print(f"[magenta]{stars.chat.messages[0].content}[/magenta]")
        while True:
            text = typer.prompt("You", default="", show_default=False)
            if text.strip().lower() in {"exit", "quit"}:
                return
            _print_reply(stars, text)
    except DailyStarsError as exc:
        _fail(exc)


@app.command()
def natal(
    name: str = typer.Option(..., help="Full name"),
    birth_date: str = typer.Option(..., "--date", help="Birth date"),
    birth_time: str = typer.Option(..., "--time", help="Birth time"),
    birth_location: str = typer.Option(..., "--location", help="Birth location"),
    directive: str = typer.Option("", "--directive", "-d", help="Persona overriding Stella's voice"),
    model: Optional[str] = typer.Option(None, help="Chat model id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for the markdown report"),
) -> None:
    """Generate a natal chart report and save it as markdown."""
    stars = _load_app()
    details = BirthDetails(name=name, birth_date=birth_date, birth_time=birth_time, birth_location=birth_location)
    try:
        report = stars.create_natal_report(details, user_directive=directive, model=model)
    except DailyStarsError as exc:
        _fail(exc)

    path = stars.export_natal_report(report, output)
    console.print(Markdown(report.reading))
    console.print(f"Saved [bold]{report_filename(report)}[/bold] to {path.parent}.")


@app.command()
def image(
    prompt: Optional[str] = typer.Argument(None, help="Image prompt; omit to let Stella suggest one"),
    aspect_ratio: AspectRatio = typer.Option(AspectRatio.SQUARE, "--aspect-ratio", "-a", help="Output shape"),
    model: Optional[str] = typer.Option(None, help="Image model id"),
) -> None:
    """Generate an image."""
    stars = _load_app()
    try:
        if not prompt:
            prompt = stars.suggest_image_prompt()
            console.print(f"[magenta]{prompt}[/magenta]")
        generated = stars.create_image(prompt, aspect_ratio=aspect_ratio, model=model)
    except DailyStarsError as exc:
        _fail(exc)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(f"Image ready ({image_filename(generated.prompt)}):")
    console.print(generated.url if len(generated.url) < 200 else generated.url[:200] + "...")


if __name__ == "__main__":
    app()
