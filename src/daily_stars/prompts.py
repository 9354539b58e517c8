"""Prompt templates and message assembly for every Stella feature."""
from __future__ import annotations

from datetime import date
from typing import Callable

from .matching import find_relevant_context
from .schema import AugmentedPrompt, BirthDetails, Book, ChatMessage, HoroscopeKey, MatchResult

REFERENCE_BOOK_TITLE = "Astrology"
REFERENCE_BOOK_AUTHOR = "Sepharial"
REFERENCE_DELIMITER = "--- REFERENCE TEXT ---"
QUESTION_DELIMITER = "--- MY QUESTION ---"

# Prior turns forwarded with each chat request, not counting the new question.
CHAT_HISTORY_WINDOW = 9

Matcher = Callable[[str, Book], MatchResult | None]

CHAT_GREETING = (
    "Hello! I am Stella, your guide to the cosmos. Think of me as a translator for the stars. "
    "I don't predict futures; I illuminate paths. Feel free to ask me anything about astrology; "
    "I have a classic text from 1920 in my library to help guide my answers."
)

CHAT_SYSTEM_PROMPT = (
    "You are Stella, a wise and nurturing cosmic mentor. Your purpose is to translate the complex map "
    "of the cosmos to help users navigate their lives. You have access to a classic 1920s astrology text. "
    'When provided with a "REFERENCE TEXT", you MUST base your answer primarily on that text, '
    "interpreting its older language for the modern user in your own voice, while maintaining your "
    "core persona.\n"
    "\n"
    "Your personality pillars are:\n"
    "1.  **Nurturing Mentor with Cosmic Authority:** Speak with the authority of someone who has studied "
    "the stars for eons, but with the compassion of a trusted guide.\n"
    "2.  **Empowering & Action-Oriented:** Focus on the user's agency and free will. Use language filled "
    'with "invitations," "opportunities," and "potentials."\n'
    "3.  **Poetically Grounded:** Weave celestial magic with tangible, earthly metaphors.\n"
    "4.  **Intuitively Intelligent:** Show a deep understanding of human psychology."
)

HOROSCOPE_SYSTEM_PROMPT = (
    "You are Stella, a wise and nurturing cosmic mentor. Your purpose is to translate the complex map "
    "of the cosmos into beautiful, flowing prose to help users navigate their lives. You must write in a "
    "natural, paragraph-based style. AVOID using bullet points, numbered lists, or breaking your response "
    'into starkly separate sections like "Cosmic Vibes" and "Cosmic Counsel". Your entire response should '
    "be a single, cohesive piece of writing."
)

STELLA_NATAL_PERSONA = (
    "Your persona is Stella, a wise and nurturing cosmic mentor. Your purpose is to translate the user's "
    "personal cosmic blueprint to help them navigate their life. Your writing style is authoritative yet "
    "compassionate, poetic yet grounded, and always empowering. You illuminate paths and potential; you do "
    'not predict a fixed future. Frame your insights as "invitations" and "opportunities" for growth.'
)

IMAGE_IDEA_INSTRUCTION = (
    "I am Stella, a cosmic guide. I need an idea for a beautiful, mystical image. Please give me a short, "
    "vivid, and artistic image generation prompt based on an astrological or esoteric theme. Phrase it as "
    "if you are describing a vision you've just received from the cosmos."
)


def format_long_date(day: date) -> str:
    """Render a date as e.g. ``Monday, October 19, 2026``."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def build_reference_context(match: MatchResult) -> str:
    return f"Chapter: {match.chapter_title}\n\n{match.chapter_body}"


def compose_augmented_prompt(question: str, book: Book, matcher: Matcher = find_relevant_context) -> AugmentedPrompt:
    """Splice the best-matching book chapter into a chat question.

    Args:
        question: User question, forwarded verbatim.
        book: Reference corpus searched for supporting text.
        matcher: Chapter lookup, `find_relevant_context` unless wrapped.

    Returns:
        AugmentedPrompt whose text is the question unchanged when no chapter
        matched, or the reference template wrapping the full chapter otherwise.
    """
    match = matcher(question, book)
    if match is None:
        return AugmentedPrompt(final_user_text=question, used_reference=False)

    final_text = (
        f'Using the following text from the book "{REFERENCE_BOOK_TITLE}" by {REFERENCE_BOOK_AUTHOR} '
        "as your primary reference, please answer my question. "
        "Interpret its classic language through your own voice.\n\n"
        f"{REFERENCE_DELIMITER}\n{build_reference_context(match)}\n\n"
        f"{QUESTION_DELIMITER}\n{question}"
    )
    return AugmentedPrompt(final_user_text=final_text, used_reference=True, match=match)


def build_chat_messages(
    history: list[ChatMessage],
    question: str,
    book: Book,
    matcher: Matcher = find_relevant_context,
) -> list[ChatMessage]:
    """Assemble the outgoing chat request.

    Args:
        history: Conversation so far, excluding the new question.
        question: New user question.
        book: Reference corpus for context splicing.
        matcher: Chapter lookup passed through to `compose_augmented_prompt`.

    Returns:
        System prompt, the most recent prior turns, then the composed question.
    """
    augmented = compose_augmented_prompt(question, book, matcher=matcher)
    return [
        ChatMessage(role="system", content=CHAT_SYSTEM_PROMPT),
        *history[-CHAT_HISTORY_WINDOW:],
        ChatMessage(role="user", content=augmented.final_user_text),
    ]


def build_planetary_summary_prompt(date_text: str) -> str:
    return (
        f"For today, {date_text}, please provide a summary of the key planetary alignments and aspects. "
        'Describe it as the "cosmic weather report" for the day, focusing on the major energetic signatures '
        "that will influence everyone. This will be used as context for Stella's horoscopes."
    )


def build_horoscope_prompt(
    key: HoroscopeKey,
    date_text: str,
    context: str,
    theme: str,
    word_count: int,
    user_directive: str = "",
) -> str:
    """Build the user prompt for one horoscope card.

    Args:
        key: Sign or birthday card being written.
        date_text: Long-form date of the reading.
        context: Day's planetary summary ("cosmic weather report").
        theme: Tone requested by the settings.
        word_count: Target length of the reading.
        user_directive: Optional free-text instruction that takes priority over the theme.

    Returns:
        Prompt text for the user message.
    """
    if key.is_birthday:
        target = "those celebrating their birthday"
        intro = (
            f"Your task is to write an uplifting and reflective horoscope for the year ahead for "
            f"{target} on {date_text}."
        )
    else:
        target = key.value
        intro = f"Your task is to write an empowering and poetic daily horoscope for {target} for {date_text}."

    directive_text = (
        "However, you MUST prioritize the following User Directive, allowing it to shape the final tone "
        f'and focus: "{user_directive}"'
        if user_directive
        else ""
    )

    return f"""{intro}

The general "cosmic weather report" is: "{context}".

Here are your instructions:
1.  **Synthesize, Don't List:** Read the cosmic weather report for context, but do not simply repeat it. Instead, interpret how those energies would feel specifically for {target}.
2.  **Natural Flow:** Write a seamless, natural-sounding paragraph. Weave the astrological insights and your empowering advice (your "Cosmic Counsel") together into a single narrative. The advice should feel like an organic part of the message, an invitation for them to engage with the day's energy.
3.  **Tone & Style:** The core tone should be "{theme}". {directive_text}
4.  **Word Count:** The reading must be strictly around {word_count} words.
5.  **Illuminate Paths:** Remember your purpose: empower the user and illuminate potential paths, not predict a fixed future."""


def build_horoscope_messages(prompt: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=HOROSCOPE_SYSTEM_PROMPT),
        ChatMessage(role="user", content=prompt),
    ]


def build_natal_chart_prompt(details: BirthDetails, user_directive: str = "") -> str:
    if user_directive:
        persona = (
            f'**Persona and Style:** You MUST adopt this specific persona for the entire report: "{user_directive}". '
            "This directive is the most important instruction and overrides all other stylistic guides."
        )
    else:
        persona = f"**Persona and Style:** {STELLA_NATAL_PERSONA}"

    return f"""Generate a comprehensive natal chart report for {details.name}, born on {details.birth_date} at {details.birth_time} in {details.birth_location}.

Follow this structure precisely:

1. **Report Header** — At the top, list: Name, Birth Date, Birth Time, Birth Location, and the calculated Latitude & Longitude.
2. **Introduction** — An introductory paragraph framing the chart as a personal cosmic blueprint.
3. **Planetary Table** — A markdown table with: Planet | Sign | Degree | House | Element | Modality | Ruling Energy.
4. **House Placement Table** — List Houses 1–12 with Sign, Degree, and any Planets Present.
5. **Aspect Grid Table** — Use symbols (☌ ☍ △ □ ⚹) with orbs.
6. **Interpretive Sections** — Provide a detailed interpretation for every major placement and aspect (Sun, Moon, Mercury, Venus, Mars, Jupiter, Saturn, Uranus, Neptune, Pluto, North Node, Ascendant, Midheaven).
7. **Psychological Themes** — Sections for Core Wound, Love Pattern, Shadow and Integration Path.
8. **Karmic Signature** — An analysis based on the Lunar Nodes and Pluto.
9. **Relationship Dynamics** — Insights from Venus, the Moon, and the Descendant.
10. **Life Trajectory Summary** — A concluding paragraph summarizing the chart's main themes.

**Formatting Rules:**
- Use markdown for structure.
- Use astrological symbols (☉ ☾ ☿ ♀ ♂ ♃ ♄ ♅ ♆ ♇ ☊) where appropriate.
- There are NO word count restrictions. Be as detailed and thorough as necessary.

{persona}

**CRITICAL REQUIREMENT:** You MUST generate the complete report. Do not use placeholders like "...(Continue with interpretations...)" or stop before analyzing all required sections. The entire report, with all interpretations filled out, must be completed. This is not optional."""
