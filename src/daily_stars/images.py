from __future__ import annotations

import logging
import re
import uuid
from enum import Enum

from .errors import GenerationError
from .openrouter import generate_image, generate_text, is_error
from .prompts import IMAGE_IDEA_INSTRUCTION
from .schema import ChatMessage, GeneratedImage

logger = logging.getLogger(__name__)

PROMPT_IDEA_MODEL = "openai/gpt-4o"
DEFAULT_IMAGE_FILENAME = "the-daily-stars-image"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    WIDESCREEN = "16:9"
    PORTRAIT = "9:16"
    STANDARD = "4:3"
    TALL = "3:4"


def suggest_image_prompt(api_key: str, model: str = PROMPT_IDEA_MODEL) -> str:
    """Ask the chat model for a mystical image prompt idea.

    Raises:
        GenerationError: If the completion API returned an error.
    """
    idea = generate_text(model, [ChatMessage(role="user", content=IMAGE_IDEA_INSTRUCTION)], api_key)
    if is_error(idea):
        raise GenerationError(idea)
    return idea.strip()


def create_image(
    prompt: str,
    model: str,
    api_key: str,
    aspect_ratio: AspectRatio = AspectRatio.SQUARE,
) -> GeneratedImage:
    """Generate one image for *prompt*.

    Args:
        prompt: Description of the image; must not be blank.
        model: Image-capable OpenRouter model id.
        api_key: OpenRouter API key.
        aspect_ratio: Requested output shape.

    Returns:
        GeneratedImage with the returned URL.

    Raises:
        ValueError: If the prompt is blank.
        GenerationError: If the API failed or returned no image.
    """
    if not prompt.strip():
        raise ValueError("Please enter a prompt.")

    url = generate_image(model, prompt, AspectRatio(aspect_ratio).value, api_key)
    if is_error(url):
        raise GenerationError(url)
    if not url:
        raise GenerationError(f"Model {model} returned no image.")

    logger.info("Generated %s image with %s", AspectRatio(aspect_ratio).value, model)
    return GeneratedImage(id=uuid.uuid4().hex[:8], url=url, prompt=prompt)


def image_filename(prompt: str) -> str:
    slug = re.sub(r"[^a-z0-9\s]", "", prompt.lower())
    slug = re.sub(r"\s+", "-", slug)[:50]
    return f"{slug or DEFAULT_IMAGE_FILENAME}.png"
