"""Text and image generation through OpenRouter's OpenAI-compatible API.

None of the public functions raise on upstream failure. Errors come back as a
string starting with ``ERROR_MARKER`` so callers have a single failure shape
to check with `is_error`.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from openai import APIStatusError, AsyncOpenAI, OpenAI, OpenAIError

from .errors import MissingCredentialError
from .schema import ChatMessage

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
APP_TITLE = "The Daily Stars"
ERROR_MARKER = "Error:"

MessageLike = ChatMessage | dict[str, Any]


def is_error(text: str) -> bool:
    return text.startswith(ERROR_MARKER)


def _client_kwargs(api_key: str) -> dict[str, Any]:
    if not api_key:
        raise MissingCredentialError()
    return {
        "api_key": api_key,
        "base_url": OPENROUTER_BASE_URL,
        "default_headers": {"X-Title": APP_TITLE},
    }


def _as_payload(messages: Sequence[MessageLike]) -> list[dict[str, Any]]:
    return [message.to_dict() if isinstance(message, ChatMessage) else dict(message) for message in messages]


def _describe(exc: Exception) -> str:
    if isinstance(exc, APIStatusError):
        return f"API request failed with status {exc.status_code}: {exc.message}"
    return str(exc) or exc.__class__.__name__


def _image_url(image: Any) -> str:
    # Extra response fields are not parsed into SDK models and arrive as dicts.
    if isinstance(image, dict):
        return str(image.get("image_url", {}).get("url", ""))
    image_url = getattr(image, "image_url", None)
    if isinstance(image_url, dict):
        return str(image_url.get("url", ""))
    return str(getattr(image_url, "url", "") or "")


def generate_text(model: str, messages: Sequence[MessageLike], api_key: str) -> str:
    """Run one chat completion and return the assistant text.

    Args:
        model: OpenRouter model id, e.g. ``openai/gpt-4o``.
        messages: Ordered conversation to send.
        api_key: OpenRouter API key.

    Returns:
        Assistant content, or an ``Error:``-prefixed description of the failure.
    """
    try:
        with OpenAI(**_client_kwargs(api_key)) as client:
            response = client.chat.completions.create(model=model, messages=_as_payload(messages))
        return response.choices[0].message.content or ""
    except (MissingCredentialError, OpenAIError, IndexError, AttributeError) as exc:
        logger.error("Error generating text with %s: %s", model, exc)
        return f"{ERROR_MARKER} Could not generate text. {_describe(exc)}"


async def agenerate_text(model: str, messages: Sequence[MessageLike], api_key: str) -> str:
    """Async counterpart of `generate_text` with the same error contract."""
    try:
        async with AsyncOpenAI(**_client_kwargs(api_key)) as client:
            response = await client.chat.completions.create(model=model, messages=_as_payload(messages))
        return response.choices[0].message.content or ""
    except (MissingCredentialError, OpenAIError, IndexError, AttributeError) as exc:
        logger.error("Error generating text with %s: %s", model, exc)
        return f"{ERROR_MARKER} Could not generate text. {_describe(exc)}"


def generate_image(model: str, prompt: str, aspect_ratio: str, api_key: str) -> str:
    """Request an image and return the URL of the first one produced.

    Args:
        model: Image-capable OpenRouter model id.
        prompt: Text description of the image.
        aspect_ratio: Ratio string such as ``16:9``.
        api_key: OpenRouter API key.

    Returns:
        Image URL (often a data URL), an empty string when the model returned
        no image, or an ``Error:``-prefixed description of the failure.
    """
    try:
        with OpenAI(**_client_kwargs(api_key)) as client:
            response = client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                extra_body={
                    "modalities": ["image", "text"],
                    "image_config": {"aspect_ratio": aspect_ratio},
                },
            )
        images = getattr(response.choices[0].message, "images", None)
        if images:
            return _image_url(images[0])
        return ""
    except (MissingCredentialError, OpenAIError, IndexError, AttributeError) as exc:
        logger.error("Error generating image with %s: %s", model, exc)
        return f"{ERROR_MARKER} Could not generate image. {_describe(exc)}"
