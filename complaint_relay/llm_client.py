import logging
from typing import Optional

import openai

from complaint_relay.config import (
    GEMINI_BASE_URL,
    GEMINI_MODEL,
    REQUEST_TIMEOUT,
)

logger = logging.getLogger(__name__)


class LLMError(Exception):
    pass


class MissingCredentialError(Exception):
    pass


def create_openai_client(api_key: str) -> openai.AsyncOpenAI:
    """Create an AsyncOpenAI client pointed at Gemini's OpenAI-compatible endpoint."""
    if not api_key:
        raise MissingCredentialError("API key not configured on the server.")
    return openai.AsyncOpenAI(
        api_key=api_key,
        base_url=GEMINI_BASE_URL,
        timeout=REQUEST_TIMEOUT,
        max_retries=0,
    )


async def generate(
    prompt: str,
    output_shape: Optional[dict],
    client: openai.AsyncOpenAI,
    model: str = GEMINI_MODEL,
) -> str:
    """Run one completion and return the raw text. JSON output is requested when output_shape is set."""
    kwargs: dict = {}
    if output_shape is not None:
        kwargs["response_format"] = {"type": "json_schema", "json_schema": output_shape}

    logger.debug(f"LLM call: model={model}, structured={output_shape is not None}")
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
    except openai.OpenAIError as exc:
        raise LLMError(f"LLM API error: {exc}") from exc

    if not response.choices:
        raise LLMError("LLM returned no choices")

    raw = response.choices[0].message.content
    if raw is None:
        raise LLMError("LLM returned an empty response")
    logger.debug(f"LLM raw response ({len(raw)} chars)")

    usage = response.usage
    if usage:
        logger.debug(
            f"LLM token usage: model={model}, "
            f"prompt={usage.prompt_tokens}, completion={usage.completion_tokens}, "
            f"total={usage.total_tokens}"
        )

    return raw
