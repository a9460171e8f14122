"""Text-generation backends (OpenAI chat completions or Anthropic messages).

Callers get plain response text back; parsing and validation of that text
is theirs. SDK exceptions propagate unchanged.
"""

from __future__ import annotations

import anthropic
import openai
import structlog

from pixelroom.config import settings

logger = structlog.get_logger()

ANTHROPIC_MAX_TOKENS = 4096


def get_openai_client() -> openai.AsyncOpenAI:
    """Create an OpenAI client using the configured API key."""
    return openai.AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.llm_timeout_seconds,
    )


def get_anthropic_client() -> anthropic.AsyncAnthropic:
    return anthropic.AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.llm_timeout_seconds,
    )


async def complete_text(
    system: str,
    user: str,
    *,
    model: str,
    temperature: float,
    max_tokens: int | None = None,
    json_mode: bool = False,
) -> str:
    """Run one system+user completion on the configured backend.

    ``json_mode`` constrains the response format where the backend supports
    it (OpenAI); Anthropic has no equivalent and returns free text.
    """
    backend = settings.text_backend.lower()
    logger.info("llm_request", backend=backend, model=model, json_mode=json_mode)

    if backend == "anthropic":
        return await _complete_anthropic(system, user, temperature=temperature, max_tokens=max_tokens)
    if backend != "openai":
        raise ValueError(f"Unknown text backend: {settings.text_backend!r}")

    kwargs: dict = {
        "model": model,
        "temperature": temperature,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
    }
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    completion = await get_openai_client().chat.completions.create(**kwargs)
    if not completion.choices:
        return ""
    return completion.choices[0].message.content or ""


async def _complete_anthropic(
    system: str,
    user: str,
    *,
    temperature: float,
    max_tokens: int | None,
) -> str:
    response = await get_anthropic_client().messages.create(
        model=settings.anthropic_model,
        max_tokens=max_tokens or ANTHROPIC_MAX_TOKENS,
        temperature=temperature,
        system=system,
        messages=[{"role": "user", "content": user}],
    )
    text_parts = [block.text for block in response.content if block.type == "text"]
    return "".join(text_parts)
