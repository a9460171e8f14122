"""Personality + product inference from survey answers.

One text-generation call per request. The response is recovered with the
brace-extraction strategy, checked for a ``personality`` object and a
``products`` array, then normalized to exactly six ProductIdea entries
(truncate past six, pad with a nightstand lamp below six).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from pixelroom.config import settings
from pixelroom.errors import PipelineError, invalid_payload
from pixelroom.models.contracts import (
    Budget,
    PersonalityProductsResponse,
    PersonalityProfile,
    ProductCategory,
    ProductIdea,
    SurveyAnswer,
)
from pixelroom.utils.json_parsing import parse_with_brace_extraction
from pixelroom.utils.llm import complete_text
from pixelroom.utils.tags import describe_answers, top_tags

logger = structlog.get_logger()

PRODUCT_COUNT = 6
PROFILE_TEMPERATURE = 0.5
# Unknown categories from the model are filed here
FALLBACK_CATEGORY = ProductCategory.DECOR

SYSTEM_PROMPT = """You are an interior stylist and product curator for bedroom setups. Given user Q&A pairs and tags, infer a concise personality and propose exactly 6 purchasable bedroom product ideas.
Return STRICT JSON only matching this schema:
{
  "personality": {"label": "string","description": "string","palette": ["string","string","string"],"vibe": "string","materials": ["string","string"],"budget": "LOW|MID|HIGH"},
  "products": [{"name":"string","searchQuery":"string","category":"BED|DESK|LAMP|RUG|WALL_ART|PLANT|STORAGE|DECOR|CHAIR|BEDDING","styleHints":["string"],"colorHints":["string"],"rationale":"string"}]
}"""


def default_product() -> ProductIdea:
    return ProductIdea(
        name="nightstand lamp",
        search_query="nightstand lamp",
        category=ProductCategory.LAMP,
    )


def build_user_prompt(answers: Sequence[SurveyAnswer]) -> str:
    return f"Top tags: {', '.join(top_tags(answers))}\nAnswers: {describe_answers(answers)}"


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_as_str(v) for v in value if v is not None]


def _coerce_product(raw: Any) -> ProductIdea:
    item = raw if isinstance(raw, dict) else {}
    name = _as_str(item.get("name"))
    category_raw = _as_str(item.get("category")).strip().upper()
    try:
        category = ProductCategory(category_raw)
    except ValueError:
        category = FALLBACK_CATEGORY
    return ProductIdea(
        name=name,
        search_query=_as_str(item.get("searchQuery")) or name,
        category=category,
        style_hints=_as_str_list(item.get("styleHints")),
        color_hints=_as_str_list(item.get("colorHints")),
        rationale=_as_str(item.get("rationale")),
    )


def normalize_products(raw_products: list[Any]) -> list[ProductIdea]:
    """Coerce backend product entries and force the list to exactly six."""
    products = [_coerce_product(p) for p in raw_products[:PRODUCT_COUNT]]
    while len(products) < PRODUCT_COUNT:
        products.append(default_product())
    return products


def _coerce_personality(raw: dict[str, Any]) -> PersonalityProfile:
    budget_raw = _as_str(raw.get("budget")).strip().upper()
    budget = Budget(budget_raw) if budget_raw in Budget.__members__ else None
    return PersonalityProfile(
        label=_as_str(raw.get("label")),
        description=_as_str(raw.get("description")),
        palette=_as_str_list(raw.get("palette")),
        vibe=_as_str(raw.get("vibe")),
        materials=_as_str_list(raw.get("materials")),
        budget=budget,
    )


def parse_profile_response(text: str) -> PersonalityProductsResponse:
    """Recover, validate and normalize one backend response.

    Raises PipelineError(bad_llm_output) when no JSON can be recovered or
    the recovered object lacks the required fields.
    """
    outcome = parse_with_brace_extraction(text)
    if not outcome.ok:
        logger.warning("personality_unparseable", reason=outcome.reason, raw=text[:300])
        raise PipelineError("bad_llm_output", outcome.reason or "no_json", status_code=502)
    if outcome.strategy != "direct":
        logger.info("personality_json_recovered", strategy=outcome.strategy)

    data = outcome.data
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("personality"), dict)
        or not isinstance(data.get("products"), list)
    ):
        logger.warning("personality_bad_shape", raw=text[:300])
        raise PipelineError(
            "bad_llm_output",
            "Response is missing a personality object or products array",
            status_code=502,
        )

    raw_count = len(data["products"])
    products = normalize_products(data["products"])
    if raw_count != PRODUCT_COUNT:
        logger.info("personality_products_normalized", returned=raw_count, kept=len(products))
    return PersonalityProductsResponse(
        personality=_coerce_personality(data["personality"]),
        products=products,
    )


async def infer_personality(answers: Sequence[SurveyAnswer] | None) -> PersonalityProductsResponse:
    """Infer a personality profile and six product ideas from survey answers."""
    if not answers:
        raise invalid_payload("userAnswers must be a non-empty array")

    logger.info("personality_inference_start", num_answers=len(answers))
    try:
        text = await complete_text(
            SYSTEM_PROMPT,
            build_user_prompt(answers),
            model=settings.profile_model,
            temperature=PROFILE_TEMPERATURE,
            json_mode=True,
        )
    except Exception as exc:
        logger.error("personality_llm_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        raise PipelineError("llm_failed", str(exc), retryable=True) from exc

    return parse_profile_response(text)
