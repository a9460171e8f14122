"""Room prompt building from survey tags, plus the UI hotspot catalog.

The vibe/palette hint comes from fixed tag rules checked in order; the
first rule with any matching tag wins. The hotspot boxes are for UI hit
areas only and have nothing to do with the composition anchors.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pixelroom.models.contracts import NormalizedBox, RoomPromptResponse, SurveyAnswer


@dataclass(frozen=True)
class PersonalityHint:
    vibe: str
    palette: str


DEFAULT_HINT = PersonalityHint("cozy minimalist", "warm neutrals with gentle contrast")

_HINT_RULES: tuple[tuple[frozenset[str], PersonalityHint], ...] = (
    (
        frozenset({"tech-friendly", "modern", "sleek"}),
        PersonalityHint("modern tech", "cool grays with neon accents"),
    ),
    (
        frozenset({"outdoor", "adventure", "practical"}),
        PersonalityHint("nature-inspired", "greens, wood tones, warm whites"),
    ),
    (frozenset({"cozy", "homebody", "comfort-first"}), DEFAULT_HINT),
    (
        frozenset({"minimal", "organized", "monochrome"}),
        PersonalityHint("calm coastal", "soft blues and sandy neutrals"),
    ),
    (
        frozenset({"vibrant", "colorful", "playful"}),
        PersonalityHint("eclectic vibrant", "bright colors with energetic contrasts"),
    ),
)

_VIBE_QUERIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("coastal", ("bed frame", "rattan lamp", "linen bedding", "ocean wall art", "indoor plant", "jute rug")),
    ("modern", ("minimal desk", "sleek chair", "LED lamp", "abstract wall art", "laptop stand", "geometric rug")),
    ("nature", ("wood nightstand", "stoneware lamp", "cotton bedding", "botanical wall art", "planter", "wool rug")),
    ("sport", ("athletic shoes", "duffle bag", "sports rack", "foam roller", "water bottle", "poster frame")),
)
_DEFAULT_QUERIES = ("bed frame", "nightstand lamp", "cotton bedding", "framed wall art", "indoor plant", "area rug")

ROOM_PROMPT_TEMPLATE = (
    "An isometric pixel art bedroom with 45-degree walls and a grid floor, cozy, minimalist, "
    "clean black outlines, bright saturated colors with subtle dithering. Keep layout realistic "
    "and uncluttered. Personality vibe: {vibe}. Palette: {palette}. Maintain isometric "
    "perspective and consistent camera angle."
)

HOTSPOT_SLOTS: tuple[NormalizedBox, ...] = (
    NormalizedBox(x=0.10, y=0.55, w=0.40, h=0.35, label="bed"),
    NormalizedBox(x=0.55, y=0.55, w=0.35, h=0.30, label="desk_laptop"),
    NormalizedBox(x=0.08, y=0.88, w=0.84, h=0.10, label="rug"),
    NormalizedBox(x=0.70, y=0.40, w=0.18, h=0.28, label="floor_lamp"),
    NormalizedBox(x=0.62, y=0.15, w=0.28, h=0.18, label="wall_art"),
    NormalizedBox(x=0.22, y=0.50, w=0.10, h=0.16, label="nightstand"),
    NormalizedBox(x=0.15, y=0.45, w=0.12, h=0.18, label="plant"),
)


def personality_hint(answers: Sequence[SurveyAnswer]) -> PersonalityHint:
    tags = {tag for answer in answers for tag in answer.tags}
    for rule_tags, hint in _HINT_RULES:
        if tags & rule_tags:
            return hint
    return DEFAULT_HINT


def product_queries(vibe: str) -> list[str]:
    """Six default product search queries for a vibe."""
    for keyword, queries in _VIBE_QUERIES:
        if keyword in vibe:
            return list(queries)
    return list(_DEFAULT_QUERIES)


def build_room_prompt(hint: PersonalityHint, product_texts: Sequence[str] = ()) -> str:
    prompt = ROOM_PROMPT_TEMPLATE.format(vibe=hint.vibe, palette=hint.palette)
    if product_texts:
        prompt += "\nUse items inspired by: " + "; ".join(product_texts)
    return prompt


def room_prompt_for(answers: Sequence[SurveyAnswer], product_texts: Sequence[str] = ()) -> RoomPromptResponse:
    hint = personality_hint(answers)
    return RoomPromptResponse(
        vibe=hint.vibe,
        palette=hint.palette,
        prompt=build_room_prompt(hint, product_texts),
        product_queries=product_queries(hint.vibe),
    )


def hotspot_boxes(seed: int | None = None) -> list[NormalizedBox]:
    """Hotspot boxes for a room; the layout does not vary by seed yet."""
    return list(HOTSPOT_SLOTS)
