"""Request, response and domain models shared by routes and services.

JSON on the wire is camelCase (the survey client was written against that
shape); Python attributes stay snake_case through aliases.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Survey ===


class SurveyAnswer(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    question_id: str
    choice_id: str
    choice_text: str
    tags: list[str] = []


class AnswerChoice(_WireModel):
    id: str
    text: str
    tags: list[str] = []


class Question(_WireModel):
    id: str
    text: str
    choices: list[AnswerChoice]


class DailyQuestionHistory(_WireModel):
    date: str
    questions: list[Question] = []


# === Personality & products ===


class Budget(StrEnum):
    LOW = "LOW"
    MID = "MID"
    HIGH = "HIGH"


class ProductCategory(StrEnum):
    BED = "BED"
    DESK = "DESK"
    LAMP = "LAMP"
    RUG = "RUG"
    WALL_ART = "WALL_ART"
    PLANT = "PLANT"
    STORAGE = "STORAGE"
    DECOR = "DECOR"
    CHAIR = "CHAIR"
    BEDDING = "BEDDING"


class PersonalityProfile(_WireModel):
    label: str = ""
    description: str = ""
    palette: list[str] = []
    vibe: str = ""
    materials: list[str] = []
    budget: Budget | None = None


class ProductIdea(_WireModel):
    name: str
    search_query: str
    category: ProductCategory
    style_hints: list[str] = []
    color_hints: list[str] = []
    rationale: str = ""


# === Placement ===


class NormalizedBox(_WireModel):
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    w: float = Field(ge=0, le=1)
    h: float = Field(ge=0, le=1)
    label: str | None = None


# === Rooms ===


class RoomRecord(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    seed: int
    image_url: str
    boxes: list[NormalizedBox] | None = None
    product_ids: list[str] | None = None
    personality_type: str | None = None
    theme: Any = None
    created_at: int  # epoch milliseconds


# === Requests ===

ImageSize = Literal["1024x1024", "1536x1024", "1024x1536"]


class PersonalityProductsRequest(_WireModel):
    user_answers: list[SurveyAnswer] | None = None


class GenerateRoomRequest(_WireModel):
    prompt: str | None = None
    negative_prompt: str | None = None
    seed: int | None = None
    image_urls: list[str] = []
    boxes: list[NormalizedBox] | None = None
    model: str | None = None
    steps: int = 24
    guidance: float = 5.5


class BaseRoomRequest(_WireModel):
    prompt: str | None = None
    palette_hint: str | None = None
    size: ImageSize = "1024x1024"


class StylizeProductRequest(_WireModel):
    url: str | None = None


class ComposeFinalRequest(_WireModel):
    base_b64: str | None = None
    sprite_b64s: list[str] | None = Field(default=None, alias="spriteB64s")


class ComposeRoomRequest(_WireModel):
    prompt: str | None = None
    product_urls: list[str] | None = None
    palette_hint: str | None = None
    size: ImageSize = "1024x1024"


class CreateRoomRequest(_WireModel):
    seed: StrictInt | None = None
    image_url: str | None = None
    boxes: list[NormalizedBox] | None = None
    product_ids: list[str] | None = None
    personality_type: str | None = None
    theme: Any = None


class DailyQuestionsRequest(_WireModel):
    user_answers: list[SurveyAnswer] | None = None
    previous_daily_questions: list[DailyQuestionHistory] = []
    fallback_to_static: bool = False


class RoomPromptRequest(_WireModel):
    user_answers: list[SurveyAnswer] = []
    product_texts: list[str] = []


# === Responses ===


class PersonalityProductsResponse(_WireModel):
    personality: PersonalityProfile
    products: list[ProductIdea] = Field(min_length=6, max_length=6)


class GenerateRoomResponse(_WireModel):
    image_url: str
    seed: int


class BaseRoomResponse(_WireModel):
    base_b64: str


class StylizeProductResponse(_WireModel):
    sprite_b64: str


class ImageUrlResponse(_WireModel):
    image_url: str


class CreateRoomResponse(_WireModel):
    room_id: str


class ShareRoomResponse(_WireModel):
    share_token: str


class DailyQuestionsResponse(_WireModel):
    questions: list[Question] = Field(min_length=3, max_length=3)
    generated_at: str
    user_tags: list[str] = []
    source: Literal["dynamic", "static"] = "dynamic"


class RoomPromptResponse(_WireModel):
    vibe: str
    palette: str
    prompt: str
    product_queries: list[str]


class HotspotsResponse(_WireModel):
    boxes: list[NormalizedBox]


class ErrorResponse(_WireModel):
    error: str
    message: str | None = None
    retryable: bool = False
    raw_response: str | None = None
