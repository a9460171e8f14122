"""Personalized daily check-in questions.

Primary strategy: ask the text backend for three fresh multiple-choice
questions built from the user's top tags and avoiding everything in the
question history. Fallback strategy (opt-in): the fixed daily check-in set,
used only after the primary strategy fails with an upstream error.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

import structlog
from pydantic import TypeAdapter, ValidationError

from pixelroom.config import settings
from pixelroom.errors import PipelineError
from pixelroom.models.contracts import (
    AnswerChoice,
    DailyQuestionHistory,
    DailyQuestionsResponse,
    Question,
    SurveyAnswer,
)
from pixelroom.utils.json_parsing import parse_fenced_json
from pixelroom.utils.llm import complete_text
from pixelroom.utils.tags import describe_answers, top_tags

logger = structlog.get_logger()

QUESTION_COUNT = 3
QUESTIONS_TEMPERATURE = 0.8
QUESTIONS_MAX_TOKENS = 1500

SYSTEM_PROMPT = (
    "You are an expert at creating personalized survey questions. Always respond with valid JSON only."
)

PROMPT_TEMPLATE = """You are creating personalized daily check-in questions for a user based on their personality profile.

{context}

Create exactly 3 new daily check-in questions that:
1. Are personalized to the user's personality tags and previous choices
2. Are different from any previously asked questions
3. Help understand their current mood/priorities/interests
4. Each question should have 2-4 multiple choice options
5. Each choice should include relevant personality tags for design recommendations

Return ONLY a JSON object with this exact structure:
{{
  "questions": [
    {{
      "id": "unique_question_id",
      "text": "Question text?",
      "choices": [
        {{
          "id": "unique_choice_id",
          "text": "Choice text",
          "tags": ["tag1", "tag2"]
        }}
      ]
    }}
  ]
}}

Make the questions feel fresh, engaging, and relevant to their personality. Focus on current mood, daily priorities, or design preferences that would help create their ideal room."""

_QUESTION_LIST = TypeAdapter(list[Question])

STATIC_DAILY_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="daily_energy",
        text="How are you feeling today?",
        choices=[
            AnswerChoice(id="energetic", text="Energetic and ready to explore", tags=["high-energy", "adventurous"]),
            AnswerChoice(id="calm", text="Calm and content", tags=["peaceful", "satisfied"]),
            AnswerChoice(id="need_comfort", text="Need some comfort and coziness", tags=["comfort-seeking", "homebody"]),
        ],
    ),
    Question(
        id="daily_priorities",
        text="What's your priority today?",
        choices=[
            AnswerChoice(id="productivity", text="Being productive and getting things done", tags=["goal-oriented", "efficient"]),
            AnswerChoice(id="relaxation", text="Relaxation and self-care", tags=["wellness-focused", "mindful"]),
            AnswerChoice(id="social_connection", text="Connecting with others", tags=["social", "community-oriented"]),
        ],
    ),
    Question(
        id="daily_discovery",
        text="What sounds most appealing right now?",
        choices=[
            AnswerChoice(id="try_something_new", text="Trying something completely new", tags=["novelty-seeker", "experimental"]),
            AnswerChoice(id="improve_existing", text="Improving something I already have", tags=["optimizer", "practical"]),
            AnswerChoice(id="enjoy_favorites", text="Enjoying my current favorites", tags=["consistent", "content"]),
        ],
    ),
)


def build_prompt(
    answers: Sequence[SurveyAnswer],
    history: Sequence[DailyQuestionHistory],
    tags: list[str],
) -> str:
    history_lines = "\n".join(
        f"- {day.date}: {'; '.join(q.text for q in day.questions)}" for day in history
    )
    context = (
        "User's personality profile based on survey responses:\n"
        f"- Top personality tags: {', '.join(tags)}\n"
        f"- Full answers: {describe_answers(answers, quote=True)}\n"
        "\n"
        "Previous daily questions asked (to avoid repetition):\n"
        f"{history_lines}"
    ).strip()
    return PROMPT_TEMPLATE.format(context=context)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def parse_questions(content: str) -> list[Question]:
    """Validate backend text into exactly three questions.

    Raises PipelineError(invalid_ai_response) carrying the raw text.
    """
    outcome = parse_fenced_json(content)
    reason = outcome.reason
    questions: list[Question] = []
    if outcome.ok:
        data = outcome.data
        raw = data.get("questions") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            reason = "missing questions array"
        else:
            try:
                questions = _QUESTION_LIST.validate_python(raw)
            except ValidationError as exc:
                reason = f"malformed question: {exc.error_count()} validation errors"
            else:
                if len(questions) < QUESTION_COUNT:
                    reason = f"expected {QUESTION_COUNT} questions, got {len(questions)}"

    if reason is not None:
        logger.warning("daily_questions_invalid_response", reason=reason, raw=content[:500])
        raise PipelineError(
            "invalid_ai_response",
            "Failed to parse AI response",
            raw_response=content,
        )
    return questions[:QUESTION_COUNT]


async def generate_daily_questions(
    answers: Sequence[SurveyAnswer],
    history: Sequence[DailyQuestionHistory] = (),
) -> DailyQuestionsResponse:
    tags = top_tags(answers)
    logger.info(
        "daily_questions_start",
        num_answers=len(answers),
        history_days=len(history),
        top_tags=tags,
    )
    try:
        content = await complete_text(
            SYSTEM_PROMPT,
            build_prompt(answers, history, tags),
            model=settings.questions_model,
            temperature=QUESTIONS_TEMPERATURE,
            max_tokens=QUESTIONS_MAX_TOKENS,
        )
    except Exception as exc:
        logger.error("daily_questions_llm_failed", error_type=type(exc).__name__, error=str(exc)[:200])
        raise PipelineError("generation_failed", str(exc) or "Unknown error", retryable=True) from exc

    content = content.strip()
    if not content:
        raise PipelineError("no_response_from_openai", "Text backend returned no content", retryable=True)

    questions = parse_questions(content)
    logger.info("daily_questions_generated", texts=[q.text for q in questions])
    return DailyQuestionsResponse(questions=questions, generated_at=_now_iso(), user_tags=tags)


def static_daily_questions(answers: Sequence[SurveyAnswer]) -> DailyQuestionsResponse:
    return DailyQuestionsResponse(
        questions=list(STATIC_DAILY_QUESTIONS),
        generated_at=_now_iso(),
        user_tags=top_tags(answers),
        source="static",
    )


async def daily_questions_with_fallback(
    answers: Sequence[SurveyAnswer],
    history: Sequence[DailyQuestionHistory] = (),
) -> DailyQuestionsResponse:
    """Dynamic questions, or the static set if the backend call fails."""
    try:
        return await generate_daily_questions(answers, history)
    except PipelineError as exc:
        logger.warning("daily_questions_static_fallback", trigger=exc.code)
        return static_daily_questions(answers)
