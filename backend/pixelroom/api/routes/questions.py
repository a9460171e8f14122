from __future__ import annotations

from fastapi import APIRouter

from pixelroom.api.errors import error_response, from_pipeline_error
from pixelroom.errors import PipelineError
from pixelroom.models.contracts import DailyQuestionsRequest, DailyQuestionsResponse, ErrorResponse
from pixelroom.services.daily_questions import daily_questions_with_fallback, generate_daily_questions

router = APIRouter(tags=["questions"])


@router.post(
    "/generate-daily-questions",
    response_model=DailyQuestionsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_daily(body: DailyQuestionsRequest):
    """Three personalized daily check-in questions.

    With ``fallbackToStatic`` set, backend failures return the fixed daily
    set instead of an error.
    """
    if not body.user_answers:
        return error_response(400, "userAnswers is required")

    if body.fallback_to_static:
        return await daily_questions_with_fallback(body.user_answers, body.previous_daily_questions)
    try:
        return await generate_daily_questions(body.user_answers, body.previous_daily_questions)
    except PipelineError as exc:
        return from_pipeline_error(exc)
