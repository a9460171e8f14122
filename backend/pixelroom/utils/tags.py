from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from pixelroom.models.contracts import SurveyAnswer

TOP_TAG_LIMIT = 8


def top_tags(answers: Sequence[SurveyAnswer], limit: int = TOP_TAG_LIMIT) -> list[str]:
    """Most frequent tags across all answers, ties kept in first-seen order."""
    counts = Counter(tag for answer in answers for tag in answer.tags)
    # Counter keeps insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [tag for tag, _ in ranked[:limit]]


def describe_answers(answers: Sequence[SurveyAnswer], *, quote: bool = False) -> str:
    """Render answers as ``choice (tags: a, b); ...`` for prompts."""
    parts = []
    for answer in answers:
        text = f'"{answer.choice_text}"' if quote else answer.choice_text
        parts.append(f"{text} (tags: {', '.join(answer.tags)})")
    return "; ".join(parts)
