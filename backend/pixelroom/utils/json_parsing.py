"""Recovery strategies for JSON produced by text-generation backends.

Two named strategies, applied by different callers:

* brace extraction: direct parse first, then parse the greedy ``{...}``
  span between the first ``{`` and the last ``}`` (prose around a JSON block)
* code-fence stripping: remove a leading ```` ```json ```` or ```` ``` ````
  and the trailing ```` ``` ```` before parsing
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

_BRACE_SPAN_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged result of a recovery attempt: either ``data`` or ``reason``."""

    data: Any = None
    reason: str | None = None
    strategy: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def parse_with_brace_extraction(text: str) -> ParseOutcome:
    try:
        return ParseOutcome(data=json.loads(text), strategy="direct")
    except json.JSONDecodeError:
        pass

    match = _BRACE_SPAN_RE.search(text)
    if match is None:
        return ParseOutcome(reason="no_json")
    try:
        return ParseOutcome(data=json.loads(match.group(0)), strategy="brace_extraction")
    except json.JSONDecodeError:
        return ParseOutcome(reason="no_json")


def strip_code_fence(text: str) -> str:
    """Strip Markdown fence markers wrapping the whole text, if present."""
    if text.startswith("```json") and text.endswith("```") and len(text) >= 10:
        return text[7:-3].strip()
    if text.startswith("```") and text.endswith("```") and len(text) >= 6:
        return text[3:-3].strip()
    return text


def parse_fenced_json(text: str) -> ParseOutcome:
    cleaned = strip_code_fence(text.strip())
    strategy = "fence_stripped" if cleaned != text.strip() else "direct"
    try:
        return ParseOutcome(data=json.loads(cleaned), strategy=strategy)
    except json.JSONDecodeError as exc:
        return ParseOutcome(reason=f"invalid_json: {exc.msg}")
