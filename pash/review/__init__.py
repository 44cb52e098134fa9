from __future__ import annotations

from pash.review.client import (
    EXTRACTION_STRATEGIES,
    ReviewClient,
    choices_message_content,
    count_line_changes,
    message_content,
    top_level_content,
)
from pash.review.prompts import DEFAULT_PROMPT_TEMPLATE, RULES_PROMPT_TEMPLATE, build_prompt

__all__ = [
    "DEFAULT_PROMPT_TEMPLATE",
    "EXTRACTION_STRATEGIES",
    "RULES_PROMPT_TEMPLATE",
    "ReviewClient",
    "build_prompt",
    "choices_message_content",
    "count_line_changes",
    "message_content",
    "top_level_content",
]
