from __future__ import annotations

from pash.models.change import (
    ChangeScope,
    ReviewOutcome,
    ReviewRequest,
    ReviewResponse,
    ReviewResult,
    RuleFile,
    RuleSet,
)

__all__ = [
    "ChangeScope",
    "ReviewOutcome",
    "ReviewRequest",
    "ReviewResponse",
    "ReviewResult",
    "RuleFile",
    "RuleSet",
]
