from __future__ import annotations

from pash.services.reporter import ReviewReporter
from pash.services.review_service import ReviewService

__all__ = [
    "ReviewReporter",
    "ReviewService",
]
