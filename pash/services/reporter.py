from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console  # type: ignore[import]
from rich.markup import escape  # type: ignore[import]

from pash.config import REVIEW_DIR_NAME
from pash.errors import IOFailureError
from pash.models import ReviewResult

logger = logging.getLogger(__name__)

REPORT_TEMPLATE = """# PASH Code Review - {timestamp}

## Basic Summary
- Added lines: {added}
- Removed lines: {removed}

## AI Review
{ai_text}

---
*Generated by PASH Code Review Framework*
"""


def _default_file_mode() -> int:
    # umask can only be read by setting it.
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class ReviewReporter:
    """Persists a review as markdown and echoes it to the console."""

    def __init__(
        self,
        review_dir: str | Path = REVIEW_DIR_NAME,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.review_dir = Path(review_dir)
        self._clock = clock

    @staticmethod
    def render(result: ReviewResult, generated_at: datetime) -> str:
        return REPORT_TEMPLATE.format(
            timestamp=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
            added=result.added_lines,
            removed=result.removed_lines,
            ai_text=result.ai_text,
        )

    def write(self, result: ReviewResult) -> Path:
        """Write the report atomically and return its path."""
        generated_at = self._clock()
        target = self.review_dir / f"review_{generated_at.strftime('%Y%m%d_%H%M%S')}.md"
        content = self.render(result, generated_at)

        tmp_name: Optional[str] = None
        try:
            self.review_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.review_dir,
                prefix=".review_",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(content)
            os.chmod(tmp_name, _default_file_mode())
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise IOFailureError(f"Failed to write review report {target}: {exc}") from exc

        logger.debug("Review report written to %s", target)
        return target

    @staticmethod
    def present(result: ReviewResult, report_path: Path, *, console: Optional[Console] = None) -> None:
        console = console or Console()
        console.rule("[bold cyan]AI Review[/bold cyan]")
        console.print(result.ai_text, markup=False, highlight=False, soft_wrap=True)
        console.rule()
        console.print(f"Review saved to: [bold]{escape(str(report_path))}[/bold]", highlight=False, soft_wrap=True)
