from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class ChangeScope(str, Enum):
    """Which part of the working tree to review."""
    STAGED = "staged"
    UNSTAGED = "unstaged"
    UNTRACKED = "untracked"
    ALL = "all"


@dataclass(slots=True)
class RuleFile:
    """A markdown rule document injected verbatim into the prompt."""

    name: str
    path: Path
    content: str


@dataclass(slots=True)
class RuleSet:
    """Ordered collection of rule files; empty means the default prompt is used."""

    rules: List[RuleFile] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def combined(self) -> str:
        return "\n\n".join(rule.content.rstrip("\n") for rule in self.rules)


@dataclass(frozen=True, slots=True)
class ReviewRequest:
    """Chat-completion request sent exactly once per review."""

    model: str
    prompt: str

    def payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": self.prompt,
                }
            ],
        }


@dataclass(slots=True)
class ReviewResponse:
    """Raw HTTP outcome, captured before any content extraction."""

    status_code: int
    raw_body: str


@dataclass(slots=True)
class ReviewResult:
    """LLM-generated review output for the collected diff."""

    added_lines: int
    removed_lines: int
    ai_text: str


@dataclass(slots=True)
class ReviewOutcome:
    """What a pipeline run produced; ``result`` is None when nothing was reviewed."""

    scope: ChangeScope
    file_count: int = 0
    rules: RuleSet = field(default_factory=RuleSet)
    result: Optional[ReviewResult] = None
    report_path: Optional[Path] = None

    @property
    def reviewed(self) -> bool:
        return self.result is not None
