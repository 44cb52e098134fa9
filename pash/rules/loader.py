from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from pash.errors import IOFailureError
from pash.models import RuleFile, RuleSet

logger = logging.getLogger(__name__)

LOCAL_PASH_DIR = Path(".pash")
LOCAL_RULES_DIR = LOCAL_PASH_DIR / "rules"


def parse_rule_paths(value: Optional[str]) -> List[str]:
    """Split a comma-separated list of rule file paths."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


class RuleLoader:
    """Reads markdown rule files into a :class:`RuleSet`."""

    def __init__(self, rules_dir: str | Path = LOCAL_RULES_DIR) -> None:
        self.rules_dir = Path(rules_dir)

    def discover(self) -> List[Path]:
        """Markdown files in the local rules directory, sorted by name."""
        if not self.rules_dir.is_dir():
            return []
        return sorted(path for path in self.rules_dir.glob("*.md") if path.is_file())

    def load(self, paths: Optional[Sequence[str | Path]] = None) -> RuleSet:
        """
        Load rule files in the given order.

        With no explicit paths the local rules directory is used as the
        implicit default. Missing files are skipped with a warning.
        """
        if paths:
            candidates = [Path(p) for p in paths]
        else:
            candidates = self.discover()
            if candidates:
                logger.info("Using local repository rules: %s", ", ".join(p.name for p in candidates))

        rules: List[RuleFile] = []
        for path in candidates:
            if not path.is_file():
                logger.warning("Rule file not found: %s", path)
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise IOFailureError(f"Failed to read rule file {path}: {exc}") from exc
            rules.append(RuleFile(name=path.name, path=path, content=content))

        return RuleSet(rules=rules)
