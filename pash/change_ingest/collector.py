from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from pash.change_ingest.git_repository import VersionControlPort
from pash.config import REVIEW_DIR_NAME
from pash.errors import IOFailureError
from pash.models import ChangeScope

logger = logging.getLogger(__name__)


def count_changed_files(diff: str) -> int:
    """Number of ``diff --git`` section headers in a unified diff."""
    return sum(1 for line in diff.splitlines() if line.startswith("diff --git"))


class ChangeCollector:
    """Produces the unified diff text for a requested change scope."""

    def __init__(
        self,
        repository: VersionControlPort,
        *,
        exclude_dirs: Iterable[str] = (REVIEW_DIR_NAME,),
        base_dir: Optional[Path] = None,
    ) -> None:
        """
        Args:
            repository: Source of diffs and untracked paths.
            exclude_dirs: Directories, relative to ``base_dir``, whose untracked files are skipped.
            base_dir: Directory the exclusions are anchored at; defaults to the current directory.
        """
        self._repository = repository
        self._exclude_dirs = tuple(d.rstrip("/") for d in exclude_dirs)
        self._base_dir = base_dir

    def collect(self, scope: ChangeScope | str) -> str:
        scope = ChangeScope(scope)
        if scope is ChangeScope.STAGED:
            return self._repository.diff_staged()
        if scope is ChangeScope.UNSTAGED:
            return self._repository.diff_unstaged()
        if scope is ChangeScope.UNTRACKED:
            return self.untracked_diff()

        sections = [
            self._repository.diff_staged(),
            self._repository.diff_unstaged(),
            self.untracked_diff(),
        ]
        return "\n\n".join(section for section in sections if section)

    def untracked_diff(self) -> str:
        """Render every untracked file as a whole-file addition."""
        hunks: List[str] = []
        excluded = self._excluded_prefixes()
        for path in self._repository.list_untracked():
            if any(path == d or path.startswith(d + "/") for d in excluded):
                continue
            if not (self._repository.working_dir / path).is_file():
                continue
            hunks.append(self._synthesize_hunk(path))
        logger.debug("Synthesized %d untracked file hunks", len(hunks))
        return "\n".join(hunks)

    def _excluded_prefixes(self) -> Tuple[str, ...]:
        """Excluded directories as paths relative to the repository root."""
        root = self._repository.working_dir.resolve()
        base = (self._base_dir or Path.cwd()).resolve()
        prefixes = set(self._exclude_dirs)
        for name in self._exclude_dirs:
            try:
                prefixes.add((base / name).relative_to(root).as_posix())
            except ValueError:
                continue
        return tuple(prefixes)

    def _synthesize_hunk(self, path: str) -> str:
        full_path = self._repository.working_dir / path
        try:
            content = full_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise IOFailureError(f"Failed to read untracked file {path}: {exc}") from exc

        lines = content.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        header = [
            f"diff --git a/dev/null b/{path}",
            "new file mode 100644",
            f"index 0000000..{self._repository.hash_object(path)}",
            "--- /dev/null",
            f"+++ b/{path}",
        ]
        return "\n".join(header + ["+" + line for line in lines])
