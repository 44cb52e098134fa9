from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Dict, List

import pytest  # type: ignore[import]

# Let GitPython import on machines without a git executable; tests that
# need git are marked with ``requires_git``.
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

from pash.change_ingest import VersionControlPort  # noqa: E402
from pash.errors import NoCommitsYetError  # noqa: E402

PASH_ENV_VARS = (
    "LITELLM_API_URL",
    "LITELLM_API_KEY",
    "LITELLM_MODEL",
    "MAX_FILES_TO_REVIEW",
    "PASH_CUSTOM_RULES",
    "PASH_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> None:
    for name in PASH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class DummyRepository(VersionControlPort):
    def __init__(
        self,
        root: Path,
        *,
        staged: str = "",
        unstaged: str = "",
        untracked: List[str] | None = None,
        hashes: Dict[str, str] | None = None,
        has_commits: bool = True,
    ) -> None:
        self._root = root
        self._staged = staged
        self._unstaged = unstaged
        self._untracked = untracked or []
        self._hashes = hashes or {}
        self._has_commits = has_commits

    @property
    def working_dir(self) -> Path:
        return self._root

    def verify_repository(self) -> None:  # noqa: D401 - simple stub
        return None

    def verify_has_commits(self) -> None:
        if not self._has_commits:
            raise NoCommitsYetError("This repository has no commits yet.")

    def diff_staged(self) -> str:
        return self._staged

    def diff_unstaged(self) -> str:
        return self._unstaged

    def list_untracked(self) -> List[str]:
        return list(self._untracked)

    def hash_object(self, path: str) -> str:
        return self._hashes.get(path, "0000000")


def make_diff(*paths: str) -> str:
    sections = []
    for path in paths:
        sections.append(
            "\n".join(
                [
                    f"diff --git a/{path} b/{path}",
                    "index 1111111..2222222 100644",
                    f"--- a/{path}",
                    f"+++ b/{path}",
                    "@@ -1 +1 @@",
                    "-old line",
                    "+new line",
                ]
            )
        )
    return "\n".join(sections)


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@pytest.fixture()
def git_repo(tmp_path: Path, monkeypatch):
    """A real repository with a single commit, used as the working directory."""
    git = pytest.importorskip("git")

    # Keep user/system git configuration out of the test repository.
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    root = tmp_path / "repo"
    root.mkdir()
    repo = git.Repo.init(root)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")

    (root / "app.py").write_text("print('hello')\n", encoding="utf-8")
    repo.index.add(["app.py"])
    repo.index.commit("Initial commit")

    monkeypatch.chdir(root)
    return repo
