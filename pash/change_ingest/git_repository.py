from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from git import Repo  # type: ignore[import]
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError  # type: ignore[import]

from pash.errors import GitRepositoryError, NoCommitsYetError, NotAGitRepositoryError

logger = logging.getLogger(__name__)

NULL_HASH = "0000000"


class VersionControlPort(ABC):
    """The version-control queries the review pipeline depends on."""

    @property
    @abstractmethod
    def working_dir(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def verify_repository(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def verify_has_commits(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def diff_staged(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def diff_unstaged(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def list_untracked(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def hash_object(self, path: str) -> str:
        raise NotImplementedError


class GitRepository(VersionControlPort):
    """Thin wrapper around GitPython for reading pending working-tree changes."""

    def __init__(self, repo_path: str | Path = ".") -> None:
        self.repo_path = Path(repo_path)
        if not self.repo_path.exists():
            raise GitRepositoryError(f"Repository path does not exist: {self.repo_path}")

        try:
            self._repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as exc:
            raise NotAGitRepositoryError(
                "Not a Git repository. Please run this script from within a Git repository."
            ) from exc

        if self._repo.bare:
            raise GitRepositoryError("Bare repositories are not supported")

    @property
    def working_dir(self) -> Path:
        return Path(self._repo.working_tree_dir)  # type: ignore[arg-type]

    def verify_repository(self) -> None:
        try:
            inside = self._repo.git.rev_parse("--is-inside-work-tree")
        except GitCommandError as exc:
            raise NotAGitRepositoryError(
                "Not a Git repository. Please run this script from within a Git repository."
            ) from exc
        if inside.strip() != "true":
            raise NotAGitRepositoryError(
                "Not a Git repository. Please run this script from within a Git repository."
            )

    def verify_has_commits(self) -> None:
        if not self._repo.head.is_valid():
            raise NoCommitsYetError(
                "This repository has no commits yet. Please make a commit before running a review."
            )

    def diff_staged(self) -> str:
        logger.debug("Running git diff --staged in %s", self.working_dir)
        return self._run_diff("--staged")

    def diff_unstaged(self) -> str:
        logger.debug("Running git diff in %s", self.working_dir)
        return self._run_diff()

    def list_untracked(self) -> List[str]:
        try:
            output = self._repo.git.ls_files("--others", "--exclude-standard", "-z")
        except GitCommandError as exc:
            raise GitRepositoryError(f"Failed to list untracked files: {exc}") from exc
        return [path for path in output.split("\0") if path]

    def hash_object(self, path: str) -> str:
        try:
            return self._repo.git.hash_object("--", path).strip()
        except GitCommandError:
            logger.debug("git hash-object failed for %s", path)
            return NULL_HASH

    def _run_diff(self, *args: str) -> str:
        try:
            output = self._repo.git.diff(*args, stdout_as_string=False)
        except GitCommandError as exc:
            raise GitRepositoryError(f"git diff failed: {exc}") from exc
        return output.decode("utf-8", errors="replace")
