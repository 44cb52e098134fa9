from __future__ import annotations

from pathlib import Path
from typing import Optional


class PashError(RuntimeError):
    """Base class for every fatal error reported by the CLI."""


class ConfigMissingError(PashError):
    """Raised when the configuration file does not exist."""


class ConfigIncompleteError(PashError):
    """Raised when required configuration values are unset or invalid."""


class GitRepositoryError(PashError):
    """Raised when the repository cannot be accessed or read."""


class NotAGitRepositoryError(GitRepositoryError):
    """Raised when the working directory is not inside a Git work tree."""


class NoCommitsYetError(GitRepositoryError):
    """Raised when HEAD does not resolve to a commit."""


class MissingDependencyError(PashError):
    """Raised when a required external tool is not installed."""


class IOFailureError(PashError):
    """Raised when a rule file or review report cannot be read or written."""


class RuleError(PashError):
    """Raised by rule management commands."""


class TooManyFilesError(PashError):
    """Raised when a diff touches more files than MAX_FILES_TO_REVIEW allows."""

    def __init__(self, count: int, limit: int, config_file: Optional[Path] = None) -> None:
        self.count = count
        self.limit = limit
        message = f"The number of changed files ({count}) exceeds the configured limit of {limit}."
        if config_file is not None:
            message += f"\nPlease commit some changes or increase the limit in {config_file}."
        super().__init__(message)


class UpstreamError(PashError):
    """Raised when the chat-completion endpoint reports a failure."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class MalformedResponseError(PashError):
    """Raised when the endpoint returns JSON without a recognisable reply."""

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(f"Failed to extract a valid review from the LiteLLM response. Raw response: {body}")
