from __future__ import annotations

from pash.change_ingest.collector import REVIEW_DIR_NAME, ChangeCollector, count_changed_files
from pash.change_ingest.git_repository import NULL_HASH, GitRepository, VersionControlPort

__all__ = [
    "REVIEW_DIR_NAME",
    "NULL_HASH",
    "ChangeCollector",
    "GitRepository",
    "VersionControlPort",
    "count_changed_files",
]
