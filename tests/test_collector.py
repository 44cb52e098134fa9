from __future__ import annotations

from pathlib import Path

import pytest  # type: ignore[import]

from conftest import DummyRepository, make_diff
from pash.change_ingest import ChangeCollector, count_changed_files
from pash.models import ChangeScope


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "new.py").write_text("a = 1\nb = 2\n", encoding="utf-8")
    (tmp_path / "empty.txt").write_text("", encoding="utf-8")
    (tmp_path / ".pash_reviews").mkdir()
    (tmp_path / ".pash_reviews" / "review_1.md").write_text("# old review\n", encoding="utf-8")
    return tmp_path


def test_staged_and_unstaged_come_straight_from_the_repository(tmp_path: Path) -> None:
    repo = DummyRepository(tmp_path, staged=make_diff("a.py"), unstaged=make_diff("b.py"))
    collector = ChangeCollector(repo)

    assert collector.collect(ChangeScope.STAGED) == make_diff("a.py")
    assert collector.collect("unstaged") == make_diff("b.py")


def test_untracked_files_become_whole_file_additions(workspace: Path) -> None:
    repo = DummyRepository(workspace, untracked=["new.py"], hashes={"new.py": "abc1234"})

    diff = ChangeCollector(repo).collect(ChangeScope.UNTRACKED)

    assert diff.splitlines() == [
        "diff --git a/dev/null b/new.py",
        "new file mode 100644",
        "index 0000000..abc1234",
        "--- /dev/null",
        "+++ b/new.py",
        "+a = 1",
        "+b = 2",
    ]


def test_untracked_skips_report_directory_and_missing_files(workspace: Path) -> None:
    repo = DummyRepository(
        workspace,
        untracked=[".pash_reviews/review_1.md", "gone.py", "empty.txt"],
    )

    diff = ChangeCollector(repo).collect(ChangeScope.UNTRACKED)

    assert ".pash_reviews" not in diff
    assert "gone.py" not in diff
    assert diff.splitlines() == [
        "diff --git a/dev/null b/empty.txt",
        "new file mode 100644",
        "index 0000000..0000000",
        "--- /dev/null",
        "+++ b/empty.txt",
    ]


def test_all_joins_non_empty_sections_with_blank_lines(workspace: Path) -> None:
    staged = make_diff("a.py")
    repo = DummyRepository(workspace, staged=staged, unstaged="", untracked=["new.py"])

    diff = ChangeCollector(repo).collect(ChangeScope.ALL)

    untracked = ChangeCollector(repo).untracked_diff()
    assert diff == f"{staged}\n\n{untracked}"
    assert count_changed_files(diff) == 2


@pytest.mark.parametrize("scope", list(ChangeScope))
def test_empty_sources_yield_empty_diff(tmp_path: Path, scope: ChangeScope) -> None:
    repo = DummyRepository(tmp_path)

    assert ChangeCollector(repo).collect(scope) == ""


def test_count_changed_files_counts_section_headers() -> None:
    assert count_changed_files("") == 0
    assert count_changed_files(make_diff("a.py", "b.py", "c.py")) == 3
    assert count_changed_files("  diff --git a/x b/x\n") == 0


def test_report_directory_is_excluded_relative_to_working_subdirectory(tmp_path: Path) -> None:
    sub = tmp_path / "sub"
    (sub / ".pash_reviews").mkdir(parents=True)
    (sub / ".pash_reviews" / "review_20240101_000000.md").write_text("# old\n", encoding="utf-8")
    (sub / "new.py").write_text("x = 1\n", encoding="utf-8")
    repo = DummyRepository(
        tmp_path,
        untracked=["sub/.pash_reviews/review_20240101_000000.md", "sub/new.py"],
    )

    diff = ChangeCollector(repo, base_dir=sub).collect(ChangeScope.UNTRACKED)

    assert ".pash_reviews" not in diff
    assert count_changed_files(diff) == 1
    assert "+++ b/sub/new.py" in diff
