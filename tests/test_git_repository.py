from __future__ import annotations

from pathlib import Path

import pytest  # type: ignore[import]

from conftest import requires_git

pytestmark = requires_git


def test_diffs_reflect_index_and_working_tree(git_repo) -> None:
    from pash.change_ingest import GitRepository

    root = Path(git_repo.working_tree_dir)
    (root / "app.py").write_text("print('hello')\nprint('staged')\n", encoding="utf-8")
    git_repo.index.add(["app.py"])
    (root / "app.py").write_text("print('hello')\nprint('staged')\nprint('unstaged')\n", encoding="utf-8")

    repo = GitRepository(root)
    repo.verify_repository()
    repo.verify_has_commits()

    assert "+print('staged')" in repo.diff_staged()
    assert "+print('unstaged')" in repo.diff_unstaged()
    assert "+print('staged')" not in repo.diff_unstaged()


def test_untracked_listing_respects_gitignore(git_repo) -> None:
    from pash.change_ingest import GitRepository

    root = Path(git_repo.working_tree_dir)
    (root / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (root / "debug.log").write_text("noise\n", encoding="utf-8")
    (root / "pkg").mkdir()
    (root / "pkg" / "new module.py").write_text("x = 1\n", encoding="utf-8")

    untracked = GitRepository(root).list_untracked()

    assert sorted(untracked) == [".gitignore", "pkg/new module.py"]


def test_hash_object_matches_git(git_repo) -> None:
    from pash.change_ingest import GitRepository

    root = Path(git_repo.working_tree_dir)
    (root / "new.txt").write_text("content\n", encoding="utf-8")

    digest = GitRepository(root).hash_object("new.txt")

    assert digest == git_repo.git.hash_object("new.txt")
    assert len(digest) == 40


def test_subdirectory_resolves_to_repository_root(git_repo) -> None:
    from pash.change_ingest import GitRepository

    root = Path(git_repo.working_tree_dir)
    nested = root / "src" / "deep"
    nested.mkdir(parents=True)

    assert GitRepository(nested).working_dir.resolve() == root.resolve()


def test_outside_repository_is_rejected(tmp_path: Path) -> None:
    pytest.importorskip("git")
    from pash.change_ingest import GitRepository
    from pash.errors import NotAGitRepositoryError

    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(NotAGitRepositoryError, match="Not a Git repository"):
        GitRepository(plain)


def test_empty_repository_has_no_commits(tmp_path: Path) -> None:
    git = pytest.importorskip("git")
    from pash.change_ingest import GitRepository
    from pash.errors import NoCommitsYetError

    root = tmp_path / "empty"
    git.Repo.init(root)

    with pytest.raises(NoCommitsYetError, match="no commits yet"):
        GitRepository(root).verify_has_commits()


def test_non_utf8_content_is_decoded_with_replacement(git_repo) -> None:
    from pash.change_ingest import GitRepository

    root = Path(git_repo.working_tree_dir)
    (root / "latin1.txt").write_bytes(b"caf\xe9\n")
    git_repo.index.add(["latin1.txt"])
    git_repo.index.commit("Add latin-1 file")
    (root / "latin1.txt").write_bytes(b"caf\xe9 au lait\n")

    diff = GitRepository(root).diff_unstaged()

    assert "+caf\ufffd au lait" in diff
    diff.encode("utf-8")


def test_hash_object_accepts_option_like_names(git_repo) -> None:
    from pash.change_ingest import GitRepository

    root = Path(git_repo.working_tree_dir)
    (root / "-w").write_text("not an option\n", encoding="utf-8")

    digest = GitRepository(root).hash_object("-w")

    assert digest == git_repo.git.hash_object("--", "-w")
    assert len(digest) == 40


def test_reports_in_a_subdirectory_are_not_reviewed(git_repo, monkeypatch) -> None:
    from pash.change_ingest import ChangeCollector, GitRepository
    from pash.models import ChangeScope

    root = Path(git_repo.working_tree_dir)
    sub = root / "sub"
    (sub / ".pash_reviews").mkdir(parents=True)
    (sub / ".pash_reviews" / "review_20240101_000000.md").write_text("# old\n", encoding="utf-8")
    (sub / "module.py").write_text("y = 2\n", encoding="utf-8")
    monkeypatch.chdir(sub)

    diff = ChangeCollector(GitRepository(Path.cwd())).collect(ChangeScope.UNTRACKED)

    assert ".pash_reviews" not in diff
    assert "+++ b/sub/module.py" in diff
