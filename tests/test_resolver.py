from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
import subprocess
from typing import Any

import pytest

from cmdinclude.core import git as git_mod
from cmdinclude.core.cache import CloneCache
from cmdinclude.core.execution import ExecutionResult
from cmdinclude.core.git import GitClient
from cmdinclude.core.origin import RemoteReference, Worktree
from cmdinclude.core.resolver import WorkingDirectoryResolver, has_placeholder


class _RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


class _StubGit:
    def __init__(
        self,
        *,
        toplevel: ExecutionResult | None = None,
        clone: ExecutionResult | None = None,
        create_clone: bool = True,
    ) -> None:
        self.toplevel_result = toplevel or ExecutionResult(exit_status=0, stdout="/repo\n")
        self.clone_result = clone or ExecutionResult(exit_status=0)
        self.create_clone = create_clone
        self.toplevel_calls: list[Path] = []
        self.clone_calls: list[tuple[str, str, Path]] = []

    def toplevel(self, directory: Path) -> ExecutionResult:
        self.toplevel_calls.append(directory)
        return self.toplevel_result

    def shallow_clone(self, url: str, branch: str, destination: Path) -> ExecutionResult:
        self.clone_calls.append((url, branch, destination))
        if self.create_clone:
            (destination / ".git").mkdir(parents=True)
        return self.clone_result


def _resolver(git: _StubGit, tmp_path: Path) -> tuple[WorkingDirectoryResolver, _RecordingEmitter]:
    emitter = _RecordingEmitter()
    resolver = WorkingDirectoryResolver(
        git=git,  # type: ignore[arg-type]
        cache=CloneCache(root=tmp_path / "clones"),
        emitter=emitter,
    )
    return resolver, emitter


def _document(tmp_path: Path) -> Path:
    page = tmp_path / "repo" / "docs" / "modules" / "ROOT" / "pages" / "x.adoc"
    page.parent.mkdir(parents=True)
    page.write_text("= Title\n", encoding="utf-8")
    return page


def test_missing_expression_defaults_to_process_directory(tmp_path: Path) -> None:
    resolver, _ = _resolver(_StubGit(), tmp_path)

    assert resolver.resolve(Worktree(tmp_path), None) == os.getcwd()
    assert resolver.resolve(Worktree(tmp_path), "") == os.getcwd()


def test_expression_without_placeholders_is_unchanged(tmp_path: Path) -> None:
    git = _StubGit()
    resolver, _ = _resolver(git, tmp_path)

    assert resolver.resolve(Worktree(tmp_path), "/opt/examples") == "/opt/examples"
    assert git.toplevel_calls == []


def test_project_dir_uses_git_root_of_document_directory(tmp_path: Path) -> None:
    page = _document(tmp_path)
    git = _StubGit(toplevel=ExecutionResult(exit_status=0, stdout="/repo\n"))
    resolver, emitter = _resolver(git, tmp_path)

    resolved = resolver.resolve(Worktree(page), "$PROJECT_DIR/examples")

    assert resolved == "/repo/examples"
    assert git.toplevel_calls == [page.parent.resolve()]
    assert emitter.events[0][0] == "git_toplevel"


def test_project_dir_lookup_from_directory_origin(tmp_path: Path) -> None:
    page = _document(tmp_path)
    git = _StubGit()
    resolver, _ = _resolver(git, tmp_path)

    resolver.resolve(Worktree(page.parent), "$PROJECT_DIR")

    assert git.toplevel_calls == [page.parent.resolve()]


def test_failed_git_lookup_leaves_placeholder(tmp_path: Path) -> None:
    page = _document(tmp_path)
    git = _StubGit(
        toplevel=ExecutionResult(exit_status=128, stderr="fatal: not a git repository\n")
    )
    resolver, emitter = _resolver(git, tmp_path)

    resolved = resolver.resolve(Worktree(page), "$PROJECT_DIR/examples")

    assert resolved == "$PROJECT_DIR/examples"
    assert has_placeholder(resolved)
    assert len(emitter.errors) == 1
    assert "not a git repository" in emitter.errors[0]


def test_pwd_is_the_document_directory(tmp_path: Path) -> None:
    page = _document(tmp_path)
    git = _StubGit()
    resolver, _ = _resolver(git, tmp_path)

    assert resolver.resolve(Worktree(page), "$PWD/snippets") == f"{page.parent.resolve()}/snippets"
    assert git.toplevel_calls == []


def test_remote_reference_clones_once_when_absent(tmp_path: Path) -> None:
    git = _StubGit()
    resolver, emitter = _resolver(git, tmp_path)
    origin = RemoteReference(url="https://example.com/mod.git", component="mod", branch="main")

    resolved = resolver.resolve(origin, "$PROJECT_DIR")

    expected = tmp_path / "clones" / "mod-main"
    assert resolved == str(expected)
    assert git.clone_calls == [("https://example.com/mod.git", "main", expected)]
    assert [name for name, _ in emitter.events] == ["repository_clone"]
    assert resolver.cache.is_managed("mod-main")


def test_remote_reference_reuses_existing_clone(tmp_path: Path) -> None:
    existing = tmp_path / "clones" / "mod-main"
    (existing / ".git").mkdir(parents=True)
    git = _StubGit()
    resolver, emitter = _resolver(git, tmp_path)
    origin = RemoteReference(url="https://example.com/mod.git", component="mod", branch="main")

    first = resolver.resolve(origin, "$PROJECT_DIR/bin")
    second = resolver.resolve(origin, "$PROJECT_DIR/bin")

    assert first == second == f"{existing}/bin"
    assert git.clone_calls == []
    assert [name for name, _ in emitter.events] == ["repository_clone_cached"] * 2


def test_sequential_resolutions_clone_only_once(tmp_path: Path) -> None:
    git = _StubGit()
    resolver, _ = _resolver(git, tmp_path)
    origin = RemoteReference(url="https://example.com/mod.git", component="mod", branch="main")

    resolver.resolve(origin, "$PROJECT_DIR")
    resolver.resolve(origin, "$PROJECT_DIR")

    assert len(git.clone_calls) == 1


def test_failed_clone_still_substitutes_target(tmp_path: Path) -> None:
    git = _StubGit(
        clone=ExecutionResult(exit_status=128, stderr="fatal: Remote branch nope not found\n"),
        create_clone=False,
    )
    resolver, emitter = _resolver(git, tmp_path)
    origin = RemoteReference(url="https://example.com/mod.git", component="mod", branch="nope")

    resolved = resolver.resolve(origin, "$PROJECT_DIR")

    assert resolved == str(tmp_path / "clones" / "mod-nope")
    assert not resolver.cache.is_managed("mod-nope")
    assert "Remote branch nope not found" in emitter.errors[0]


def test_remote_pwd_follows_document_path(tmp_path: Path) -> None:
    git = _StubGit()
    resolver, _ = _resolver(git, tmp_path)
    origin = RemoteReference(
        url="https://example.com/mod.git",
        component="mod",
        branch="v1.0",
        path="docs/modules/ROOT/pages/index.adoc",
    )

    resolved = resolver.resolve(origin, "$PWD")

    assert resolved == str(tmp_path / "clones" / "mod-v1.0" / "docs" / "modules" / "ROOT" / "pages")


def test_git_client_builds_commands(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    recorded: list[tuple[list[str], Any]] = []

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        recorded.append((cmd, kwargs.get("cwd")))
        return subprocess.CompletedProcess(cmd, 0, stdout="/repo\n", stderr="")

    monkeypatch.setattr(git_mod.subprocess, "run", fake_run)
    client = GitClient()

    assert client.toplevel(tmp_path).stdout == "/repo\n"
    client.shallow_clone("https://example.com/mod.git", "main", tmp_path / "mod-main")

    assert recorded[0] == (["git", "rev-parse", "--show-toplevel"], tmp_path)
    assert recorded[1][0] == [
        "git",
        "clone",
        "--depth",
        "1",
        "--single-branch",
        "--branch",
        "main",
        "--",
        "https://example.com/mod.git",
        str(tmp_path / "mod-main"),
    ]


def test_git_client_reports_missing_executable(tmp_path: Path) -> None:
    result = GitClient(executable="definitely-not-git-xyz").toplevel(tmp_path)

    assert not result.ok
    assert "Failed to invoke git" in result.stderr


def test_git_client_keeps_dash_urls_out_of_options(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    recorded: list[list[str]] = []

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        recorded.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr(git_mod.subprocess, "run", fake_run)

    GitClient().shallow_clone("--upload-pack=touch pwned", "main", tmp_path / "x")

    separator = recorded[0].index("--")
    assert recorded[0][separator + 1] == "--upload-pack=touch pwned"
