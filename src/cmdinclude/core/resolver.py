"""Compute the working directory of a shell include.

The ``cwd`` attribute of a directive may contain two placeholders:

``$PROJECT_DIR``
    Root of the git repository holding the document. For documents that come
    from a remote repository this is a shallow clone kept under the clone root
    as ``{component}-{branch}``. Existing clones are reused as they are.

``$PWD``
    Directory of the document itself.

Failures never raise. They are reported through the diagnostic emitter and
the placeholder is left in place (or the clone path is used even when the
clone failed) so the command later fails visibly in the rendered page.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .cache import CloneCache
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .git import GitClient
from .origin import DocumentOrigin, RemoteReference, Worktree


_log = logging.getLogger(__name__)

PROJECT_DIR_TOKEN = "$PROJECT_DIR"
DOCUMENT_DIR_TOKEN = "$PWD"
PLACEHOLDER_TOKENS = (PROJECT_DIR_TOKEN, DOCUMENT_DIR_TOKEN)


def has_placeholder(expression: str) -> bool:
    """Return True when ``expression`` still holds an unresolved token."""
    return any(token in expression for token in PLACEHOLDER_TOKENS)


class WorkingDirectoryResolver:
    """Substitute placeholders in ``cwd`` expressions for a document origin."""

    def __init__(
        self,
        *,
        git: GitClient | None = None,
        cache: CloneCache | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.git = git or GitClient()
        self.cache = cache or CloneCache.from_settings()
        self.emitter = emitter or LoggingEmitter(logger_obj=_log)

    def resolve(self, origin: DocumentOrigin, expression: str | None) -> str:
        if not expression:
            return os.getcwd()
        if not has_placeholder(expression):
            return expression
        if isinstance(origin, Worktree):
            return self._resolve_worktree(origin, expression)
        if isinstance(origin, RemoteReference):
            return self._resolve_remote(origin, expression)
        raise TypeError(f"Unsupported document origin: {origin!r}")

    def _resolve_worktree(self, origin: Worktree, expression: str) -> str:
        source_dir = origin.source_dir()
        resolved = expression
        if PROJECT_DIR_TOKEN in resolved:
            root = self.project_root(source_dir)
            if root is not None:
                resolved = resolved.replace(PROJECT_DIR_TOKEN, root)
        return resolved.replace(DOCUMENT_DIR_TOKEN, str(source_dir))

    def project_root(self, directory: Path) -> str | None:
        """Return the git top-level directory containing ``directory``."""
        result = self.git.toplevel(directory)
        if not result.ok:
            detail = result.stderr.strip() or f"exit status {result.exit_status}"
            self.emitter.error(f"Unable to locate the git project root of '{directory}': {detail}")
            return None
        root = result.stdout.rstrip()
        self.emitter.event("git_toplevel", {"directory": str(directory), "root": root})
        return root

    def _resolve_remote(self, origin: RemoteReference, expression: str) -> str:
        clone_dir = self.ensure_clone(origin)
        document_dir = clone_dir
        relative = origin.relative_dir()
        if relative is not None:
            document_dir = clone_dir.joinpath(*relative.parts)
        return expression.replace(PROJECT_DIR_TOKEN, str(clone_dir)).replace(
            DOCUMENT_DIR_TOKEN, str(document_dir)
        )

    def ensure_clone(self, origin: RemoteReference) -> Path:
        """Clone ``origin`` unless its cache directory already exists."""
        destination = self.cache.path_for(origin.cache_key)
        if self.cache.contains(origin.cache_key):
            self.emitter.event("repository_clone_cached", {"destination": str(destination)})
            return destination

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self.emitter.error(f"Unable to create clone directory '{destination.parent}'.", exc)
            return destination
        self.emitter.event(
            "repository_clone",
            {"url": origin.url, "branch": origin.branch, "destination": str(destination)},
        )
        result = self.git.shallow_clone(origin.url, origin.branch, destination)
        if not result.ok:
            detail = result.stderr.strip() or f"exit status {result.exit_status}"
            self.emitter.error(f"Unable to clone '{origin.url}' ({origin.branch}): {detail}")
            return destination
        try:
            self.cache.mark(origin.cache_key, origin.url)
        except OSError as exc:
            self.emitter.warning(f"Unable to tag clone '{destination}' for cache clearing.", exc)
        return destination


__all__ = [
    "DOCUMENT_DIR_TOKEN",
    "PLACEHOLDER_TOKENS",
    "PROJECT_DIR_TOKEN",
    "WorkingDirectoryResolver",
    "has_placeholder",
]
