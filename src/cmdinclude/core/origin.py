"""Where the document being processed lives."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath


@dataclass(frozen=True, slots=True)
class Worktree:
    """A document present on the local filesystem."""

    path: Path

    def source_dir(self) -> Path:
        """Return the directory holding the document."""
        resolved = Path(self.path).expanduser().resolve()
        if resolved.is_file():
            return resolved.parent
        return resolved


@dataclass(frozen=True, slots=True)
class RemoteReference:
    """A document materialised from a remote repository rather than a worktree."""

    url: str
    component: str
    branch: str
    path: str | None = None

    @property
    def cache_key(self) -> str:
        return f"{self.component}-{self.branch}"

    def relative_dir(self) -> PurePosixPath | None:
        """Return the document's directory relative to the repository root."""
        if not self.path:
            return None
        parent = PurePosixPath(self.path).parent
        return None if str(parent) in {"", "."} else parent


DocumentOrigin = Worktree | RemoteReference


def default_origin() -> Worktree:
    """Origin used when the host supplies no document descriptor."""
    return Worktree(Path("."))


__all__ = ["DocumentOrigin", "RemoteReference", "Worktree", "default_origin"]
