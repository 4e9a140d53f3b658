"""Location and housekeeping of shallow repository clones."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import os
from pathlib import Path
import shutil
import tempfile


CLONE_DIR_ENV = "CMDINCLUDE_CLONE_DIR"
DEFAULT_CLONE_DIRNAME = "cmdinclude-clones"
# Lives inside .git so the checkout itself stays clean.
CLONE_MARKER = "cmdinclude-clone"


def resolve_clone_root(root: str | Path | None = None) -> Path:
    """Return the directory holding clones, honouring ``CMDINCLUDE_CLONE_DIR``."""
    if root is not None:
        return Path(root).expanduser()
    env_root = os.environ.get(CLONE_DIR_ENV)
    if env_root:
        return Path(env_root).expanduser()
    return Path(tempfile.gettempdir()) / DEFAULT_CLONE_DIRNAME


@dataclass(slots=True)
class CloneCache:
    """Clones keyed by ``{component}-{branch}`` under a single root.

    Only checkouts carrying the cmdinclude marker are listed or removed, so
    other repositories sharing the root are never touched.
    """

    root: Path

    @classmethod
    def from_settings(cls, root: str | Path | None = None) -> CloneCache:
        return cls(root=resolve_clone_root(root))

    def path_for(self, key: str) -> Path:
        return self.root / key

    def contains(self, key: str) -> bool:
        return self.path_for(key).is_dir()

    def _marker(self, path: Path) -> Path:
        return path / ".git" / CLONE_MARKER

    def is_managed(self, key: str) -> bool:
        """Return True when ``key`` is a clone created by cmdinclude."""
        return self._marker(self.path_for(key)).is_file()

    def mark(self, key: str, url: str) -> bool:
        """Tag a fresh clone as ours; False when ``key`` holds no git checkout."""
        git_dir = self.path_for(key) / ".git"
        if not git_dir.is_dir():
            return False
        (git_dir / CLONE_MARKER).write_text(f"{url}\n", encoding="utf-8")
        return True

    def entries(self) -> list[Path]:
        """Return the clone directories currently present under the root."""
        if not self.root.is_dir():
            return []
        return sorted(
            child
            for child in self.root.iterdir()
            if child.is_dir() and self._marker(child).is_file()
        )

    def clear(self, keys: Iterable[str] | None = None) -> list[Path]:
        """Remove clones (all of them when ``keys`` is None) and return what was removed."""
        if keys is None:
            targets = self.entries()
        else:
            targets = [self.path_for(key) for key in keys if self.is_managed(key)]
        cleared: list[Path] = []
        for path in targets:
            try:
                shutil.rmtree(path)
            except OSError:
                continue
            cleared.append(path)
        return cleared


__all__ = [
    "CLONE_DIR_ENV",
    "CLONE_MARKER",
    "DEFAULT_CLONE_DIRNAME",
    "CloneCache",
    "resolve_clone_root",
]
