"""Thin wrapper around the git executable."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
import subprocess

from .execution import ExecutionResult


class GitClient:
    """Invoke git with argument lists and capture the outcome."""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def _run(self, args: Sequence[str], cwd: Path | None = None) -> ExecutionResult:
        command = [self.executable, *args]
        try:
            proc = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            return ExecutionResult.failure(f"Failed to invoke git: {exc}")
        return ExecutionResult(
            exit_status=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

    def toplevel(self, directory: Path) -> ExecutionResult:
        """Run ``git rev-parse --show-toplevel`` inside ``directory``."""
        return self._run(["rev-parse", "--show-toplevel"], cwd=directory)

    def shallow_clone(self, url: str, branch: str, destination: Path) -> ExecutionResult:
        """Clone a single branch at depth 1 into ``destination``."""
        return self._run(
            [
                "clone",
                "--depth",
                "1",
                "--single-branch",
                "--branch",
                branch,
                "--",
                url,
                str(destination),
            ]
        )


__all__ = ["GitClient"]
