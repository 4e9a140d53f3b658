"""Run shell commands synchronously and capture their output."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import subprocess
from types import MappingProxyType
from typing import Protocol, runtime_checkable


_log = logging.getLogger(__name__)

SPAWN_FAILURE_STATUS = 127
TIMEOUT_STATUS = 124


def _decode(payload: bytes | str | None) -> str:
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    return payload.decode("utf-8", errors="replace")


def host_environment(*, inherit: bool = False) -> dict[str, str]:
    """Return the environment handed to spawned commands."""
    if inherit:
        return dict(os.environ)
    return {"PATH": os.environ.get("PATH", os.defpath)}


@dataclass(frozen=True, slots=True)
class ShellOptions:
    """Per-invocation process settings; never shared between directives."""

    cwd: str
    env: Mapping[str, str] = field(default_factory=host_environment)
    timeout: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @classmethod
    def build(
        cls,
        cwd: str | Path,
        *,
        inherit_env: bool = False,
        timeout: float | None = None,
    ) -> ShellOptions:
        return cls(cwd=str(cwd), env=host_environment(inherit=inherit_env), timeout=timeout)


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Exit status and captured streams of a finished command."""

    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    @classmethod
    def failure(cls, message: str, *, exit_status: int = SPAWN_FAILURE_STATUS) -> ExecutionResult:
        return cls(exit_status=exit_status, stderr=message)


@runtime_checkable
class CommandRunner(Protocol):
    """Narrow run-and-capture interface used by the include processor."""

    def run(self, command: str, options: ShellOptions) -> ExecutionResult: ...


class SubprocessRunner:
    """Execute commands through the host shell, blocking until they finish."""

    def run(self, command: str, options: ShellOptions) -> ExecutionResult:
        if not Path(options.cwd).is_dir():
            return ExecutionResult.failure(
                f"Working directory '{options.cwd}' does not exist; '{command}' was not run."
            )

        _log.debug("running %r in %s", command, options.cwd)
        try:
            completed = subprocess.run(
                command,
                shell=True,
                cwd=options.cwd,
                env=dict(options.env),
                capture_output=True,
                timeout=options.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            return ExecutionResult(
                exit_status=TIMEOUT_STATUS,
                stdout=_decode(exc.stdout),
                stderr=f"Command '{command}' timed out after {options.timeout} seconds.",
            )
        except OSError as exc:
            return ExecutionResult.failure(f"Failed to run '{command}': {exc}")

        return ExecutionResult(
            exit_status=completed.returncode,
            stdout=_decode(completed.stdout),
            stderr=_decode(completed.stderr),
        )


__all__ = [
    "SPAWN_FAILURE_STATUS",
    "TIMEOUT_STATUS",
    "CommandRunner",
    "ExecutionResult",
    "ShellOptions",
    "SubprocessRunner",
    "host_environment",
]
