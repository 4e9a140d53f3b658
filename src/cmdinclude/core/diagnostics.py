"""Diagnostic abstractions shared across the include pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A failure that is rendered into the document instead of aborting it."""

    message: str
    target: str | None = None

    def to_markup(self) -> str:
        """Return the emphasised text spliced at the include site."""
        text = self.message.strip()
        return f"**{text}**" if text else ""


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "command_run":
        command = data.get("command") or "<unknown>"
        cwd = data.get("cwd")
        suffix = f" (in {cwd})" if cwd else ""
        return f"Running: {command}{suffix}"

    if name == "repository_clone":
        url = data.get("url") or "<unknown>"
        branch = data.get("branch")
        suffix = f" ({branch})" if branch else ""
        return f"Cloning: {url}{suffix}"

    if name == "repository_clone_cached":
        destination = data.get("destination") or "<unknown>"
        return f"Reusing cached clone: {destination}"

    if name == "git_toplevel":
        root = data.get("root") or "<unknown>"
        return f"Resolved project root {root}"

    return None


__all__ = [
    "Diagnostic",
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
