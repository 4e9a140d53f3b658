"""Diagnostic emitter bridging the include pipeline with CLI rendering utilities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cmdinclude.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter(DiagnosticEmitter):
    """Render include diagnostics on stderr and keep a tally for the run summary."""

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        if debug_enabled is None:
            debug_enabled = self._state.show_tracebacks
        self.debug_enabled = bool(debug_enabled)
        self.warnings = 0
        self.errors = 0
        self.commands = 0

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings += 1
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors += 1
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if name == "command_run":
            self.commands += 1
        if self._state.verbosity < 1:
            return
        message = format_event_message(name, payload)
        if message is None and self._state.verbosity >= 2:
            details = ", ".join(f"{key}={value}" for key, value in payload.items())
            message = f"{name}: {details}" if details else name
        if message:
            render_message("info", message)

    def summary(self) -> str | None:
        """Describe the problems seen so far, or None when the run was clean."""
        if not (self.warnings or self.errors):
            return None
        return (
            f"{self.commands} command(s) run with {self.errors} error(s) "
            f"and {self.warnings} warning(s); failures are shown in bold in the output."
        )

    def report(self) -> None:
        """Print the run summary when something went wrong."""
        message = self.summary()
        if message is not None:
            emit_warning(message)


__all__ = ["CliEmitter"]
