from __future__ import annotations

import logging

from pydantic import ValidationError
import pytest

from cmdinclude.core.config import IncludeConfig
from cmdinclude.core.diagnostics import (
    Diagnostic,
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    format_event_message,
)
from cmdinclude.core.exceptions import ConfigurationError
from cmdinclude.ui.cli.diagnostics import CliEmitter
from cmdinclude.ui.cli.state import CLIState, render_message, set_cli_state


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.ERROR):
        emitter.error("boom")
    assert any(record.message == "boom" for record in caplog.records)
    assert emitter.debug_enabled is True


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.INFO):
        emitter.event("command_run", {"command": "ls -al", "cwd": "/srv"})
    assert any(record.message == "Running: ls -al (in /srv)" for record in caplog.records)


def test_emitters_satisfy_protocol() -> None:
    assert isinstance(NullEmitter(), DiagnosticEmitter)
    assert isinstance(LoggingEmitter(), DiagnosticEmitter)
    assert isinstance(CliEmitter(CLIState()), DiagnosticEmitter)


def test_diagnostic_markup_is_bold() -> None:
    assert Diagnostic("fatal: not a git repository\n").to_markup() == (
        "**fatal: not a git repository**"
    )
    assert Diagnostic("   ").to_markup() == ""


@pytest.mark.parametrize(
    ("name", "payload", "expected"),
    [
        ("command_run", {"command": "pwd"}, "Running: pwd"),
        (
            "repository_clone",
            {"url": "https://example.com/r.git", "branch": "main"},
            "Cloning: https://example.com/r.git (main)",
        ),
        (
            "repository_clone_cached",
            {"destination": "/tmp/mod-main"},
            "Reusing cached clone: /tmp/mod-main",
        ),
        ("git_toplevel", {"root": "/repo"}, "Resolved project root /repo"),
        ("unknown", {}, None),
    ],
)
def test_format_event_message(name: str, payload: dict, expected: str | None) -> None:
    assert format_event_message(name, payload) == expected


def test_cli_emitter_hides_events_when_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    emitter = CliEmitter(CLIState(verbosity=0))

    emitter.event("command_run", {"command": "pwd"})
    emitter.warning("Heads up")

    captured = capsys.readouterr()
    assert "Running" not in captured.err
    assert "warning: Heads up" in captured.err


def test_cli_emitter_tallies_problems_for_summary(capsys: pytest.CaptureFixture[str]) -> None:
    emitter = CliEmitter(CLIState())
    assert emitter.summary() is None

    emitter.event("command_run", {"command": "false"})
    emitter.warning("Command 'false' failed with exit status 1.")
    emitter.report()

    assert emitter.summary() == (
        "1 command(s) run with 0 error(s) and 1 warning(s); "
        "failures are shown in bold in the output."
    )
    assert "1 command(s) run with 0 error(s)" in capsys.readouterr().err


def test_cli_emitter_shows_unknown_events_when_very_verbose(
    capsys: pytest.CaptureFixture[str],
) -> None:
    emitter = CliEmitter(CLIState(verbosity=2))

    emitter.event("custom", {"flag": True})

    assert "custom: flag=True" in capsys.readouterr().err


def test_render_message_lists_invalid_settings(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(ValidationError) as info:
        IncludeConfig(max_depth=0)
    error = ConfigurationError("Invalid shell include settings.")
    error.__cause__ = info.value

    set_cli_state(verbosity=0)
    render_message("error", "Invalid shell include settings.", exception=error)
    quiet = capsys.readouterr().err

    set_cli_state(verbosity=1)
    try:
        render_message("error", "Invalid shell include settings.", exception=error)
    finally:
        set_cli_state(verbosity=0)
    verbose = capsys.readouterr().err

    assert "error: Invalid shell include settings." in quiet
    assert "max_depth" not in quiet
    assert "type: ConfigurationError" in verbose
    assert "max_depth: " in verbose
