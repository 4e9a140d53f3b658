"""Turn command results into the text spliced at the include site."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

from .diagnostics import Diagnostic
from .execution import ExecutionResult


_BACKTICK_RUN_RE = re.compile(r"`+")


class BlockStyle(str, Enum):
    """Markup used to fence command output."""

    ASCIIDOC = "asciidoc"
    MARKDOWN = "markdown"


@dataclass(frozen=True, slots=True)
class CommandLine:
    """The command shown to readers and the one actually executed."""

    display: str
    executed: str


def _join(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


def build_command(
    command: str,
    args: str = "",
    *,
    versioned_command: str | None = None,
    version: str = "latest",
) -> CommandLine:
    """Insert the version after the versioned command's name, before its arguments."""
    display = _join(command, args)
    if versioned_command and command == versioned_command:
        return CommandLine(display=display, executed=_join(command, version, args))
    return CommandLine(display=display, executed=display)


def render_result(result: ExecutionResult) -> str:
    """Return stdout on success and emphasised stderr on failure."""
    if result.ok:
        return result.stdout.rstrip()
    message = result.stderr.strip() or f"Command exited with status {result.exit_status}."
    return Diagnostic(message, target=None).to_markup()


def _fence_for(body: str) -> str:
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(body)), default=0)
    return "`" * max(3, longest + 1)


def wrap_block(
    body: str,
    *,
    language: str,
    prompt: str | None = None,
    style: BlockStyle = BlockStyle.ASCIIDOC,
) -> str:
    """Fence ``body`` as a source block, optionally led by a ``$ command`` line."""
    lines: list[str] = []
    if prompt is not None:
        lines.append(f"$ {prompt}")
    if body:
        lines.append(body)
    content = "\n".join(lines)

    if style is BlockStyle.MARKDOWN:
        fence = _fence_for(content)
        parts = [f"{fence}{language}"]
    else:
        fence = "----"
        parts = [f"[source,{language}]", fence]
    if content:
        parts.append(content)
    parts.append(fence)
    return "\n".join(parts)


def format_output(
    result: ExecutionResult,
    command_line: CommandLine,
    *,
    block: bool = False,
    print_command: bool = False,
    language: str = "bash",
    style: BlockStyle = BlockStyle.ASCIIDOC,
) -> str:
    """Render an execution result according to the directive's attributes."""
    output = render_result(result)
    if not block:
        return output
    prompt = command_line.display if print_command else None
    return wrap_block(output, language=language, prompt=prompt, style=style)


__all__ = [
    "BlockStyle",
    "CommandLine",
    "build_command",
    "format_output",
    "render_result",
    "wrap_block",
]
