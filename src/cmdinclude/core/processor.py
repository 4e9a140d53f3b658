"""Resolve, execute, and splice shell include directives."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
from types import MappingProxyType

from .cache import CloneCache
from .config import (
    COMPONENT_VERSION_ATTRIBUTE,
    VERSIONED_COMMAND_ATTRIBUTE,
    IncludeConfig,
)
from .diagnostics import Diagnostic, DiagnosticEmitter, LoggingEmitter
from .directive import Directive, match_directive
from .exceptions import DirectiveSyntaxError
from .execution import CommandRunner, ExecutionResult, ShellOptions, SubprocessRunner
from .formatting import build_command, format_output
from .origin import DocumentOrigin, default_origin
from .resolver import WorkingDirectoryResolver, has_placeholder


_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IncludeContext:
    """What the host engine knows about the document being processed."""

    origin: DocumentOrigin = field(default_factory=default_origin)
    attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


class IncludeProcessor:
    """Replace ``include::cmd:`` lines with the output of their command."""

    def __init__(
        self,
        config: IncludeConfig | None = None,
        *,
        resolver: WorkingDirectoryResolver | None = None,
        runner: CommandRunner | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or IncludeConfig()
        self.emitter = emitter or LoggingEmitter(logger_obj=_log)
        self.resolver = resolver or WorkingDirectoryResolver(
            cache=CloneCache.from_settings(self.config.clone_root),
            emitter=self.emitter,
        )
        self.runner = runner or SubprocessRunner()

    def attribute(self, context: IncludeContext, name: str) -> str | None:
        """Look up a document attribute, falling back to configured defaults."""
        value = context.attributes.get(name)
        if value is None:
            value = self.config.attributes.get(name)
        return value or None

    def process(self, directive: Directive, context: IncludeContext) -> str:
        """Run one directive and return the text that replaces it."""
        if directive.has_conflicting_args:
            self.emitter.warning(
                f"Both 'args' and 'flags' are set on '{directive.target}'; using 'args'."
            )
        elif directive.uses_deprecated_flags:
            self.emitter.warning(
                f"The 'flags' attribute on '{directive.target}' is deprecated; use 'args'."
            )

        cwd = self.resolver.resolve(context.origin, directive.cwd)
        versioned_command = (
            self.attribute(context, VERSIONED_COMMAND_ATTRIBUTE) or self.config.versioned_command
        )
        version = (
            self.attribute(context, COMPONENT_VERSION_ATTRIBUTE) or self.config.default_version
        )
        command_line = build_command(
            directive.command,
            directive.args,
            versioned_command=versioned_command,
            version=version,
        )

        if has_placeholder(cwd):
            result = ExecutionResult.failure(
                f"Unresolved working directory '{cwd}'; '{command_line.display}' was not run."
            )
        else:
            options = ShellOptions.build(
                cwd,
                inherit_env=self.config.inherit_env,
                timeout=self.config.timeout,
            )
            self.emitter.event("command_run", {"command": command_line.executed, "cwd": cwd})
            result = self.runner.run(command_line.executed, options)

        if not result.ok:
            self.emitter.warning(
                f"Command '{command_line.executed}' failed with exit status {result.exit_status}."
            )

        return format_output(
            result,
            command_line,
            block=directive.block,
            print_command=directive.print,
            language=directive.format,
            style=self.config.block_style,
        )

    def expand(
        self,
        lines: Iterable[str],
        context: IncludeContext,
        *,
        depth: int = 0,
    ) -> list[str]:
        """Splice command output in place of directives, re-scanning what was spliced."""
        expanded: list[str] = []
        for line in lines:
            try:
                match = match_directive(line)
            except DirectiveSyntaxError as exc:
                self.emitter.warning(str(exc))
                expanded.append(Diagnostic(str(exc)).to_markup())
                continue

            if match is None:
                expanded.append(line)
                continue
            if match.escaped:
                expanded.append(match.literal)
                continue
            if depth >= self.config.max_depth:
                message = (
                    f"Maximum include depth of {self.config.max_depth} exceeded "
                    f"at '{match.directive.target}'."
                )
                self.emitter.error(message)
                expanded.append(Diagnostic(message, target=match.directive.target).to_markup())
                continue

            output = self.process(match.directive, context)
            expanded.extend(self.expand(output.split("\n"), context, depth=depth + 1))
        return expanded

    def expand_text(self, text: str, context: IncludeContext | None = None) -> str:
        """Expand every directive in ``text``, keeping its trailing newline."""
        context = context or IncludeContext()
        trailing = text.endswith("\n")
        body = text[:-1] if trailing else text
        lines = self.expand(body.split("\n"), context)
        result = "\n".join(lines)
        return f"{result}\n" if trailing else result


__all__ = ["IncludeContext", "IncludeProcessor"]
