"""Core shell include pipeline: directives, resolution, execution, splicing."""

from __future__ import annotations

from .cache import CLONE_DIR_ENV, CloneCache, resolve_clone_root
from .config import (
    COMPONENT_VERSION_ATTRIBUTE,
    DEFAULT_VERSION,
    VERSIONED_COMMAND_ATTRIBUTE,
    IncludeConfig,
    PlaybookConfig,
    load_playbook,
)
from .diagnostics import (
    Diagnostic,
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    format_event_message,
)
from .directive import (
    COMMAND_PREFIX,
    Directive,
    DirectiveMatch,
    handles,
    match_directive,
    parse_attributes,
)
from .exceptions import CmdIncludeError, ConfigurationError, DirectiveSyntaxError
from .execution import CommandRunner, ExecutionResult, ShellOptions, SubprocessRunner
from .formatting import BlockStyle, CommandLine, build_command, format_output
from .git import GitClient
from .origin import DocumentOrigin, RemoteReference, Worktree, default_origin
from .processor import IncludeContext, IncludeProcessor
from .resolver import (
    DOCUMENT_DIR_TOKEN,
    PROJECT_DIR_TOKEN,
    WorkingDirectoryResolver,
    has_placeholder,
)


__all__ = [
    "CLONE_DIR_ENV",
    "COMMAND_PREFIX",
    "COMPONENT_VERSION_ATTRIBUTE",
    "DEFAULT_VERSION",
    "DOCUMENT_DIR_TOKEN",
    "PROJECT_DIR_TOKEN",
    "VERSIONED_COMMAND_ATTRIBUTE",
    "BlockStyle",
    "CloneCache",
    "CmdIncludeError",
    "CommandLine",
    "CommandRunner",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticEmitter",
    "Directive",
    "DirectiveMatch",
    "DirectiveSyntaxError",
    "DocumentOrigin",
    "ExecutionResult",
    "GitClient",
    "IncludeConfig",
    "IncludeContext",
    "IncludeProcessor",
    "LoggingEmitter",
    "NullEmitter",
    "PlaybookConfig",
    "RemoteReference",
    "ShellOptions",
    "SubprocessRunner",
    "WorkingDirectoryResolver",
    "Worktree",
    "build_command",
    "default_origin",
    "format_event_message",
    "format_output",
    "handles",
    "has_placeholder",
    "load_playbook",
    "match_directive",
    "parse_attributes",
    "resolve_clone_root",
]
