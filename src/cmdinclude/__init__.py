"""Primary public API for cmdinclude."""

from __future__ import annotations

from cmdinclude.core import (
    BlockStyle,
    CmdIncludeError,
    ConfigurationError,
    Diagnostic,
    Directive,
    DirectiveSyntaxError,
    DocumentOrigin,
    ExecutionResult,
    IncludeConfig,
    IncludeContext,
    IncludeProcessor,
    RemoteReference,
    ShellOptions,
    SubprocessRunner,
    WorkingDirectoryResolver,
    Worktree,
    handles,
    load_playbook,
    match_directive,
)
from cmdinclude.version import get_version


__version__ = get_version()

__all__ = [
    "BlockStyle",
    "CmdIncludeError",
    "ConfigurationError",
    "Diagnostic",
    "Directive",
    "DirectiveSyntaxError",
    "DocumentOrigin",
    "ExecutionResult",
    "IncludeConfig",
    "IncludeContext",
    "IncludeProcessor",
    "RemoteReference",
    "ShellOptions",
    "SubprocessRunner",
    "WorkingDirectoryResolver",
    "Worktree",
    "__version__",
    "get_version",
    "handles",
    "load_playbook",
    "match_directive",
]
