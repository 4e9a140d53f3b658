"""Exception hierarchy for the shell include pipeline."""

from __future__ import annotations


class CmdIncludeError(RuntimeError):
    """Base exception for shell include failures."""


class DirectiveSyntaxError(CmdIncludeError):
    """Raised when an include attribute list cannot be parsed."""


class ConfigurationError(CmdIncludeError):
    """Raised when settings or playbooks are malformed."""


__all__ = [
    "CmdIncludeError",
    "ConfigurationError",
    "DirectiveSyntaxError",
]
