"""Convenience alias for the shell include Markdown extension."""

from __future__ import annotations

from .adapters.markdown_extensions.shell_include import ShellIncludeExtension, makeExtension


__all__ = ["ShellIncludeExtension", "makeExtension"]
