"""Markdown extension expanding ``include::cmd:`` directives into command output."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from pydantic import ValidationError

from cmdinclude.core.config import IncludeConfig
from cmdinclude.core.diagnostics import DiagnosticEmitter
from cmdinclude.core.exceptions import ConfigurationError
from cmdinclude.core.formatting import BlockStyle
from cmdinclude.core.origin import DocumentOrigin, RemoteReference, Worktree, default_origin
from cmdinclude.core.processor import IncludeContext, IncludeProcessor


class _ShellIncludePreprocessor(Preprocessor):
    """Swap directive lines for the output of the commands they name."""

    def __init__(
        self,
        md: Markdown,
        processor: IncludeProcessor,
        *,
        document_path: str | None,
        repository: tuple[str, str, str] | None,
        attributes: Mapping[str, str],
    ) -> None:
        super().__init__(md)
        self.processor = processor
        self._document_path = document_path
        self._repository = repository
        self._attributes = {str(key): str(value) for key, value in attributes.items()}

    def _origin(self) -> DocumentOrigin:
        document_path = getattr(self.md, "cmdinclude_document_path", None) or self._document_path
        if document_path and Path(document_path).exists():
            return Worktree(Path(document_path))
        if self._repository is not None:
            url, component, branch = self._repository
            return RemoteReference(url=url, component=component, branch=branch, path=document_path)
        if document_path:
            return Worktree(Path(document_path))
        return default_origin()

    def _context(self) -> IncludeContext:
        attributes = dict(self._attributes)
        overrides = getattr(self.md, "cmdinclude_attributes", None)
        if isinstance(overrides, Mapping):
            attributes.update({str(key): str(value) for key, value in overrides.items()})
        return IncludeContext(origin=self._origin(), attributes=attributes)

    def run(self, lines: list[str]) -> list[str]:
        return self.processor.expand(lines, self._context())


class ShellIncludeExtension(Extension):
    """Register the shell include preprocessor ahead of snippets and fences."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "document_path": ["", "Path of the document being converted."],
            "repository_url": ["", "Remote repository the document comes from."],
            "component": ["", "Component name used to key repository clones."],
            "branch": ["", "Branch or tag cloned for $PROJECT_DIR."],
            "attributes": [{}, "Document attributes such as 'versioned-command'."],
            "block_style": ["markdown", "Fence style for block=true: 'markdown' or 'asciidoc'."],
            "clone_root": ["", "Directory holding repository clones."],
            "max_depth": [64, "Maximum nesting of directives in command output."],
            "inherit_env": [False, "Pass the full environment to commands."],
            "timeout": [0, "Seconds before a command is abandoned (0 waits forever)."],
        }
        self.emitter: DiagnosticEmitter | None = kwargs.pop("emitter", None)
        super().__init__(**kwargs)

    def build_config(self) -> IncludeConfig:
        """Validate the extension settings into an :class:`IncludeConfig`."""
        try:
            return IncludeConfig(
                block_style=BlockStyle(self.getConfig("block_style") or BlockStyle.MARKDOWN),
                clone_root=self.getConfig("clone_root") or None,
                max_depth=self.getConfig("max_depth"),
                inherit_env=bool(self.getConfig("inherit_env")),
                timeout=self.getConfig("timeout") or None,
            )
        except (ValidationError, ValueError) as exc:
            raise ConfigurationError(f"Invalid shell include settings: {exc}") from exc

    def _repository(self) -> tuple[str, str, str] | None:
        url = self.getConfig("repository_url")
        component = self.getConfig("component")
        branch = self.getConfig("branch")
        if url and component and branch:
            return url, component, branch
        return None

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        processor = IncludeProcessor(self.build_config(), emitter=self.emitter)
        preprocessor = _ShellIncludePreprocessor(
            md,
            processor,
            document_path=self.getConfig("document_path") or None,
            repository=self._repository(),
            attributes=self.getConfig("attributes") or {},
        )
        md.preprocessors.register(preprocessor, "cmdinclude_shell_include", priority=40)


def makeExtension(  # noqa: N802 - Markdown expects this entry point name
    **kwargs: Any,
) -> ShellIncludeExtension:  # pragma: no cover - entry point
    return ShellIncludeExtension(**kwargs)


__all__ = ["ShellIncludeExtension", "makeExtension"]
