"""MkDocs plugin running shell include directives found in page sources."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mkdocs.config import config_options
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin
from mkdocs.structure.files import Files
from mkdocs.structure.pages import Page
from mkdocs.utils import log
from pydantic import ValidationError

from cmdinclude.core.config import IncludeConfig
from cmdinclude.core.diagnostics import LoggingEmitter
from cmdinclude.core.origin import DocumentOrigin, RemoteReference, Worktree
from cmdinclude.core.processor import IncludeContext, IncludeProcessor


class _MkdocsEmitter(LoggingEmitter):
    """Emitter that prefixes diagnostics with the page being rendered."""

    def __init__(self) -> None:
        super().__init__(logger_obj=log)
        self.page: str | None = None

    def _prefix(self, message: str) -> str:
        return f"cmdinclude: {message}" if self.page is None else f"cmdinclude [{self.page}]: {message}"

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        super().warning(self._prefix(message), exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        super().error(self._prefix(message), exc)


class ShellIncludePlugin(BasePlugin):
    """Expand ``include::cmd:`` directives before Markdown conversion."""

    config_scheme = (
        ("enabled", config_options.Type(bool, default=True)),
        ("attributes", config_options.Type(dict, default={})),
        ("block_style", config_options.Choice(("markdown", "asciidoc"), default="markdown")),
        ("clone_root", config_options.Type(str, default="")),
        ("max_depth", config_options.Type(int, default=64)),
        ("inherit_env", config_options.Type(bool, default=False)),
        ("timeout", config_options.Type((int, float), default=0)),
        ("repository", config_options.Type(dict, default={})),
    )

    def __init__(self) -> None:
        self.emitter = _MkdocsEmitter()
        self.processor: IncludeProcessor | None = None

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        """Validate settings and prepare a processor for the build."""
        try:
            settings = IncludeConfig(
                block_style=self.config["block_style"],
                clone_root=self.config["clone_root"] or None,
                max_depth=self.config["max_depth"],
                inherit_env=self.config["inherit_env"],
                timeout=self.config["timeout"] or None,
                attributes=self.config["attributes"],
            )
        except ValidationError as exc:
            raise PluginError(f"Invalid cmdinclude configuration: {exc}") from exc
        self.processor = IncludeProcessor(settings, emitter=self.emitter)
        return config

    def _origin(self, page: Page) -> DocumentOrigin | None:
        abs_src_path = page.file.abs_src_path
        if abs_src_path and Path(abs_src_path).exists():
            return Worktree(Path(abs_src_path))
        repository: Mapping[str, Any] = self.config.get("repository") or {}
        url = repository.get("url")
        component = repository.get("component")
        branch = repository.get("branch")
        if url and component and branch:
            return RemoteReference(
                url=str(url),
                component=str(component),
                branch=str(branch),
                path=page.file.src_uri,
            )
        if abs_src_path:
            return Worktree(Path(abs_src_path))
        return None

    @staticmethod
    def _page_attributes(page: Page) -> dict[str, str]:
        attributes: dict[str, str] = {}
        for key, value in (page.meta or {}).items():
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                attributes[str(key)] = str(value)
        return attributes

    def on_page_markdown(
        self,
        markdown: str,
        page: Page,
        config: MkDocsConfig,
        files: Files,
    ) -> str:
        """Splice command output into the page source."""
        del config, files
        if not self.config.get("enabled", True) or self.processor is None:
            return markdown

        origin = self._origin(page)
        context = (
            IncludeContext(attributes=self._page_attributes(page))
            if origin is None
            else IncludeContext(origin=origin, attributes=self._page_attributes(page))
        )
        self.emitter.page = page.file.src_uri
        try:
            return self.processor.expand_text(markdown, context)
        finally:
            self.emitter.page = None


__all__ = ["ShellIncludePlugin"]
