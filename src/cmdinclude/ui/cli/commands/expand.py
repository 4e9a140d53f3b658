"""Implementation of the `cmdinclude expand` command."""

from __future__ import annotations

from pathlib import Path

import markdown
from pydantic import ValidationError
import typer

from cmdinclude.adapters.markdown_extensions.shell_include import ShellIncludeExtension
from cmdinclude.core.config import IncludeConfig, load_playbook
from cmdinclude.core.exceptions import CmdIncludeError
from cmdinclude.core.formatting import BlockStyle
from cmdinclude.core.origin import DocumentOrigin, RemoteReference, Worktree
from cmdinclude.core.processor import IncludeContext, IncludeProcessor

from .._options import (
    AttributeOption,
    BranchOption,
    CloneRootOption,
    ComponentOption,
    HtmlOption,
    InheritEnvOption,
    InputPathArgument,
    OutputOption,
    PlaybookOption,
    RepositoryUrlOption,
    StyleOption,
    TimeoutOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import infer_block_style, parse_attribute_option


HTML_EXTENSIONS = ["pymdownx.superfences", "pymdownx.highlight", "attr_list", "tables"]


def _origin(
    input_path: Path,
    repository_url: str | None,
    component: str | None,
    branch: str | None,
) -> DocumentOrigin:
    remote = (repository_url, component, branch)
    if not any(remote):
        return Worktree(input_path)
    if not all(remote):
        raise typer.BadParameter(
            "--repository-url, --component and --branch must be given together."
        )
    return RemoteReference(
        url=repository_url or "",
        component=component or "",
        branch=branch or "",
        path=input_path.name,
    )


def _render_html(
    source: str,
    *,
    input_path: Path,
    settings: IncludeConfig,
    attributes: dict[str, str],
    origin: DocumentOrigin,
    emitter: CliEmitter,
) -> str:
    extension_config: dict[str, object] = {
        "document_path": str(input_path),
        "attributes": attributes,
        "block_style": settings.block_style.value,
        "clone_root": str(settings.clone_root or ""),
        "max_depth": settings.max_depth,
        "inherit_env": settings.inherit_env,
        "timeout": settings.timeout or 0,
    }
    if isinstance(origin, RemoteReference):
        extension_config.update(
            {
                "document_path": origin.path or "",
                "repository_url": origin.url,
                "component": origin.component,
                "branch": origin.branch,
            }
        )
    extension = ShellIncludeExtension(emitter=emitter, **extension_config)
    md = markdown.Markdown(extensions=[extension, *HTML_EXTENSIONS])
    return md.convert(source)


def expand(
    input_path: InputPathArgument,
    output: OutputOption = None,
    attribute: AttributeOption = None,
    playbook: PlaybookOption = None,
    repository_url: RepositoryUrlOption = None,
    component: ComponentOption = None,
    branch: BranchOption = None,
    clone_root: CloneRootOption = None,
    timeout: TimeoutOption = None,
    inherit_env: InheritEnvOption = False,
    style: StyleOption = None,
    html: HtmlOption = False,
) -> None:
    """Run the include::cmd: directives of a document and print the result."""

    state = get_cli_state()
    emitter = CliEmitter(state)

    try:
        block_style = infer_block_style(input_path, style)
        overrides = parse_attribute_option(attribute)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if html and block_style is BlockStyle.ASCIIDOC:
        raise typer.BadParameter("--html is only available for Markdown output.")

    origin = _origin(input_path, repository_url, component, branch)

    try:
        attributes = load_playbook(playbook).attributes if playbook else {}
        attributes.update(overrides)
        settings = IncludeConfig(
            block_style=block_style,
            clone_root=clone_root,
            timeout=timeout or None,
            inherit_env=inherit_env,
        )
    except (CmdIncludeError, ValidationError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    source = input_path.read_text(encoding="utf-8")
    if html:
        result = _render_html(
            source,
            input_path=input_path,
            settings=settings,
            attributes=attributes,
            origin=origin,
            emitter=emitter,
        )
    else:
        processor = IncludeProcessor(settings, emitter=emitter)
        result = processor.expand_text(
            source, IncludeContext(origin=origin, attributes=attributes)
        )

    if output is None:
        typer.echo(result, nl=not result.endswith("\n"))
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        if state.verbosity >= 1:
            state.err_console.log(f"Wrote {output}")
    emitter.report()


__all__ = ["expand"]
