"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
ORIGIN_PANEL = "Document Origin"
EXECUTION_PANEL = "Execution"
OUTPUT_PANEL = "Output"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="AsciiDoc (.adoc) or Markdown (.md) document containing include::cmd: directives.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

AttributeOption = Annotated[
    list[str] | None,
    typer.Option(
        "--attribute",
        "-a",
        help="Document attribute as NAME=VALUE (repeatable), e.g. -a page-component-version=2.1.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

PlaybookOption = Annotated[
    Path | None,
    typer.Option(
        "--playbook",
        "-p",
        help="Antora-style playbook whose asciidoc.attributes seed the document attributes.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

RepositoryUrlOption = Annotated[
    str | None,
    typer.Option(
        "--repository-url",
        help="Treat the document as coming from this remote repository.",
        rich_help_panel=ORIGIN_PANEL,
    ),
]

ComponentOption = Annotated[
    str | None,
    typer.Option(
        "--component",
        help="Component name keying the repository clone.",
        rich_help_panel=ORIGIN_PANEL,
    ),
]

BranchOption = Annotated[
    str | None,
    typer.Option(
        "--branch",
        help="Branch or tag to clone for $PROJECT_DIR.",
        rich_help_panel=ORIGIN_PANEL,
    ),
]

CloneRootOption = Annotated[
    Path | None,
    typer.Option(
        "--clone-root",
        help=(
            "Directory holding repository clones "
            "(defaults to $CMDINCLUDE_CLONE_DIR or cmdinclude-clones in the temp dir)."
        ),
        rich_help_panel=ORIGIN_PANEL,
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        min=0,
        help="Abandon commands running longer than this many seconds.",
        rich_help_panel=EXECUTION_PANEL,
    ),
]

InheritEnvOption = Annotated[
    bool,
    typer.Option(
        "--inherit-env/--path-only",
        help="Pass the full environment to commands instead of only PATH.",
        rich_help_panel=EXECUTION_PANEL,
    ),
]

StyleOption = Annotated[
    str | None,
    typer.Option(
        "--style",
        help="Block markup for block=true: 'asciidoc' or 'markdown' (inferred from INPUT).",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

HtmlOption = Annotated[
    bool,
    typer.Option(
        "--html",
        help="Convert the expanded Markdown to HTML.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the result to this file instead of stdout.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]


__all__ = [
    "AttributeOption",
    "BranchOption",
    "CloneRootOption",
    "ComponentOption",
    "HtmlOption",
    "InheritEnvOption",
    "InputPathArgument",
    "OutputOption",
    "PlaybookOption",
    "RepositoryUrlOption",
    "StyleOption",
    "TimeoutOption",
]
