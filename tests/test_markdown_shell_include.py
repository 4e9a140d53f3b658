from __future__ import annotations

from pathlib import Path

import markdown
import pytest

from cmdinclude.core.exceptions import ConfigurationError
from cmdinclude.shell_include import ShellIncludeExtension


SHELL_INCLUDE_EXTENSION = ["cmdinclude.shell_include:ShellIncludeExtension", "fenced_code"]


def test_echo_directive_renders_code_block() -> None:
    html = markdown.markdown(
        "Intro\n\ninclude::cmd:echo[args='hi',block=true]\n\nOutro",
        extensions=SHELL_INCLUDE_EXTENSION,
    )

    assert '<pre><code class="language-bash">hi\n</code></pre>' in html
    assert "<p>Intro</p>" in html
    assert "<p>Outro</p>" in html


def test_spliced_output_is_parsed_as_markdown() -> None:
    html = markdown.markdown(
        "include::cmd:echo[args=\"'# Generated'\"]",
        extensions=SHELL_INCLUDE_EXTENSION,
    )

    assert "<h1>Generated</h1>" in html


def test_failing_command_renders_bold_error() -> None:
    html = markdown.markdown(
        "include::cmd:sh[args=\"-c 'echo boom >&2; exit 1'\"]",
        extensions=SHELL_INCLUDE_EXTENSION,
    )

    assert "<strong>boom</strong>" in html


def test_regular_include_lines_are_left_alone() -> None:
    html = markdown.markdown("include::chapter.md[]", extensions=SHELL_INCLUDE_EXTENSION)

    assert "include::chapter.md[]" in html


def test_document_path_drives_pwd(tmp_path: Path) -> None:
    page = tmp_path / "docs" / "page.md"
    page.parent.mkdir()
    page.write_text("", encoding="utf-8")
    (page.parent / "sibling.txt").write_text("", encoding="utf-8")

    md = markdown.Markdown(
        extensions=[ShellIncludeExtension(document_path=str(page)), "fenced_code"]
    )
    html = md.convert("include::cmd:ls[cwd='$PWD',block=true]")

    assert "sibling.txt" in html
    assert "page.md" in html


def test_per_conversion_overrides(tmp_path: Path) -> None:
    page = tmp_path / "page.md"
    page.write_text("", encoding="utf-8")
    (tmp_path / "here.txt").write_text("", encoding="utf-8")

    md = markdown.Markdown(extensions=[ShellIncludeExtension(), "fenced_code"])
    md.cmdinclude_document_path = str(page)  # type: ignore[attr-defined]
    md.cmdinclude_attributes = {  # type: ignore[attr-defined]
        "versioned-command": "echo",
        "page-component-version": "2.1",
    }
    html = md.convert("include::cmd:echo[args='done']\n\ninclude::cmd:ls[cwd='$PWD']")

    assert "2.1 done" in html
    assert "here.txt" in html


def test_asciidoc_block_style_is_configurable() -> None:
    html = markdown.markdown(
        "include::cmd:echo[args='hi',block=true]",
        extensions=[ShellIncludeExtension(block_style="asciidoc")],
    )

    assert "[source,bash]" in html


def test_invalid_settings_raise_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        markdown.markdown("text", extensions=[ShellIncludeExtension(block_style="latex")])
