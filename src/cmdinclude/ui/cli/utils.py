"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from cmdinclude.core.formatting import BlockStyle


ASCIIDOC_SUFFIXES = {".adoc", ".asciidoc", ".asc"}


def parse_attribute_option(values: Iterable[str] | None) -> dict[str, str]:
    """Parse CLI attribute overrides declared as 'name=value' pairs."""
    attributes: dict[str, str] = {}
    if not values:
        return attributes

    for raw in values:
        entry = raw.strip()
        if not entry:
            continue
        name, _, value = entry.partition("=")
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid attribute '{raw}', expected format 'name=value'.")
        attributes[name] = value.strip()

    return attributes


def infer_block_style(path: Path, requested: str | None = None) -> BlockStyle:
    """Pick the block markup from an explicit choice or the input suffix."""
    if requested:
        try:
            return BlockStyle(requested.strip().lower())
        except ValueError as exc:
            choices = ", ".join(style.value for style in BlockStyle)
            raise ValueError(f"Unknown style '{requested}', expected one of: {choices}.") from exc
    if path.suffix.lower() in ASCIIDOC_SUFFIXES:
        return BlockStyle.ASCIIDOC
    return BlockStyle.MARKDOWN


__all__ = ["ASCIIDOC_SUFFIXES", "infer_block_style", "parse_attribute_option"]
