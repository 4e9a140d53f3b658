"""Configuration models for the shell include pipeline.

IncludeConfig

`versioned_command` (`str | None`)
: Name of the one command that always receives an explicit version argument.
  Usually supplied through the `versioned-command` document attribute instead.

`default_version` (`str`)
: Version inserted when the document does not define
  `page-component-version`.

`block_style` (`BlockStyle`)
: Markup used when a directive asks for `block=true`: an AsciiDoc
  `[source,<format>]` listing or a Markdown backtick fence.

`clone_root` (`Path | None`)
: Directory holding shallow clones of remote repositories. Falls back to
  `CMDINCLUDE_CLONE_DIR`, then to `cmdinclude-clones` in the system
  temporary directory.

`max_depth` (`int`)
: Maximum nesting of directives found inside spliced command output.

`inherit_env` (`bool`)
: Pass the whole host environment to commands instead of only `PATH`.

`timeout` (`float | None`)
: Seconds after which a command is abandoned. `None` waits forever.

`attributes` (`dict[str, str]`)
: Document attributes available to every processed document.

PlaybookConfig

`asciidoc.attributes` (`dict[str, str]`)
: Attributes declared in an Antora-style playbook (`site.yml`). Values
  ending in `@` are soft-set and lose the marker; `false` or `null` unset
  the attribute.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError
from .formatting import BlockStyle


VERSIONED_COMMAND_ATTRIBUTE = "versioned-command"
COMPONENT_VERSION_ATTRIBUTE = "page-component-version"
DEFAULT_VERSION = "latest"


def _normalise_attribute_values(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("attributes must be a mapping")
    cleaned: dict[str, str] = {}
    for key, raw in value.items():
        if raw is None or raw is False:
            continue
        text = "" if raw is True else str(raw)
        if text.endswith("@"):
            text = text[:-1]
        cleaned[str(key)] = text
    return cleaned


class IncludeConfig(BaseModel):
    """Settings shared by every include processed during one build."""

    model_config = ConfigDict(extra="forbid")

    versioned_command: str | None = None
    default_version: str = DEFAULT_VERSION
    block_style: BlockStyle = BlockStyle.ASCIIDOC
    clone_root: Path | None = None
    max_depth: int = Field(default=64, ge=1)
    inherit_env: bool = False
    timeout: float | None = Field(default=None, gt=0)
    attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    @classmethod
    def _clean_attributes(cls, value: Any) -> dict[str, str]:
        return _normalise_attribute_values(value)


class AsciidocSection(BaseModel):
    """The `asciidoc` key of a playbook."""

    model_config = ConfigDict(extra="ignore")

    attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    @classmethod
    def _clean_attributes(cls, value: Any) -> dict[str, str]:
        return _normalise_attribute_values(value)


class PlaybookConfig(BaseModel):
    """Subset of an Antora playbook relevant to shell includes."""

    model_config = ConfigDict(extra="ignore")

    asciidoc: AsciidocSection = Field(default_factory=AsciidocSection)

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self.asciidoc.attributes)


def load_playbook(path: Path) -> PlaybookConfig:
    """Read the document attributes declared in a playbook file."""
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read playbook '{path}'.") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Playbook '{path}' is not valid YAML.") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Playbook '{path}' must contain a mapping.")
    try:
        return PlaybookConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Playbook '{path}' is invalid: {exc}") from exc


__all__ = [
    "COMPONENT_VERSION_ATTRIBUTE",
    "DEFAULT_VERSION",
    "VERSIONED_COMMAND_ATTRIBUTE",
    "AsciidocSection",
    "IncludeConfig",
    "PlaybookConfig",
    "load_playbook",
]
