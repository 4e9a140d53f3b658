"""Recognise ``include::cmd:<command>[...]`` directives and their attributes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import re
from types import MappingProxyType

from .exceptions import DirectiveSyntaxError


COMMAND_PREFIX = "cmd:"
DEFAULT_FORMAT = "bash"
_TRUE_VALUES = {"1", "true", "on", "yes"}
_FALSE_VALUES = {"0", "false", "off", "no", ""}

_DIRECTIVE_RE = re.compile(
    r"^(?P<escape>\\)?include::(?P<target>[^\[\s][^\[]*)\[(?P<attrs>.*)\]\s*$"
)
_ATTRIBUTE_RE = re.compile(
    r"""
    \s*(?P<name>[A-Za-z_][\w-]*)\s*
    (?:=\s*(?:
        '(?P<single>(?:[^'\\]|\\.)*)'
      | "(?P<double>(?:[^"\\]|\\.)*)"
      | (?P<bare>[^,'"\s][^,]*|)
    ))?
    \s*(?:,|$)
    """,
    re.VERBOSE,
)

AttributeValue = str | bool


def handles(target: str) -> bool:
    """Return True when an include target asks for a shell command."""
    return target.startswith(COMMAND_PREFIX)


def _unescape(value: str, quote: str) -> str:
    return value.replace(f"\\{quote}", quote)


def parse_attributes(text: str) -> dict[str, AttributeValue]:
    """Parse an AsciiDoc attribute list such as ``args='-al',block=true``."""
    attributes: dict[str, AttributeValue] = {}
    position = 0
    length = len(text)
    while position < length:
        if not text[position:].strip():
            break
        match = _ATTRIBUTE_RE.match(text, position)
        if match is None or match.end() == position:
            raise DirectiveSyntaxError(
                f"Malformed include attribute list near '{text[position:]}'."
            )
        name = match.group("name")
        if match.group("single") is not None:
            value: AttributeValue = _unescape(match.group("single"), "'")
        elif match.group("double") is not None:
            value = _unescape(match.group("double"), '"')
        elif match.group("bare") is not None:
            value = match.group("bare").strip()
        else:
            value = True
        attributes[name] = value
        position = match.end()
    return attributes


def coerce_flag(value: AttributeValue | None) -> bool:
    """Interpret an attribute value as a boolean switch."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return True


@dataclass(frozen=True, slots=True)
class Directive:
    """A parsed shell include directive."""

    target: str
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def command(self) -> str:
        return self.target[len(COMMAND_PREFIX) :] if handles(self.target) else self.target

    def _text(self, name: str) -> str | None:
        value = self.attributes.get(name)
        if value is None or isinstance(value, bool):
            return None
        return value

    @property
    def args(self) -> str:
        """Command arguments; ``args`` takes precedence over deprecated ``flags``."""
        value = self._text("args")
        if value is None:
            value = self._text("flags")
        return value or ""

    @property
    def uses_deprecated_flags(self) -> bool:
        return "flags" in self.attributes

    @property
    def has_conflicting_args(self) -> bool:
        return "args" in self.attributes and "flags" in self.attributes

    @property
    def format(self) -> str:
        return self._text("format") or DEFAULT_FORMAT

    @property
    def block(self) -> bool:
        return coerce_flag(self.attributes.get("block"))

    @property
    def print(self) -> bool:
        return coerce_flag(self.attributes.get("print"))

    @property
    def cwd(self) -> str | None:
        return self._text("cwd") or None


@dataclass(frozen=True, slots=True)
class DirectiveMatch:
    """Outcome of scanning a single source line."""

    directive: Directive
    line: str
    escaped: bool = False

    @property
    def literal(self) -> str:
        """The line as it should appear when the directive is escaped."""
        return self.line[1:] if self.escaped else self.line


def match_directive(line: str) -> DirectiveMatch | None:
    """Return the shell include on ``line``, or ``None`` when it is not one."""
    match = _DIRECTIVE_RE.match(line)
    if match is None:
        return None
    target = match.group("target").strip()
    if not handles(target):
        return None
    escaped = match.group("escape") is not None
    if escaped:
        attributes: dict[str, AttributeValue] = {}
    else:
        attributes = parse_attributes(match.group("attrs"))
    return DirectiveMatch(
        directive=Directive(target=target, attributes=attributes),
        line=line,
        escaped=escaped,
    )


__all__ = [
    "COMMAND_PREFIX",
    "DEFAULT_FORMAT",
    "AttributeValue",
    "Directive",
    "DirectiveMatch",
    "coerce_flag",
    "handles",
    "match_directive",
    "parse_attributes",
]
