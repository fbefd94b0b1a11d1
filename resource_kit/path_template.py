"""Path templates with `:name` placeholders.

A template like `/users/:user_id/posts/:id` is split into literal text and
placeholder segments by a small hand-written scanner. A placeholder is a colon
followed by a letter or underscore, then any run of letters, digits, and
underscores. Any other colon is literal text, so `/hosts/:8080` keeps its
colon.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple
from urllib.parse import quote


class MissingPathParameter(KeyError):
    """Raised when a path placeholder has no value in the parameter bag."""

    def __init__(self, name: str, template: str) -> None:
        self.name = name
        self.template = template
        super().__init__(name)

    def __str__(self) -> str:
        return f"Missing value for path parameter ':{self.name}' in '{self.template}'"


class Segment(NamedTuple):
    """One piece of a tokenized template."""

    text: str
    is_placeholder: bool


def _is_name_start(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalpha())


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def tokenize(template: str) -> list[Segment]:
    """Split a template into literal and placeholder segments.

    Adjacent literal text is merged, so a template without placeholders yields
    a single literal segment (or none for the empty string).
    """
    segments: list[Segment] = []
    literal: list[str] = []
    i = 0
    length = len(template)

    while i < length:
        char = template[i]
        if char == ":" and i + 1 < length and _is_name_start(template[i + 1]):
            end = i + 2
            while end < length and _is_name_char(template[end]):
                end += 1
            if literal:
                segments.append(Segment("".join(literal), False))
                literal = []
            segments.append(Segment(template[i + 1:end], True))
            i = end
        else:
            literal.append(char)
            i += 1

    if literal:
        segments.append(Segment("".join(literal), False))
    return segments


class PathTemplate:
    """A parsed path template that can be rendered against a parameter bag.

    Usage:
        template = PathTemplate("/users/:id")
        template.render({"id": 12})  # "/users/12"
    """

    def __init__(self, template: str) -> None:
        self._template = template
        self._segments = tokenize(template)

    @property
    def template(self) -> str:
        return self._template

    @property
    def segments(self) -> list[Segment]:
        return list(self._segments)

    @property
    def placeholders(self) -> list[str]:
        """Placeholder names in the order they appear."""
        return [segment.text for segment in self._segments if segment.is_placeholder]

    def render(self, params: Mapping[str, Any]) -> str:
        """Substitute every placeholder with its value from `params`.

        Values are converted with str() and percent-encoded as a single path
        segment, so a value containing '/' or '?' cannot change the path shape.
        `params` is only read.

        Raises:
            MissingPathParameter: If a placeholder has no entry in `params`.
        """
        parts: list[str] = []
        for segment in self._segments:
            if not segment.is_placeholder:
                parts.append(segment.text)
                continue
            if segment.text not in params:
                raise MissingPathParameter(segment.text, self._template)
            parts.append(quote(str(params[segment.text]), safe=""))
        return "".join(parts)

    def __repr__(self) -> str:
        return f"PathTemplate({self._template!r})"
