"""Directive parsing: ``"required, min=3, contains=a=b"`` into rule directives."""
from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = ","
ASSIGNMENT = "="


@dataclass(frozen=True, slots=True)
class RuleDirective:
    """One ``name[=parameter]`` instruction."""
    name: str
    parameter: str = ""
    source: str = ""

    @property
    def is_required(self) -> bool: return self.name == "required"

    def __str__(self) -> str: return self.source or (f"{self.name}={self.parameter}" if self.parameter else self.name)


def parse_directives(raw: str) -> tuple[RuleDirective, ...]:
    """Split a directive string into ordered directives.

    Segments are separated by commas and trimmed. Each segment splits on its
    first ``=``; any later ``=`` belongs to the parameter verbatim. An empty
    segment produces a directive with an empty name, which no kind resolves.
    """
    directives = []
    for segment in raw.split(SEPARATOR):
        text = segment.strip()
        name, _, parameter = text.partition(ASSIGNMENT)
        directives.append(RuleDirective(name=name.strip(), parameter=parameter, source=text))
    return tuple(directives)
