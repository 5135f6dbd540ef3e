"""Route directive grammar: ``<path> [<method>]``."""

import re
from dataclasses import dataclass

from oasgen.errors import DirectiveSyntaxError

_ROUTE_RE = re.compile(r"([\w./\-{}]+)[^\[]+\[([^\]]+)")


@dataclass(frozen=True)
class RouteBinding:
    path: str
    method: str  # upper-cased, not yet validated against the HTTP verbs


def parse_route(text: str) -> RouteBinding:
    """Parse the remainder of an ``@router`` directive."""
    match = _ROUTE_RE.search(text)
    if match is None:
        raise DirectiveSyntaxError(f'Can not parse router comment "{text}"', text)
    return RouteBinding(path=match.group(1), method=match.group(2).strip().upper())
