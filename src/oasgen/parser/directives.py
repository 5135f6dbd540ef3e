"""Directive vocabulary of handler comment blocks.

A directive is a comment line whose first word is an ``@keyword``; the
keyword is matched case-insensitively and the rest of the line is kept
verbatim for the directive-specific grammar.
"""

from dataclasses import dataclass
from enum import Enum


class DirectiveKind(Enum):
    TITLE = "@title"
    DESCRIPTION = "@description"
    PARAM = "@param"
    HEADER = "@header"
    SUCCESS = "@success"
    FAILURE = "@failure"
    RESOURCE = "@resource"
    TAG = "@tag"
    ROUTE = "@route"
    ROUTER = "@router"
    OPERATION_ID = "@operationid"

    @classmethod
    def from_keyword(cls, keyword: str) -> "DirectiveKind | None":
        try:
            return cls(keyword.lower())
        except ValueError:
            return None

    @property
    def is_route(self) -> bool:
        return self in (DirectiveKind.ROUTE, DirectiveKind.ROUTER)

    @property
    def is_tag(self) -> bool:
        return self in (DirectiveKind.RESOURCE, DirectiveKind.TAG)

    @property
    def is_response(self) -> bool:
        return self in (DirectiveKind.SUCCESS, DirectiveKind.FAILURE)


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    keyword: str  # as written, e.g. "@Success"
    text: str  # remainder after the keyword, stripped


def normalize_comment(line: str) -> str:
    """Strip line-comment markers and surrounding whitespace."""
    return line.strip().lstrip("/").strip()


def parse_directive(line: str) -> Directive | None:
    """Parse one raw comment line; non-directive lines return None."""
    comment = normalize_comment(line)
    if not comment:
        return None
    keyword = comment.split()[0]
    kind = DirectiveKind.from_keyword(keyword)
    if kind is None:
        return None
    return Directive(kind=kind, keyword=keyword, text=comment[len(keyword):].strip())


def parse_directives(lines: list[str]) -> list[Directive]:
    directives = []
    for line in lines:
        directive = parse_directive(line)
        if directive is not None:
            directives.append(directive)
    return directives
