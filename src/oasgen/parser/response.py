"""Response directive grammar and interpretation.

    @Success 200 {object} models.User "User Model"
    @Success 200 {object} yhttp.DataRes{data=models.User,total=int} "Page"
    @Success 200 {array} models.User "Users"
    @Success 200 {string} string "plain text"
    @Failure 404 "Not found"
"""

import logging
import re
from dataclasses import dataclass
from http import HTTPStatus

from oasgen.errors import DirectiveSyntaxError, DirectiveValueError, TypeResolutionError
from oasgen.openapi.models import (
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_TEXT,
    MediaTypeObject,
    ResponseObject,
    SchemaObject,
)
from oasgen.parser.schema import SchemaResolver
from oasgen.source.basictypes import basic_schema_fields, is_basic_type, is_interface_type

logger = logging.getLogger(__name__)

_RESPONSE_RE = re.compile(
    r"^(?P<status>\d+)"
    r"(?:\s+(?P<json_type>[\w{}]+))?"
    r"(?:\s+(?P<type_ref>[\w\-./\[\]*]+(?:\{[^}\"]*\})?))?"
    r"[^\"]*"
    r"(?P<description>\".*)?$"
)
_OVERRIDES_RE = re.compile(r"\{([^}]+)\}")
_ARRAY_SIZE_RE = re.compile(r"\[\w*\]")

COMPLEX_TYPES = frozenset({"object", "array", "{object}", "{array}"})
SIMPLE_TYPES = frozenset({"string", "integer", "boolean", "{string}", "{integer}", "{boolean}"})

_VALID_STATUS_CODES = frozenset(s.value for s in HTTPStatus)


@dataclass(frozen=True)
class ResponseLine:
    status: str
    json_type: str
    type_ref: str
    description: str


def is_valid_status_code(code: int) -> bool:
    return code in _VALID_STATUS_CODES


def parse_response_line(text: str) -> ResponseLine:
    """Split a response directive into its fields and validate the status."""
    match = _RESPONSE_RE.match(text.strip())
    if match is None:
        raise DirectiveSyntaxError(f'Can not parse response comment "{text}"', text)

    status = match.group("status")
    if not is_valid_status_code(int(status)):
        raise DirectiveValueError(f"Invalid http status code {status}")

    return ResponseLine(
        status=status,
        json_type=match.group("json_type") or "",
        type_ref=match.group("type_ref") or "",
        description=(match.group("description") or "").strip().strip('"'),
    )


def split_overrides(type_ref: str) -> tuple[str, dict[str, str]]:
    """Split ``Outer{field=Type, ...}`` into the container and its field overrides.

    Field specs without ``=`` are skipped.
    """
    match = _OVERRIDES_RE.search(type_ref)
    if match is None:
        return type_ref, {}

    container = type_ref.replace(match.group(0), "", 1).strip()
    overrides = {}
    for spec in match.group(1).split(","):
        name, sep, field_type = spec.strip().partition("=")
        if not sep:
            continue
        overrides[name.strip()] = field_type.strip()
    return container, overrides


class ResponseBuilder:
    """Build ResponseObjects from ``@success`` / ``@failure`` directives."""

    def __init__(self, resolver: SchemaResolver):
        self.resolver = resolver

    def build(self, pkg_path: str, pkg_name: str, text: str) -> tuple[str, ResponseObject]:
        line = parse_response_line(text)
        response = ResponseObject(description=line.description)

        if line.json_type in COMPLEX_TYPES:
            if not line.type_ref:
                raise DirectiveSyntaxError(f'Missing type in response comment "{text}"', text)
            self._complex_response(pkg_path, pkg_name, line.type_ref, response)
        elif line.json_type in SIMPLE_TYPES:
            self._simple_response(line.json_type, response)
        elif line.json_type:
            raise DirectiveValueError(f"invalid jsonType {line.json_type}")

        return line.status, response

    def _complex_response(self, pkg_path: str, pkg_name: str, type_ref: str, response: ResponseObject) -> None:
        container, overrides = split_overrides(type_ref)
        if overrides:
            response.content[CONTENT_TYPE_JSON] = MediaTypeObject(
                schema=self._specialize(pkg_path, pkg_name, container, overrides)
            )
            return

        type_name = _ARRAY_SIZE_RE.sub("[]", container)
        if type_name.startswith("map[]"):
            try:
                schema = self.resolver.parse_schema_object(pkg_path, pkg_name, type_name)
            except TypeResolutionError as e:
                logger.warning("Can not resolve response type %s: %s", type_name, e)
                schema = SchemaObject(type="object")
            response.content[CONTENT_TYPE_JSON] = MediaTypeObject(schema=schema)
            return

        if type_name.startswith("[]"):
            element = self.resolver.register_type(pkg_path, pkg_name, type_name.replace("[]", ""))
            if is_basic_type(element):
                # Basic element types are documented as strings.
                items = SchemaObject(type="string")
            elif is_interface_type(element):
                items = SchemaObject(type="object")
            else:
                items = SchemaObject.reference(element)
            response.content[CONTENT_TYPE_JSON] = MediaTypeObject(schema=SchemaObject(type="array", items=items))
            return

        registered = self.resolver.register_type(pkg_path, pkg_name, type_name)
        if is_basic_type(registered):
            response.content[CONTENT_TYPE_TEXT] = MediaTypeObject(schema=SchemaObject(**basic_schema_fields(registered)))
        elif is_interface_type(registered):
            response.content[CONTENT_TYPE_JSON] = MediaTypeObject(schema=SchemaObject(type="object"))
        else:
            response.content[CONTENT_TYPE_JSON] = MediaTypeObject(schema=SchemaObject.reference(registered))

    def _specialize(self, pkg_path: str, pkg_name: str, container: str, overrides: dict[str, str]) -> SchemaObject:
        """Copy the container's schema and replace the overridden fields.

        The registered container schema itself is left untouched.
        """
        base = self.resolver.parse_schema_object(pkg_path, pkg_name, container)
        schema = base.model_copy(update={"properties": dict(base.properties or {})})
        if schema.type is None and schema.ref is None:
            schema.type = "object"
        for field_name, field_type in overrides.items():
            schema.properties[field_name] = self.resolver.field_schema(pkg_path, pkg_name, field_type)
        return schema

    @staticmethod
    def _simple_response(json_type: str, response: ResponseObject) -> None:
        oas_type = json_type.strip("{}")
        response.content[CONTENT_TYPE_TEXT] = MediaTypeObject(schema=SchemaObject(type=oas_type))
