"""Parameter and response-header directives.

    @Param  id    path  int          true  "User ID"
    @Param  user  body  models.User  true  "User to create"
    @Param  avatar file file         false "Avatar image"
    @Header 200 {string} X-Request-Id "Request ID"
"""

import re

from oasgen.errors import DirectiveSyntaxError, DirectiveValueError
from oasgen.openapi.models import (
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    HeaderObject,
    MediaTypeObject,
    OperationObject,
    ParameterObject,
    RequestBodyObject,
    ResponseObject,
    SchemaObject,
)
from oasgen.parser.response import is_valid_status_code
from oasgen.parser.schema import SchemaResolver
from oasgen.source.basictypes import basic_schema_fields

_PARAM_RE = re.compile(
    r"^(?P<name>[-\w.\[\]]+)\s+"
    r"(?P<location>\w+)\s+"
    r"(?P<type_ref>[\w\-./\[\]{}*]+)\s+"
    r"(?P<required>\w+)"
    r"(?:\s+\"(?P<description>[^\"]*)\")?"
    r"(?:\s+\"(?P<example>[^\"]*)\")?"
)
_HEADER_RE = re.compile(
    r"^(?P<status>\d+)\s+"
    r"(?P<json_type>[\w{}]+)\s+"
    r"(?P<name>[\w\-]+)"
    r"(?:\s+\"(?P<description>[^\"]*)\")?"
)

PARAMETER_LOCATIONS = frozenset({"path", "query", "header", "cookie"})
FORM_LOCATIONS = frozenset({"form", "formData", "file"})


def _parse_required(value: str) -> bool:
    lowered = value.lower()
    if lowered not in ("true", "false"):
        raise DirectiveValueError(f"required must be true or false, got {value}")
    return lowered == "true"


class ParamParser:
    """Apply ``@param`` and ``@header`` directives to an operation."""

    def __init__(self, resolver: SchemaResolver):
        self.resolver = resolver

    def parse_param(self, pkg_path: str, pkg_name: str, operation: OperationObject, text: str) -> None:
        match = _PARAM_RE.match(text.strip())
        if match is None:
            raise DirectiveSyntaxError(f'Can not parse param comment "{text}"', text)

        name = match.group("name")
        location = match.group("location")
        type_ref = match.group("type_ref")
        required = _parse_required(match.group("required"))
        description = match.group("description") or ""
        example = match.group("example")

        if location == "body":
            schema = self.resolver.field_schema(pkg_path, pkg_name, type_ref)
            operation.request_body = RequestBodyObject(
                description=description,
                required=required,
                content={CONTENT_TYPE_JSON: MediaTypeObject(schema=schema)},
            )
        elif location in FORM_LOCATIONS:
            self._add_form_field(pkg_path, pkg_name, operation, name, location, type_ref, required, description)
        elif location in PARAMETER_LOCATIONS:
            schema = self.resolver.field_schema(pkg_path, pkg_name, type_ref)
            operation.parameters.append(
                ParameterObject(
                    name=name,
                    location=location,
                    description=description,
                    required=required or location == "path",
                    example=example,
                    schema=schema,
                )
            )
        else:
            raise DirectiveValueError(f"invalid param location {location} for {name}")

    def _add_form_field(
        self,
        pkg_path: str,
        pkg_name: str,
        operation: OperationObject,
        name: str,
        location: str,
        type_ref: str,
        required: bool,
        description: str,
    ) -> None:
        body = operation.request_body
        if body is None or CONTENT_TYPE_FORM not in body.content:
            body = RequestBodyObject(
                content={CONTENT_TYPE_FORM: MediaTypeObject(schema=SchemaObject(type="object", properties={}))}
            )
            operation.request_body = body
        form = body.content[CONTENT_TYPE_FORM].schema_

        if location == "file" or type_ref == "file":
            schema = SchemaObject(**basic_schema_fields("file"))
        else:
            schema = self.resolver.field_schema(pkg_path, pkg_name, type_ref)
        if description:
            schema.description = description
        form.properties[name] = schema
        if required:
            body.required = True
            form.required = (form.required or []) + [name]

    def parse_header(self, operation: OperationObject, text: str) -> None:
        match = _HEADER_RE.match(text.strip())
        if match is None:
            raise DirectiveSyntaxError(f'Can not parse header comment "{text}"', text)

        status = match.group("status")
        if not is_valid_status_code(int(status)):
            raise DirectiveValueError(f"Invalid http status code {status}")

        response = operation.responses.setdefault(status, ResponseObject())
        if response.headers is None:
            response.headers = {}
        response.headers[match.group("name")] = HeaderObject(
            description=match.group("description") or "",
            schema=SchemaObject(type=match.group("json_type").strip("{}")),
        )
