"""OpenAPI 3 object model.

Only the subset of objects the generator emits is modelled. Every model
serializes with ``model_dump(by_alias=True, exclude_none=True)`` so that
unset fields do not show up in the written document.
"""

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.0.0"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_FORM = "multipart/form-data"

SCHEMA_REF_PREFIX = "#/components/schemas/"

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE")


def ref_link(schema_id: str) -> str:
    """Build the ``$ref`` link for a registered schema ID."""
    return SCHEMA_REF_PREFIX + schema_id.replace("\\", "/")


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SchemaObject(_Model):
    """The resolved shape of a type, or a ``$ref`` to one."""

    # Registry identity and owning package, never serialized.
    id: str = Field(default="", exclude=True)
    pkg_name: str = Field(default="", exclude=True)

    ref: str | None = Field(default=None, alias="$ref")
    type: str | None = None
    format: str | None = None
    description: str | None = None
    example: str | None = None
    items: "SchemaObject | None" = None
    properties: "dict[str, SchemaObject] | None" = None
    additional_properties: "SchemaObject | None" = Field(default=None, alias="additionalProperties")
    required: list[str] | None = None

    @classmethod
    def reference(cls, schema_id: str) -> "SchemaObject":
        return cls(ref=ref_link(schema_id))


class MediaTypeObject(_Model):
    schema_: SchemaObject = Field(alias="schema")


class HeaderObject(_Model):
    description: str = ""
    schema_: SchemaObject = Field(alias="schema")


class ResponseObject(_Model):
    description: str = ""
    headers: dict[str, HeaderObject] | None = None
    content: dict[str, MediaTypeObject] = {}


class ParameterObject(_Model):
    name: str
    location: str = Field(alias="in")  # query / path / header / cookie
    description: str = ""
    required: bool = False
    example: str | None = None
    schema_: SchemaObject = Field(alias="schema")


class RequestBodyObject(_Model):
    description: str = ""
    required: bool = False
    content: dict[str, MediaTypeObject] = {}


class OperationObject(_Model):
    """A single documented API operation."""

    tags: list[str] = []
    summary: str = ""
    description: str = ""
    operation_id: str | None = Field(default=None, alias="operationId")
    parameters: list[ParameterObject] = []
    request_body: RequestBodyObject | None = Field(default=None, alias="requestBody")
    responses: dict[str, ResponseObject] = {}

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)


class PathItemObject(_Model):
    """All operations bound to one path, one slot per HTTP verb."""

    ref: str | None = Field(default=None, alias="$ref")
    summary: str | None = None
    description: str | None = None
    get: OperationObject | None = None
    post: OperationObject | None = None
    put: OperationObject | None = None
    patch: OperationObject | None = None
    delete: OperationObject | None = None
    options: OperationObject | None = None
    head: OperationObject | None = None
    trace: OperationObject | None = None

    def get_operation(self, method: str) -> OperationObject | None:
        return getattr(self, method.lower())

    def set_operation(self, method: str, operation: OperationObject | None) -> None:
        if method.upper() not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        setattr(self, method.lower(), operation)

    def operations(self) -> dict[str, OperationObject]:
        """Return the populated slots keyed by upper-case method."""
        result = {}
        for method in HTTP_METHODS:
            operation = self.get_operation(method)
            if operation is not None:
                result[method] = operation
        return result


class InfoObject(_Model):
    title: str = "API"
    version: str = "1.0.0"
    description: str | None = None


class ComponentsObject(_Model):
    schemas: dict[str, SchemaObject] = {}


class OpenAPIObject(_Model):
    openapi: str = OPENAPI_VERSION
    info: InfoObject = Field(default_factory=InfoObject)
    paths: dict[str, PathItemObject] = {}
    components: ComponentsObject = Field(default_factory=ComponentsObject)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
