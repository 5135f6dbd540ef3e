"""Mutable state shared by every component during one generator run."""

from oasgen.config import GeneratorConfig
from oasgen.openapi.models import InfoObject, OpenAPIObject, SchemaObject


class DocumentStore:
    """Document, schema registry and operation-ID set for one run.

    ``known_schemas`` is keyed by qualified schema ID and holds each resolved
    type exactly once. ``openapi.components.schemas`` publishes the same
    objects, possibly under an additional short alias.
    """

    def __init__(self, openapi: OpenAPIObject | None = None):
        self.openapi = openapi or OpenAPIObject()
        self.known_schemas: dict[str, SchemaObject] = {}
        self.operation_ids: set[str] = set()

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "DocumentStore":
        info = InfoObject(title=config.title, version=config.version, description=config.description)
        return cls(OpenAPIObject(info=info))

    @property
    def schemas(self) -> dict[str, SchemaObject]:
        return self.openapi.components.schemas

    def publish_schema(self, schema_id: str, schema: SchemaObject, short_name: str) -> None:
        """Expose a registered schema under its ID and, if free, its short name."""
        key = schema_id.replace("\\", "/")
        if key not in self.schemas:
            self.schemas[key] = schema
        alias = short_name.replace("\\", "/")
        if alias != key and alias not in self.schemas:
            self.schemas[alias] = schema
