"""Schema type resolver.

Turns Go type expressions into OpenAPI schema objects. Custom types are
walked once, stored in the run's schema registry under their qualified ID
and referenced by ``$ref`` everywhere else.
"""

import logging
import re

from oasgen.config import GeneratorConfig
from oasgen.errors import TypeResolutionError
from oasgen.openapi.models import SchemaObject
from oasgen.source.basictypes import basic_schema_fields, is_basic_type, is_interface_type, schema_id
from oasgen.source.gotree import FieldDecl, GoPackage, TypeDecl
from oasgen.store import DocumentStore

logger = logging.getLogger(__name__)

_ARRAY_RE = re.compile(r"^\[(\w*)\](.+)$")
_MAP_RE = re.compile(r"^map\[([^\]]*)\](.+)$")
_UNSUPPORTED_PREFIXES = ("func", "chan", "<-chan")


def _json_name(field: FieldDecl) -> str | None:
    tag = field.tag_value("json")
    if tag is None:
        return None
    return tag.split(",")[0]


def _is_required(field: FieldDecl) -> bool:
    for key in ("binding", "validate"):
        value = field.tag_value(key)
        if value and "required" in value.split(","):
            return True
    return False


class SchemaResolver:
    """Resolve type references against a source-tree provider.

    The provider must offer ``load_package(path)``, ``resolve_import(path)``
    and ``find_packages_by_name(name)``.
    """

    def __init__(self, store: DocumentStore, provider, config: GeneratorConfig | None = None):
        self.store = store
        self.provider = provider
        self.config = config or GeneratorConfig()
        self._in_progress: set[str] = set()

    def parse_schema_object(self, pkg_path: str, pkg_name: str, type_ref: str) -> SchemaObject:
        """Return the full schema for a type; custom types return their registered object."""
        return self._resolve(pkg_path, pkg_name, type_ref, as_ref=False)

    def field_schema(self, pkg_path: str, pkg_name: str, type_ref: str) -> SchemaObject:
        """Return a schema suitable for embedding: custom types become ``$ref`` links."""
        return self._resolve(pkg_path, pkg_name, type_ref, as_ref=True)

    def register_type(self, pkg_path: str, pkg_name: str, type_name: str) -> str:
        """Make sure a type is registered and return its schema ID.

        Basic and interface types are not registered; their name is returned
        unchanged.
        """
        name = type_name.strip().lstrip("*")
        if is_basic_type(name) or is_interface_type(name):
            return name

        package, decl = self._locate(pkg_path, pkg_name, name)
        sid = schema_id(package.name or pkg_name, decl.name, self.config.schema_without_pkg)

        known = self.store.known_schemas.get(sid)
        if known is not None:
            self.store.publish_schema(sid, known, decl.name)
            return sid
        if sid in self._in_progress:
            return sid

        self._in_progress.add(sid)
        try:
            schema = self._walk(package, decl)
        finally:
            self._in_progress.discard(sid)

        schema.id = sid
        schema.pkg_name = package.name
        self.store.known_schemas[sid] = schema
        self.store.publish_schema(sid, schema, decl.name)
        logger.debug("Registered schema %s", sid)
        return sid

    def _resolve(self, pkg_path: str, pkg_name: str, type_ref: str, as_ref: bool) -> SchemaObject:
        name = type_ref.strip().lstrip("*")
        if not name:
            raise TypeResolutionError("empty type reference", type_ref)

        if is_basic_type(name):
            return SchemaObject(**basic_schema_fields(name))
        if is_interface_type(name) or name.startswith(("interface{", "struct{")):
            return SchemaObject(type="object")

        match = _ARRAY_RE.match(name)
        if match:
            items = self._resolve(pkg_path, pkg_name, match.group(2), as_ref=True)
            return SchemaObject(type="array", items=items)

        match = _MAP_RE.match(name)
        if match:
            values = self._resolve(pkg_path, pkg_name, match.group(2), as_ref=True)
            return SchemaObject(type="object", additional_properties=values)

        if name.startswith(_UNSUPPORTED_PREFIXES):
            raise TypeResolutionError(f"type {name} can not be documented", type_ref)

        sid = self.register_type(pkg_path, pkg_name, name)
        if as_ref:
            return SchemaObject.reference(sid)
        schema = self.store.known_schemas.get(sid)
        if schema is None:
            # Still being walked further up the stack.
            return SchemaObject.reference(sid)
        return schema

    def _locate(self, pkg_path: str, pkg_name: str, name: str) -> tuple[GoPackage, TypeDecl]:
        package = self.provider.load_package(pkg_path)

        if "." not in name:
            decl = package.types.get(name)
            if decl is None:
                raise TypeResolutionError(f"type {name} not found in package {pkg_name} ({pkg_path})", name)
            return package, decl

        alias, short = name.rsplit(".", 1)
        if alias == (package.name or pkg_name):
            candidates = [pkg_path]
        else:
            candidates = []
            import_path = package.imports.get(alias)
            if import_path:
                directory = self.provider.resolve_import(import_path)
                if directory:
                    candidates.append(directory)
            if not candidates:
                candidates = self.provider.find_packages_by_name(alias)

        for directory in candidates:
            target = self.provider.load_package(directory)
            decl = target.types.get(short)
            if decl is not None:
                return target, decl

        raise TypeResolutionError(f"can not find type {name} referenced from package {pkg_name}", name)

    def _walk(self, package: GoPackage, decl: TypeDecl) -> SchemaObject:
        if decl.kind == "struct":
            properties, required = self._walk_fields(package, decl.fields)
            return SchemaObject(type="object", properties=properties, required=required or None)
        if decl.kind == "interface":
            return SchemaObject(type="object")
        return self._resolve(package.path, package.name, decl.underlying, as_ref=True)

    def _walk_fields(self, package: GoPackage, fields: list[FieldDecl]) -> tuple[dict[str, SchemaObject], list[str]]:
        properties: dict[str, SchemaObject] = {}
        required: list[str] = []

        for field in fields:
            if field.type.lstrip("*").startswith(_UNSUPPORTED_PREFIXES):
                continue
            json_name = _json_name(field)
            if json_name == "-":
                continue

            if field.embedded and not json_name:
                self._merge_embedded(package, field, properties, required)
                continue

            if field.embedded:
                names = [json_name]
            else:
                names = [json_name or n for n in field.names if n[:1].isupper()]
            for prop_name in names:
                properties[prop_name] = self._field_property(package, field)
                if _is_required(field) and prop_name not in required:
                    required.append(prop_name)

        return properties, required

    def _field_property(self, package: GoPackage, field: FieldDecl) -> SchemaObject:
        if field.fields is not None:
            properties, required = self._walk_fields(package, field.fields)
            schema = SchemaObject(type="object", properties=properties, required=required or None)
        else:
            schema = self.field_schema(package.path, package.name, field.type)
        description = field.tag_value("description")
        if description:
            schema.description = description
        example = field.tag_value("example")
        if example:
            schema.example = example
        return schema

    def _merge_embedded(
        self, package: GoPackage, field: FieldDecl, properties: dict[str, SchemaObject], required: list[str]
    ) -> None:
        sid = self.register_type(package.path, package.name, field.type)
        embedded = self.store.known_schemas.get(sid)
        if embedded is None or not embedded.properties:
            return
        for name, schema in embedded.properties.items():
            properties.setdefault(name, schema)
        for name in embedded.required or []:
            if name not in required:
                required.append(name)
