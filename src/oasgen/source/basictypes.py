"""Classification of Go type names into basic, interface and custom types."""

# Go type name -> (OpenAPI type, OpenAPI format)
BASIC_TYPES: dict[str, tuple[str, str | None]] = {
    "bool": ("boolean", None),
    "string": ("string", None),
    "byte": ("integer", "int32"),
    "rune": ("integer", "int32"),
    "int": ("integer", None),
    "int8": ("integer", "int32"),
    "int16": ("integer", "int32"),
    "int32": ("integer", "int32"),
    "int64": ("integer", "int64"),
    "uint": ("integer", None),
    "uint8": ("integer", "int32"),
    "uint16": ("integer", "int32"),
    "uint32": ("integer", "int32"),
    "uint64": ("integer", "int64"),
    "uintptr": ("integer", "int64"),
    "float32": ("number", "float"),
    "float64": ("number", "double"),
    "complex64": ("number", None),
    "complex128": ("number", None),
    "error": ("string", None),
    "time.Time": ("string", "date-time"),
    "time.Duration": ("integer", "int64"),
    "json.Number": ("number", None),
    "file": ("string", "binary"),
}

INTERFACE_TYPES = frozenset({"interface{}", "any", "json.RawMessage"})


def is_basic_type(name: str) -> bool:
    return name in BASIC_TYPES


def is_interface_type(name: str) -> bool:
    return name in INTERFACE_TYPES


def basic_schema_fields(name: str) -> dict:
    """Return ``type``/``format`` keyword arguments for a basic Go type."""
    oas_type, oas_format = BASIC_TYPES[name]
    fields = {"type": oas_type}
    if oas_format:
        fields["format"] = oas_format
    return fields


def schema_id(pkg_name: str, type_name: str, without_pkg: bool) -> str:
    """Registry ID of a custom type: ``pkg.Type`` unless short names are configured."""
    if without_pkg or not pkg_name:
        return type_name
    return f"{pkg_name}.{type_name}"
