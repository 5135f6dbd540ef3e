"""Go source-tree provider.

Parses Go packages with tree-sitter into the small declaration model the
resolver and the directive parser need: imports, type declarations with
their struct fields, and the comment block attached to each function.
Parsed packages are cached per directory.
"""

import logging
import re
from pathlib import Path

from pydantic import BaseModel
from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from oasgen.errors import SourceReadError

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r"^module\s+(\S+)", re.MULTILINE)
_TAG_RE = re.compile(r'(\w+):"((?:[^"\\]|\\.)*)"')
_MAJOR_VERSION_RE = re.compile(r"^v\d+$")

_SKIPPED_DIRS = {"vendor", "testdata", "node_modules"}


class FieldDecl(BaseModel):
    """One struct field declaration; ``names`` is empty for embedded fields."""

    names: list[str] = []
    type: str
    tag: str = ""
    fields: "list[FieldDecl] | None" = None  # set for inline anonymous structs

    @property
    def embedded(self) -> bool:
        return not self.names

    def tag_value(self, key: str) -> str | None:
        """Look up one key of the struct tag, like reflect.StructTag.Get."""
        for k, v in _TAG_RE.findall(self.tag):
            if k == key:
                return v
        return None


class TypeDecl(BaseModel):
    name: str
    kind: str  # struct / interface / named
    fields: list[FieldDecl] = []
    underlying: str = ""


class FuncDecl(BaseModel):
    name: str
    comments: list[str] = []
    file: str = ""


class GoFile(BaseModel):
    package: str = ""
    imports: dict[str, str] = {}
    types: dict[str, TypeDecl] = {}
    functions: list[FuncDecl] = []


class GoPackage(BaseModel):
    path: str
    name: str = ""
    imports: dict[str, str] = {}  # alias -> import path, merged over files
    types: dict[str, TypeDecl] = {}
    functions: list[FuncDecl] = []


def import_alias(import_path: str) -> str:
    """Default package name for an import path: its last non-version element."""
    parts = [p for p in import_path.split("/") if p]
    if len(parts) > 1 and _MAJOR_VERSION_RE.match(parts[-1]):
        return parts[-2]
    return parts[-1] if parts else import_path


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _type_text(node: Node | None) -> str:
    return "".join(_text(node).split())


def _string_value(node: Node | None) -> str:
    value = _text(node)
    if len(value) >= 2 and value[0] in "`\"" and value[-1] == value[0]:
        return value[1:-1]
    return value


def comment_lines(text: str) -> list[str]:
    """Split a comment node into lines, dropping block-comment markers."""
    if text.startswith("/*"):
        body = text[2:]
        if body.endswith("*/"):
            body = body[:-2]
        return [line.strip().lstrip("*").strip() for line in body.splitlines()]
    return [text]


def _parse_fields(struct_node: Node) -> list[FieldDecl]:
    fields: list[FieldDecl] = []
    for child in struct_node.named_children:
        if child.type != "field_declaration_list":
            continue
        for decl in child.named_children:
            if decl.type != "field_declaration":
                continue
            type_node = decl.child_by_field_name("type")
            if type_node is None:
                continue
            names = [_text(n) for n in decl.children_by_field_name("name")]
            field = FieldDecl(
                names=names,
                type=_type_text(type_node),
                tag=_string_value(decl.child_by_field_name("tag")),
            )
            if type_node.type == "struct_type":
                field.fields = _parse_fields(type_node)
            fields.append(field)
    return fields


def _parse_type_spec(spec: Node) -> TypeDecl | None:
    name = _text(spec.child_by_field_name("name"))
    type_node = spec.child_by_field_name("type")
    if not name or type_node is None:
        return None
    if type_node.type == "struct_type":
        return TypeDecl(name=name, kind="struct", fields=_parse_fields(type_node))
    if type_node.type == "interface_type":
        return TypeDecl(name=name, kind="interface")
    return TypeDecl(name=name, kind="named", underlying=_type_text(type_node))


def _parse_imports(node: Node, imports: dict[str, str]) -> None:
    for child in node.named_children:
        if child.type == "import_spec_list":
            _parse_imports(child, imports)
        elif child.type == "import_spec":
            path = _string_value(child.child_by_field_name("path"))
            alias = _text(child.child_by_field_name("name")) or import_alias(path)
            if alias in ("_", "."):
                continue
            imports[alias] = path


def parse_go_source(source: bytes, file_name: str = "") -> GoFile:
    """Parse one Go source file."""
    tree = get_parser("go").parse(source)
    result = GoFile()

    pending: list[Node] = []
    for node in tree.root_node.named_children:
        if node.type == "comment":
            if pending and pending[-1].end_point[0] + 1 < node.start_point[0]:
                pending = []
            pending.append(node)
            continue

        attached = pending if pending and pending[-1].end_point[0] + 1 == node.start_point[0] else []
        pending = []

        if node.type == "package_clause":
            for child in node.named_children:
                if child.type == "package_identifier":
                    result.package = _text(child)
        elif node.type == "import_declaration":
            _parse_imports(node, result.imports)
        elif node.type == "type_declaration":
            for spec in node.named_children:
                if spec.type in ("type_spec", "type_alias"):
                    decl = _parse_type_spec(spec)
                    if decl is not None:
                        result.types[decl.name] = decl
        elif node.type in ("function_declaration", "method_declaration"):
            comments = [line for c in attached for line in comment_lines(_text(c))]
            result.functions.append(
                FuncDecl(name=_text(node.child_by_field_name("name")), comments=comments, file=file_name)
            )

    return result


def _is_source_file(path: Path) -> bool:
    name = path.name
    return path.is_file() and not name.startswith(".") and name.endswith(".go") and not name.endswith("_test.go")


class GoSourceTree:
    """Source-tree provider backed by a Go module on disk."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.module_path = self._read_module_path()
        self._cache: dict[str, GoPackage] = {}
        self._package_dirs: list[str] | None = None

    def _read_module_path(self) -> str:
        go_mod = self.root / "go.mod"
        if not go_mod.exists():
            return ""
        try:
            text = go_mod.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceReadError(f"Can not read {go_mod}: {e}") from e
        match = _MODULE_RE.search(text)
        return match.group(1) if match else ""

    def load_package(self, pkg_path: str) -> GoPackage:
        """Parse every source file of the package directory, cached per path."""
        if pkg_path in self._cache:
            return self._cache[pkg_path]

        directory = Path(pkg_path)
        try:
            files = sorted(p for p in directory.iterdir() if _is_source_file(p))
        except OSError as e:
            raise SourceReadError(f"Can not read package directory {pkg_path}: {e}") from e

        package = GoPackage(path=pkg_path)
        for file_path in files:
            try:
                source = file_path.read_bytes()
            except OSError as e:
                raise SourceReadError(f"Can not read {file_path}: {e}") from e
            parsed = parse_go_source(source, file_name=str(file_path))
            if not package.name:
                package.name = parsed.package
            elif parsed.package != package.name:
                logger.debug("Ignoring %s: package %s, expected %s", file_path, parsed.package, package.name)
                continue
            package.imports.update(parsed.imports)
            package.types.update(parsed.types)
            package.functions.extend(parsed.functions)

        self._cache[pkg_path] = package
        return package

    def resolve_import(self, import_path: str) -> str | None:
        """Map an import path to a package directory inside this tree."""
        candidates = []
        if self.module_path and (import_path == self.module_path or import_path.startswith(self.module_path + "/")):
            candidates.append(self.root / import_path[len(self.module_path):].lstrip("/"))
        candidates.append(self.root / "vendor" / import_path)
        for candidate in candidates:
            if candidate.is_dir():
                return str(candidate)
        return None

    def iter_package_dirs(self) -> list[str]:
        """Directories holding Go sources, in sorted discovery order. Walked once."""
        if self._package_dirs is not None:
            return self._package_dirs
        result = []
        stack = [self.root]
        while stack:
            directory = stack.pop()
            try:
                entries = sorted(directory.iterdir())
            except OSError as e:
                raise SourceReadError(f"Can not read directory {directory}: {e}") from e
            if any(_is_source_file(p) for p in entries):
                result.append(str(directory))
            subdirs = [
                p for p in entries
                if p.is_dir() and not p.name.startswith((".", "_")) and p.name not in _SKIPPED_DIRS
            ]
            stack.extend(reversed(subdirs))
        self._package_dirs = result
        return result

    def iter_packages(self):
        for pkg_path in self.iter_package_dirs():
            yield self.load_package(pkg_path)

    def find_packages_by_name(self, name: str) -> list[str]:
        """Fallback lookup of package directories by declared package name."""
        return [pkg.path for pkg in self.iter_packages() if pkg.name == name]
