import pytest

from oasgen.assembler import DocumentAssembler
from oasgen.config import GeneratorConfig
from oasgen.errors import SourceReadError
from oasgen.parser.operations import OperationParser
from oasgen.parser.schema import SchemaResolver
from oasgen.source.gotree import FieldDecl, GoPackage, TypeDecl
from oasgen.store import DocumentStore


class InMemorySourceTree:
    """Source-tree provider serving pre-built packages."""

    def __init__(self, packages: list[GoPackage], import_dirs: dict[str, str]):
        self.packages = {p.path: p for p in packages}
        self.import_dirs = import_dirs
        self.loads: list[str] = []

    def load_package(self, pkg_path: str) -> GoPackage:
        self.loads.append(pkg_path)
        if pkg_path not in self.packages:
            raise SourceReadError(f"no package at {pkg_path}")
        return self.packages[pkg_path]

    def resolve_import(self, import_path: str) -> str | None:
        return self.import_dirs.get(import_path)

    def find_packages_by_name(self, name: str) -> list[str]:
        return [p.path for p in self.packages.values() if p.name == name]

    def iter_packages(self):
        return list(self.packages.values())


def _struct(name: str, *fields: FieldDecl) -> TypeDecl:
    return TypeDecl(name=name, kind="struct", fields=list(fields))


def _field(name: str | None, type_: str, tag: str = "") -> FieldDecl:
    return FieldDecl(names=[name] if name else [], type=type_, tag=tag)


def build_tree() -> InMemorySourceTree:
    models = GoPackage(
        path="/app/models",
        name="models",
        imports={"time": "time"},
        types={
            "User": _struct(
                "User",
                _field("ID", "int64", 'json:"id"'),
                _field("Name", "string", 'json:"name" binding:"required"'),
                _field("Email", "string", 'json:"email,omitempty" description:"Contact address"'),
                _field("password", "string"),
                _field("Tags", "[]string", 'json:"tags"'),
                _field("Manager", "*User", 'json:"manager"'),
                _field("Internal", "string", 'json:"-"'),
            ),
            "Item": _struct(
                "Item",
                _field("SKU", "string", 'json:"sku"'),
                _field("Price", "float64", 'json:"price"'),
            ),
            "Wrapper": _struct(
                "Wrapper",
                _field("Code", "int", 'json:"code"'),
                _field("Message", "string", 'json:"message"'),
                _field("Data", "interface{}", 'json:"data"'),
                _field("Total", "int", 'json:"total"'),
            ),
            "Base": _struct("Base", _field("CreatedAt", "time.Time", 'json:"created_at"')),
            "Pet": _struct(
                "Pet",
                _field(None, "Base"),
                _field("Name", "string", 'json:"name"'),
                _field("Owner", "*User", 'json:"owner"'),
            ),
            "Status": TypeDecl(name="Status", kind="named", underlying="string"),
            "Tree": _struct(
                "Tree",
                _field("Children", "[]Tree", 'json:"children"'),
                _field("Leaf", "*Leaf", 'json:"leaf"'),
            ),
            "Leaf": _struct("Leaf", _field("Parent", "*Tree", 'json:"parent"')),
            "Broken": _struct("Broken", _field("Missing", "Nowhere", 'json:"missing"')),
        },
    )
    billing = GoPackage(
        path="/app/billing",
        name="billing",
        types={"User": _struct("User", _field("Plan", "string", 'json:"plan"'))},
    )
    handlers = GoPackage(
        path="/app/handlers",
        name="handlers",
        imports={"models": "example.com/app/models", "billing": "example.com/app/billing"},
        types={"LocalResp": _struct("LocalResp", _field("OK", "bool", 'json:"ok"'))},
    )
    return InMemorySourceTree(
        [models, billing, handlers],
        {"example.com/app/models": "/app/models", "example.com/app/billing": "/app/billing"},
    )


@pytest.fixture
def tree():
    return build_tree()


@pytest.fixture
def store():
    return DocumentStore()


@pytest.fixture
def resolver(store, tree):
    return SchemaResolver(store, tree, GeneratorConfig())


def make_operation_parser(store: DocumentStore, tree, **config) -> OperationParser:
    cfg = GeneratorConfig(**config)
    resolver = SchemaResolver(store, tree, cfg)
    return OperationParser(store, resolver, DocumentAssembler(store), cfg)


@pytest.fixture
def operation_parser(store, tree):
    return make_operation_parser(store, tree)


@pytest.fixture
def make_parser(store, tree):
    def _make(**config):
        return make_operation_parser(store, tree, **config)
    return _make
