"""Whole-tree scan producing one OpenAPI document."""

import logging
from pathlib import Path

from oasgen.assembler import DocumentAssembler
from oasgen.config import GeneratorConfig
from oasgen.errors import DeclarationError
from oasgen.openapi.models import OpenAPIObject
from oasgen.parser.operations import OperationParser
from oasgen.parser.schema import SchemaResolver
from oasgen.source.gotree import GoSourceTree
from oasgen.store import DocumentStore

logger = logging.getLogger(__name__)


def _absolute(root: Path, value: str) -> str:
    if not value:
        return ""
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    return str(path.resolve())


class Generator:
    """Scan every package of a source tree and assemble the document."""

    def __init__(self, config: GeneratorConfig, provider=None):
        root = Path(config.source_root).resolve()
        self.config = config.merged(
            source_root=root,
            module_path=_absolute(root, config.module_path),
            handler_path=_absolute(root, config.handler_path),
        )
        self.provider = provider or GoSourceTree(root)
        self.store = DocumentStore.from_config(self.config)
        self.resolver = SchemaResolver(self.store, self.provider, self.config)
        self.assembler = DocumentAssembler(self.store)
        self.operations = OperationParser(self.store, self.resolver, self.assembler, self.config)
        self.skipped: list[tuple[str, DeclarationError]] = []

    def run(self) -> OpenAPIObject:
        count = 0
        for package in self.provider.iter_packages():
            for func in package.functions:
                if not func.comments:
                    continue
                try:
                    operation = self.operations.parse(package.path, package.name, func.comments)
                except DeclarationError as e:
                    if self.config.strict:
                        raise
                    logger.warning("Skipping %s.%s (%s): %s", package.name, func.name, func.file, e)
                    self.skipped.append((f"{package.name}.{func.name}", e))
                    continue
                if operation is not None:
                    count += 1

        self.assembler.finalize(self.config)
        logger.info("Parsed %d operations, %d schemas", count, len(self.store.schemas))
        return self.store.openapi
