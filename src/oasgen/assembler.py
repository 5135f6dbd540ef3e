"""Document assembly: route registration and end-of-run pruning."""

import logging

from oasgen.config import GeneratorConfig
from oasgen.openapi.models import HTTP_METHODS, OperationObject, PathItemObject
from oasgen.parser.route import RouteBinding
from oasgen.store import DocumentStore

logger = logging.getLogger(__name__)


class DocumentAssembler:
    def __init__(self, store: DocumentStore):
        self.store = store

    def add_route(self, binding: RouteBinding, operation: OperationObject) -> bool:
        """Bind an operation to its path and method slot.

        A later operation for the same slot replaces the earlier one. Methods
        outside the eight HTTP verbs are dropped; returns whether the
        operation was bound.
        """
        if binding.method not in HTTP_METHODS:
            logger.debug("Dropping route %s with unsupported method %s", binding.path, binding.method)
            return False

        paths = self.store.openapi.paths
        path_item = paths.get(binding.path)
        if path_item is None:
            path_item = paths[binding.path] = PathItemObject()
        path_item.set_operation(binding.method, operation)
        return True

    def prune_unqualified_schemas(self) -> None:
        """Drop short-name schema keys that shadow a package-qualified key."""
        schemas = self.store.schemas
        for key in list(schemas):
            parts = key.split(".")
            if len(parts) > 1 and parts[-1] in schemas:
                del schemas[parts[-1]]

    def filter_paths_by_tag(self, tag: str) -> None:
        """Keep only operations tagged ``tag``; paths left empty are dropped."""
        if not tag:
            return

        filtered: dict[str, PathItemObject] = {}
        for path, path_item in self.store.openapi.paths.items():
            kept = PathItemObject(ref=path_item.ref, summary=path_item.summary, description=path_item.description)
            matched = False
            for method, operation in path_item.operations().items():
                if tag in operation.tags:
                    kept.set_operation(method, operation)
                    matched = True
            if matched:
                filtered[path] = kept

        self.store.openapi.paths = filtered
        logger.info("Filtered paths by tag '%s', %d paths remaining", tag, len(filtered))

    def finalize(self, config: GeneratorConfig) -> None:
        if not config.schema_without_pkg:
            self.prune_unqualified_schemas()
        self.filter_paths_by_tag(config.filter_tag)
