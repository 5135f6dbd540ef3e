"""Two-pass interpreter of handler comment blocks.

Pass 1 only collects the route and the tags so that declarations rejected
by the route or tag gates never trigger type resolution. Pass 2 interprets
every directive and registers the finished operation.
"""

import logging

from oasgen.assembler import DocumentAssembler
from oasgen.config import GeneratorConfig
from oasgen.errors import DuplicateOperationIdError
from oasgen.openapi.models import OperationObject, ResponseObject
from oasgen.parser.directives import Directive, DirectiveKind, parse_directives
from oasgen.parser.params import ParamParser
from oasgen.parser.response import ResponseBuilder
from oasgen.parser.route import RouteBinding, parse_route
from oasgen.parser.schema import SchemaResolver
from oasgen.store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_TAG = "others"


class OperationParser:
    def __init__(
        self,
        store: DocumentStore,
        resolver: SchemaResolver,
        assembler: DocumentAssembler,
        config: GeneratorConfig | None = None,
    ):
        self.store = store
        self.resolver = resolver
        self.assembler = assembler
        self.config = config or GeneratorConfig()
        self.responses = ResponseBuilder(resolver)
        self.params = ParamParser(resolver)

    def parse(self, pkg_path: str, pkg_name: str, comments: list[str]) -> OperationObject | None:
        """Interpret one declaration's comment lines.

        Returns the registered operation, or None when the declaration is
        not an API operation or is excluded by the filters.
        """
        if not self._in_scope(pkg_path):
            return None

        directives = parse_directives(comments)
        operation = OperationObject()

        route: RouteBinding | None = None
        for directive in directives:
            if directive.kind.is_route:
                route = parse_route(directive.text)
            elif directive.kind.is_tag:
                self._apply_tag(directive, operation)

        if route is None:
            return None

        if self.config.filter_tag and self.config.filter_tag not in operation.tags:
            logger.debug("Skipping %s %s due to tag filter: tags=%s", route.method, route.path, operation.tags)
            return None

        for directive in directives:
            self._interpret(pkg_path, pkg_name, directive, operation)

        self.assembler.add_route(route, operation)
        return operation

    def _in_scope(self, pkg_path: str) -> bool:
        if self.config.module_path and not pkg_path.startswith(self.config.module_path):
            return False
        return not self.config.handler_path or pkg_path.startswith(self.config.handler_path)

    def _interpret(self, pkg_path: str, pkg_name: str, directive: Directive, operation: OperationObject) -> None:
        kind = directive.kind
        if kind is DirectiveKind.TITLE:
            operation.summary = directive.text
        elif kind is DirectiveKind.DESCRIPTION:
            operation.description = " ".join(p for p in (operation.description, directive.text) if p)
        elif kind is DirectiveKind.PARAM:
            self.params.parse_param(pkg_path, pkg_name, operation, directive.text)
        elif kind is DirectiveKind.HEADER:
            self.params.parse_header(operation, directive.text)
        elif kind.is_response:
            status, response = self.responses.build(pkg_path, pkg_name, directive.text)
            self._set_response(operation, status, response)
        elif kind.is_tag:
            self._apply_tag(directive, operation)
        elif kind.is_route:
            # Bound once from the pass-1 result.
            pass
        elif kind is DirectiveKind.OPERATION_ID:
            self._claim_operation_id(directive.text)
            operation.operation_id = directive.text or None
        else:
            raise AssertionError(f"unhandled directive {kind}")

    @staticmethod
    def _apply_tag(directive: Directive, operation: OperationObject) -> None:
        operation.add_tag(directive.text or DEFAULT_TAG)

    @staticmethod
    def _set_response(operation: OperationObject, status: str, response: ResponseObject) -> None:
        previous = operation.responses.get(status)
        if previous is not None and previous.headers and response.headers is None:
            response.headers = previous.headers
        operation.responses[status] = response

    def _claim_operation_id(self, operation_id: str) -> None:
        if not operation_id:
            return
        if operation_id in self.store.operation_ids:
            raise DuplicateOperationIdError(operation_id)
        self.store.operation_ids.add(operation_id)
