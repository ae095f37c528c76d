"""
Resource handlers - run one operation over a batch of items.

Every resource shares the same flow: look up the operation's template,
then for each item build the request, send it and record the parsed
response. Items are processed sequentially and in order; the output has
exactly one record per input item.
"""

from __future__ import annotations

from typing import Any, Dict, List

from src.flare_nodes.observability import get_logger, with_node_context
from src.node_sdk.basenode import BaseNode, NodeExecutionData, NodeOperationError
from src.node_sdk.items import output_record

from .credentials import FlareCredentials
from .errors import ConfigurationError, UnknownOperationError
from .templates import RESOURCES, RequestTemplate, build_request, templates_for


logger = get_logger(__name__)


class ResourceHandler:
    """Executes the operations of one resource."""

    def __init__(self, resource: str) -> None:
        self.resource = resource
        self.templates: Dict[str, RequestTemplate] = templates_for(resource)

    @property
    def operations(self) -> List[str]:
        return list(self.templates)

    def template(self, operation: str, node: BaseNode | None = None) -> RequestTemplate:
        """
        Template for ``operation``.

        Raises:
            UnknownOperationError: operation does not belong to this resource
        """
        if not isinstance(operation, str) or operation not in self.templates:
            raise UnknownOperationError(self.resource, str(operation), node=node)
        return self.templates[operation]

    def handle(
        self,
        node: BaseNode,
        operation: str,
        items: List[Dict[str, Any]],
        credentials: FlareCredentials,
    ) -> List[NodeExecutionData]:
        """
        Run ``operation`` for every item.

        With continue-on-fail a failing item yields ``{"error": message}``
        and the batch goes on; otherwise the first failure is raised,
        carrying the records of the items before it in ``partial_results``.

        Raises:
            UnknownOperationError: before any request is sent
            NodeOperationError: first item failure when continue-on-fail is off
        """
        template = self.template(operation, node)
        capture = node.continue_on_fail()
        batch_logger = logger.bind(
            **with_node_context(node=node.type, resource=self.resource, operation=operation)
        )

        batch_logger.info(f"Running {self.resource}.{operation} for {len(items)} item(s)")

        results: List[NodeExecutionData] = []
        for i in range(len(items)):
            try:
                payload = self._run_item(node, template, credentials, i)
            except ConfigurationError:
                raise
            except NodeOperationError as e:
                if e.item_index is None:
                    e.item_index = i
                if not capture:
                    batch_logger.error(
                        f"{self.resource}.{operation} failed: {e.message}",
                        extra={"item_index": i},
                    )
                    e.partial_results = results
                    raise
                batch_logger.warning(
                    f"{self.resource}.{operation} failed, continuing: {e.message}",
                    extra={"item_index": i},
                )
                payload = {"error": e.message}
            except Exception as e:
                if not capture:
                    batch_logger.error(
                        f"{self.resource}.{operation} failed unexpectedly: {e}",
                        extra={"item_index": i},
                    )
                    error = NodeOperationError(str(e), node=node, item_index=i)
                    error.partial_results = results
                    raise error from e
                batch_logger.warning(
                    f"{self.resource}.{operation} failed unexpectedly, continuing: {e}",
                    extra={"item_index": i},
                )
                payload = {"error": str(e)}

            results.append(output_record(payload, i))

        batch_logger.info(f"Finished {self.resource}.{operation}")
        return results

    def _run_item(
        self,
        node: BaseNode,
        template: RequestTemplate,
        credentials: FlareCredentials,
        item_index: int,
    ) -> Any:
        request = build_request(
            template,
            credentials,
            lambda name, default: node.get_node_parameter(name, item_index, default),
        )

        logger.debug(
            f"{request.method} {request.url}",
            extra=with_node_context(
                node=node.type,
                resource=template.resource,
                operation=template.operation,
                item_index=item_index,
            ),
        )

        return node.http_client.request_json(
            request.method,
            request.url,
            json=request.body,
            headers=request.headers,
        )


RESOURCE_HANDLERS: Dict[str, ResourceHandler] = {
    resource: ResourceHandler(resource) for resource in RESOURCES
}


__all__ = [
    "RESOURCE_HANDLERS",
    "ResourceHandler",
]
