"""Groups path operations into one Service per resource."""

import logging
from typing import Any

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.parser.operations import group_operations, merge_methods, model_imports
from oas_scaffold.parser.validation import validate_service
from oas_scaffold.store import ServiceStore

logger = logging.getLogger(__name__)


class ServiceParser:
    """Outputs the Service definitions the service builder consumes."""

    def __init__(self, service_store: ServiceStore, config: GeneratorConfig | None = None):
        self.service_store = service_store
        self.config = config or GeneratorConfig()

    def parse(self, spec: dict[str, Any]) -> None:
        """Compile every path item and store the result, merging by resource name.

        Nothing is stored unless every path item compiles and validates.

        Args:
            spec: the loaded OpenAPI document.
        """
        services = [
            validate_service(self._compile_service(name, entries))
            for name, entries in group_operations(spec).items()
        ]
        for service in services:
            self.service_store.set(service)
            logger.debug("Stored service %s (%d methods)", service.name, len(service.methods))

    def _compile_service(self, name: str, entries: list[tuple[str, list[dict[str, Any]]]]) -> dict[str, Any]:
        existing = self.service_store.get(name)
        methods = [m.model_dump() for m in existing.methods] if existing else []
        for path, compiled in entries:
            if methods:
                logger.debug("Merging %s into service %s", path, name)
            methods = merge_methods(methods, compiled)

        return {
            "name": name,
            "description": existing.description if existing else "",
            "methods": methods,
            # Recomputed from the full method list so a merge never leaves stale imports
            "imports": model_imports(methods, self.config),
        }
