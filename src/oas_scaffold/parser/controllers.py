"""Controller parser: the service grouping plus the controller's own service import."""

import logging
from typing import Any

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.naming import Role, class_name
from oas_scaffold.parser.operations import group_operations, merge_methods, model_imports
from oas_scaffold.parser.validation import validate_controller
from oas_scaffold.store import ControllerStore

logger = logging.getLogger(__name__)


def base_route(path: str) -> str:
    """``/pets/{petId}`` -> ``/pets``."""
    segments = path.split("/")
    return "/" + (segments[1] if len(segments) > 1 else "")


class ControllerParser:
    def __init__(self, controller_store: ControllerStore, config: GeneratorConfig | None = None):
        self.controller_store = controller_store
        self.config = config or GeneratorConfig()

    def parse(self, spec: dict[str, Any]) -> None:
        controllers = [
            validate_controller(self._compile_controller(name, entries))
            for name, entries in group_operations(spec).items()
        ]
        for controller in controllers:
            self.controller_store.set(controller)
            logger.debug("Stored controller %s (%d methods)", controller.name, len(controller.methods))

    def _compile_controller(self, name: str, entries: list[tuple[str, list[dict[str, Any]]]]) -> dict[str, Any]:
        existing = self.controller_store.get(name)
        methods = [m.model_dump() for m in existing.methods] if existing else []
        for path, compiled in entries:
            if methods:
                logger.debug("Merging %s into controller %s", path, name)
            methods = merge_methods(methods, compiled)

        route = existing.path if existing and existing.path else base_route(entries[0][0])
        return {
            "name": name,
            "description": existing.description if existing else "",
            "path": route,
            "methods": methods,
            "imports": [self._service_import(name), *model_imports(methods, self.config)],
        }

    def _service_import(self, name: str) -> dict[str, str]:
        service_class = class_name(name, Role.SERVICE)
        return {"name": service_class, "path": self.config.service_import_path(service_class)}
