"""Controller builder — routed classes delegating to their service."""

from oas_scaffold.generator.base import (
    BuildResult,
    SourceBuilder,
    call_arguments,
    indent,
    method_parameters,
    register_method,
)
from oas_scaffold.naming import Role, camel_case, class_name, file_name
from oas_scaffold.parser.base import Controller, Method
from oas_scaffold.parser.controllers import base_route

VERB_DECORATORS = {
    "get": "Get",
    "post": "Post",
    "put": "Put",
    "delete": "Delete",
    "patch": "Patch",
}


def route_suffix(url: str, base: str) -> str:
    """``("/pets/{petId}", "/pets")`` -> ``/{petId}``; an empty suffix is ``/``."""
    if base and (url == base or url.startswith(base.rstrip("/") + "/")):
        url = url[len(base.rstrip("/")):]
    return url or "/"


class ControllerBuilder(SourceBuilder):
    subdir = "controllers"

    def build(self, controller: Controller) -> BuildResult:
        path = self.target(file_name(controller.name, Role.CONTROLLER, self.config.extension))
        return self._overwrite(path, self.render(controller), class_name(controller.name, Role.CONTROLLER))

    def render(self, controller: Controller) -> str:
        service = controller.service_import()
        service_field = camel_case(service.name)

        lines = [self._render_import([service.name], self.module(service.path))]
        lines.extend(
            self._render_import([i.name], self.module(i.path), type_only=True)
            for i in controller.imports
            if i is not service
        )
        lines.append(self._framework_import(controller))
        lines.append("")
        lines.append(f'@Controller("{controller.path or "/"}")')
        lines.append(f"export class {class_name(controller.name, Role.CONTROLLER)} {{")

        members = [f"constructor(private readonly {service_field}: {service.name}) {{}}"]
        members.extend(self._render_method(m, service_field) for m in controller.methods)
        members.append(register_method([service.name]))
        lines.append("\n\n".join(indent(m) for m in members))
        lines.append("}")
        return "\n".join(lines) + "\n"

    def _render_method(self, method: Method, service_field: str) -> str:
        body_type = method.body_type()
        decorator = VERB_DECORATORS[method.type]
        # The method's own first segment, which can differ from the controller's (/pet vs /pets)
        path = route_suffix(method.url, base_route(method.url))
        return (
            f'@{decorator}({{ description: "", path: "{path}" }})\n'
            f"{method.name}({method_parameters('Context', body_type)}) {{\n"
            f"  return this.{service_field}.{method.name}({call_arguments(body_type)});\n"
            "}"
        )

    def _framework_import(self, controller: Controller) -> str:
        verbs = dict.fromkeys(VERB_DECORATORS[m.type] for m in controller.methods)
        names = ["Controller", *verbs, "type Context", "type InjectableRegistration"]
        return self._render_import(names, self.config.framework_module)
