"""The application entry file wiring every controller."""

from oas_scaffold.generator.base import BuildResult, SourceBuilder
from oas_scaffold.naming import Role, class_name, file_name
from oas_scaffold.parser.base import Controller


class BootstrapBuilder(SourceBuilder):
    def build(self, controllers: list[Controller]) -> BuildResult:
        path = self.target(f"main.{self.config.extension}")
        return self._overwrite(path, self.render(controllers), None)

    def render(self, controllers: list[Controller]) -> str:
        names = [class_name(c.name, Role.CONTROLLER) for c in controllers]
        lines = [self._render_import(["Application"], self.config.framework_module)]
        for controller, name in zip(controllers, names):
            module = f"./controllers/{file_name(controller.name, Role.CONTROLLER, self.config.extension)}"
            lines.append(self._render_import([name], module))
        lines.extend([
            "",
            "const app = new Application();",
            "",
            "app.registerVersion({",
            f'  version: "{self.config.api_version}",',
            f"  controllers: [{', '.join(names)}],",
            "});",
            "",
            "await app.listen();",
        ])
        return "\n".join(lines) + "\n"
