"""Service builder.

A service file holds hand-written business logic, so it is only created
once. Later runs reconcile the existing class with the IR instead of
overwriting it. Only the stub methods change; every other member is kept
as written.
"""

import logging
from pathlib import Path

from oas_scaffold.generator import typescript
from oas_scaffold.generator.base import (
    BuildOutcome,
    BuildResult,
    SourceBuilder,
    indent,
    method_parameters,
    register_method,
)
from oas_scaffold.naming import Role, class_name, file_name
from oas_scaffold.parser.base import Method, Service

logger = logging.getLogger(__name__)

# Members reconciliation never removes
PROTECTED_MEMBERS = frozenset({"register", "constructor"})


class ServiceBuilder(SourceBuilder):
    subdir = "services"

    def build(self, service: Service) -> BuildResult:
        path = self.target(file_name(service.name, Role.SERVICE, self.config.extension))
        name = class_name(service.name, Role.SERVICE)
        if path.exists():
            return self._reconcile(path, service, name)
        return self._write(path, self.render(service), name, BuildOutcome.CREATED)

    def render(self, service: Service) -> str:
        lines = [self._render_import([i.name], self.module(i.path)) for i in service.imports]
        lines.append(self._framework_import())
        lines.append("")
        lines.append("@Service()")
        lines.append(f"export class {class_name(service.name, Role.SERVICE)} {{")
        members = [self.render_method(m) for m in service.methods]
        members.append(register_method([i.name for i in service.imports]))
        lines.append("\n\n".join(indent(m) for m in members))
        lines.append("}")
        return "\n".join(lines) + "\n"

    def render_method(self, method: Method) -> str:
        return (
            f"{method.name}({method_parameters('unknown', method.body_type())}) {{\n"
            f'  throw new Error("{method.name} is not implemented");\n'
            "}"
        )

    def _framework_import(self) -> str:
        return self._render_import(["Service", "type InjectableRegistration"], self.config.framework_module)

    def _reconcile(self, path: Path, service: Service, name: str) -> BuildResult:
        source = path.read_text(encoding="utf-8")
        body = typescript.find_class(source, name)
        if body is None:
            return BuildResult(
                path=path,
                outcome=BuildOutcome.VALIDATION_FAILED,
                errors=[f"existing file does not declare class {name}"],
            )

        wanted = {m.name for m in service.methods}
        present = {m.name for m in body.methods()}
        edits: list[tuple[int, int, str]] = []

        removed = [m for m in body.methods() if m.name not in wanted and m.name not in PROTECTED_MEMBERS]
        for member in removed:
            edits.append((member.start, member.end, ""))

        added = [m for m in service.methods if m.name not in present]
        if added:
            kept = [m for m in body.members if m not in removed]
            anchor = kept[-1].end if kept else body.open + 1
            text = "".join("\n\n" + indent(self.render_method(m)) for m in added)
            if not kept:
                text = text[1:] + "\n"
            edits.append((anchor, anchor, text))

        missing_imports = [i for i in service.imports if i.name not in typescript.imported_names(source)]
        if missing_imports:
            anchor = typescript.import_insertion_point(source)
            text = "".join(self._render_import([i.name], self.module(i.path)) + "\n" for i in missing_imports)
            edits.append((anchor, anchor, "\n" + text.rstrip("\n") if anchor else text))

        if not edits:
            logger.debug("%s is up to date", path)
            return BuildResult(path=path, outcome=BuildOutcome.RECONCILED)

        logger.debug(
            "Reconciling %s: +%s -%s",
            path,
            [m.name for m in added],
            [m.name for m in removed],
        )
        return self._write(path, typescript.apply_edits(source, edits), name, BuildOutcome.RECONCILED)
