"""Model builder — one exported class per Model, rewritten on every run."""

from oas_scaffold.generator.base import BuildResult, SourceBuilder, doc_comment, indent, property_key
from oas_scaffold.naming import Role, class_name, file_name
from oas_scaffold.parser.base import Field, Model


class ModelBuilder(SourceBuilder):
    subdir = "models"

    def build(self, model: Model) -> BuildResult:
        path = self.target(file_name(model.name, Role.NONE, self.config.extension))
        return self._overwrite(path, self.render(model), class_name(model.name))

    def render(self, model: Model) -> str:
        lines = [
            self._render_import([i.name], self.module(i.path), type_only=True)
            for i in model.imports
        ]
        if lines:
            lines.append("")
        if model.description:
            lines.append(doc_comment(model.description))
        lines.append(f"export class {class_name(model.name)} {{")
        lines.extend(indent(self._render_property(f)) for f in model.fields)
        lines.append("}")
        return "\n".join(lines) + "\n"

    def _render_property(self, field: Field) -> str:
        marker = "?" if field.nullable else "!"
        prop = f"{property_key(field.name)}{marker}: {field.type};"
        notes = [n for n in (field.description, f"@format {field.format}" if field.format else "") if n]
        if notes:
            return f"{doc_comment(' '.join(notes))}\n{prop}"
        return prop
