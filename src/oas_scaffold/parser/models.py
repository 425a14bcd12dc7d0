"""Compiles ``components.schemas`` into Model IR nodes."""

import json
import logging
from typing import Any

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.errors import SpecError
from oas_scaffold.parser.loader import ref_name
from oas_scaffold.parser.validation import validate_model
from oas_scaffold.store import ModelStore

logger = logging.getLogger(__name__)

# The only coercion applied to OpenAPI primitive types
TYPE_RENAMES = {"integer": "number"}

FALLBACK_TYPE = "unknown"


def rename_type(schema_type: str | None) -> str:
    if not schema_type:
        return FALLBACK_TYPE
    return TYPE_RENAMES.get(schema_type, schema_type)


def literal_union(values: list[Any]) -> str:
    """``["a", "b"]`` -> ``"a" | "b"``."""
    literals = []
    for value in values:
        if isinstance(value, bool):
            value = "true" if value else "false"
        literals.append(json.dumps(str(value), ensure_ascii=False))
    return " | ".join(literals)


class ModelParser:
    """Walks every schema component and stores one Model per component."""

    def __init__(self, model_store: ModelStore, config: GeneratorConfig | None = None):
        self.model_store = model_store
        self.config = config or GeneratorConfig()

    def parse(self, spec: dict[str, Any]) -> None:
        schemas = (spec.get("components") or {}).get("schemas")
        if not isinstance(schemas, dict):
            raise SpecError("document has no schemas to compile", location="components.schemas")

        for name, schema in schemas.items():
            model = validate_model(self._compile_model(str(name), schema))
            if self.model_store.has(model.name):
                logger.warning("Model %s is defined more than once, keeping the last definition", model.name)
            self.model_store.set(model)
            logger.debug("Stored model %s (%d fields)", model.name, len(model.fields))

    def _compile_model(self, name: str, schema: Any) -> dict[str, Any]:
        location = f"components.schemas.{name}"
        if not isinstance(schema, dict):
            raise SpecError("schema must be a mapping", location=location)
        if "$ref" in schema:
            raise SpecError("a schema that is only a $ref is not supported", location=location)

        properties = schema.get("properties") or {}
        if not isinstance(properties, dict):
            raise SpecError("properties must be a mapping", location=location)

        fields = []
        for prop_name, prop in properties.items():
            if not isinstance(prop, dict):
                raise SpecError("property must be a mapping", location=f"{location}.{prop_name}")
            fields.append(self._compile_field(str(prop_name), prop))

        return {
            "name": name,
            "description": schema.get("description") or "",
            "fields": fields,
            "imports": self._compile_imports(name, fields),
        }

    def _compile_field(self, name: str, prop: dict[str, Any]) -> dict[str, Any]:
        declared = prop.get("type")
        nullable = prop.get("nullable") is True
        # OpenAPI 3.1 spells nullable as a type list
        if isinstance(declared, list):
            nullable = nullable or "null" in declared
            declared = next((t for t in declared if t != "null"), None)

        field: dict[str, Any] = {
            "name": name,
            "nullable": nullable,
            "description": prop.get("description") or "",
            "format": prop.get("format"),
        }

        if "$ref" in prop:
            field["type"] = ref_name(prop["$ref"])
            field["top_level"] = True
        elif "enum" in prop:
            field["type"] = field["enum_values"] = literal_union(prop["enum"])
        elif "items" in prop:
            field.update(self._compile_array_field(prop["items"], declared))
        else:
            field["type"] = rename_type(declared)
        return field

    def _compile_array_field(self, items: Any, declared: str | None) -> dict[str, Any]:
        if isinstance(items, dict):
            if "$ref" in items:
                element = ref_name(items["$ref"])
                return {"type": f"{element}[]", "ref": element}
            if "enum" in items:
                union = literal_union(items["enum"])
                return {"type": union, "enum_values": union}
            if items.get("type"):
                return {"type": f"{rename_type(items['type'])}[]"}
        return {"type": rename_type(declared)}

    def _compile_imports(self, model_name: str, fields: list[dict[str, Any]]) -> list[dict[str, str]]:
        imports: list[dict[str, str]] = []
        seen = {model_name}
        for field in fields:
            if not (field.get("ref") or field.get("top_level")):
                continue
            class_name = field.get("ref") or field["type"]
            if class_name in seen:
                continue
            seen.add(class_name)
            imports.append({"name": class_name, "path": self.config.model_import_path(class_name)})
        return imports
