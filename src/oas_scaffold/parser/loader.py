"""Load OpenAPI v3 documents and resolve local references."""

import json
from pathlib import Path
from typing import Any

import yaml

from oas_scaffold.errors import SpecError


def load_spec(file_path: Path) -> dict[str, Any]:
    """Read a YAML or JSON OpenAPI v3 document fully into memory."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SpecError(f"cannot read document ({e.strerror})", location=str(file_path)) from e

    # JSON is a subset of YAML, but json gives better errors for .json files
    try:
        if file_path.suffix.lower() == ".json":
            doc = json.loads(text)
        else:
            doc = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecError(f"cannot parse document: {e}", location=str(file_path)) from e

    check_openapi_v3(doc, location=str(file_path))
    return doc


def check_openapi_v3(doc: Any, location: str = "") -> None:
    if not isinstance(doc, dict):
        raise SpecError("document root must be a mapping", location=location)
    version = str(doc.get("openapi", ""))
    if not version.startswith("3."):
        found = version or ("swagger " + str(doc["swagger"]) if "swagger" in doc else "none")
        raise SpecError(f"expected an OpenAPI 3.x document, found {found}", location=location)


def ref_name(ref: str) -> str:
    """``#/components/schemas/Pet`` -> ``Pet``."""
    return ref.rsplit("/", 1)[-1]


def resolve_ref(doc: dict[str, Any], ref: str) -> Any:
    """Follow a local JSON pointer such as ``#/components/parameters/limit``."""
    if not ref.startswith("#/"):
        raise SpecError("only local references are supported", location=ref)
    node: Any = doc
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            raise SpecError("unresolvable reference", location=ref)
        node = node[part]
    return node


def deref(doc: dict[str, Any], node: Any) -> Any:
    """Return ``node`` itself, or its target when it is a ``$ref`` object."""
    seen = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if ref in seen:
            raise SpecError("circular reference", location=ref)
        seen.add(ref)
        node = resolve_ref(doc, ref)
    return node
