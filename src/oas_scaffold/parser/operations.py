"""Operation compilation shared by the Service and Controller parsers.

Both parsers group the operations of every path item under the resource
named by the path's first segment and build identical Method data; they
differ only in the imports they attach.
"""

from typing import Any, Iterator

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.errors import MissingOperationIdError, SpecError
from oas_scaffold.naming import camel_case, resource_name_for_path, singular
from oas_scaffold.parser.base import HTTP_VERBS
from oas_scaffold.parser.loader import deref, ref_name

SUCCESS_STATUSES = ("200", "201")


def iter_path_items(spec: dict[str, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(path, path_item)`` in document order."""
    paths = spec.get("paths") or {}
    if not isinstance(paths, dict):
        raise SpecError("paths must be a mapping", location="paths")
    for path, path_item in paths.items():
        if not path_item:
            continue
        if not isinstance(path_item, dict):
            raise SpecError("path item must be a mapping", location=str(path))
        yield str(path), path_item


def compile_methods(spec: dict[str, Any], path: str, path_item: dict[str, Any]) -> list[dict[str, Any]]:
    """Build one Method per supported verb of a path item, in declaration order."""
    methods = []
    for verb, operation in path_item.items():
        if verb not in HTTP_VERBS:
            continue
        if not isinstance(operation, dict) or not operation.get("operationId"):
            raise MissingOperationIdError(path, verb)

        method: dict[str, Any] = {
            "type": verb,
            "name": operation["operationId"],
            "url": path,
            "content_type": _success_content_type(spec, operation.get("responses")),
        }
        parameters = _compile_parameters(spec, path, operation)
        if parameters:
            method["parameters"] = parameters
        methods.append(method)
    return methods


def group_operations(spec: dict[str, Any]) -> dict[str, list[tuple[str, list[dict[str, Any]]]]]:
    """Compile every path item and group the results by resource name.

    The whole document is compiled before the caller stores anything, so an
    error in any path item leaves the stores untouched.

    Returns:
        ``{resource: [(path, methods), ...]}`` in document order.
    """
    groups: dict[str, list[tuple[str, list[dict[str, Any]]]]] = {}
    for path, path_item in iter_path_items(spec):
        name = resource_name_for_path(path)
        if not name:
            raise SpecError("the root path cannot be grouped into a resource", location=path)
        groups.setdefault(name, []).append((path, compile_methods(spec, path, path_item)))
    return groups


def _compile_parameters(spec: dict[str, Any], path: str, operation: dict[str, Any]) -> dict[str, Any]:
    args: dict[str, Any] = {}

    params = []
    for raw in operation.get("parameters") or []:
        param = deref(spec, raw)
        if not isinstance(param, dict) or not param.get("name"):
            raise SpecError("parameter without a name", location=path)
        # The nested schema is not needed downstream
        params.append({
            "location": param.get("in", "query"),
            "name": camel_case(singular(str(param["name"]))),
            "required": param.get("required") is True,
        })
    if params:
        args["params"] = params

    body = _compile_body(spec, operation.get("requestBody"))
    if body:
        args["body"] = body
    return args


def _compile_body(spec: dict[str, Any], request_body: Any) -> list[dict[str, str]]:
    request_body = deref(spec, request_body)
    if not isinstance(request_body, dict):
        return []
    content = request_body.get("content") or {}
    media = next(iter(content.values()), None)
    schema = media.get("schema") if isinstance(media, dict) else None
    if not isinstance(schema, dict) or "$ref" not in schema:
        return []
    schema_name = ref_name(schema["$ref"])
    return [{"name": camel_case(singular(schema_name)), "type": schema_name}]


def _success_content_type(spec: dict[str, Any], responses: Any) -> str | None:
    if not isinstance(responses, dict):
        return None
    for status in SUCCESS_STATUSES:
        # YAML turns unquoted status codes into integers
        response = responses.get(status) or responses.get(int(status))
        if response:
            response = deref(spec, response)
            content = response.get("content") if isinstance(response, dict) else None
            return next(iter(content), None) if content else None
    return None


def merge_methods(existing: list[dict[str, Any]], new: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Append ``new`` to ``existing``; a method with a known name replaces it in place."""
    merged = {method["name"]: method for method in existing}
    for method in new:
        merged[method["name"]] = method
    return list(merged.values())


def model_imports(methods: list[dict[str, Any]], config: GeneratorConfig) -> list[dict[str, str]]:
    """One import per Model referenced by a request body, first use wins."""
    imports: dict[str, dict[str, str]] = {}
    for method in methods:
        for body in (method.get("parameters") or {}).get("body") or []:
            name = body["type"]
            imports.setdefault(name, {"name": name, "path": config.model_import_path(name)})
    return list(imports.values())
