"""Structural validators guarding the stores.

Each validator turns assembled plain data into its IR type, or raises
IRValidationError carrying the full pydantic error list.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from oas_scaffold.errors import IRValidationError
from oas_scaffold.parser.base import Controller, Model, Service

N = TypeVar("N", bound=BaseModel)


def _validate(kind: str, node_type: type[N], data: dict[str, Any]) -> N:
    try:
        return node_type.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        raise IRValidationError(kind, str(data.get("name", "")), errors) from e


def validate_model(data: dict[str, Any]) -> Model:
    return _validate("model", Model, data)


def validate_service(data: dict[str, Any]) -> Service:
    return _validate("service", Service, data)


def validate_controller(data: dict[str, Any]) -> Controller:
    return _validate("controller", Controller, data)
