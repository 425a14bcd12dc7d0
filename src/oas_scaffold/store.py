"""Keyed in-memory stores for the parsed IR.

A store lives for one generation run. Parsers write to it sequentially;
the engine only reads from it once parsing has finished.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from oas_scaffold.parser.base import Controller, Model, Service

T = TypeVar("T", Model, Service, Controller)


class Store(Generic[T]):
    """A mapping of resource name to IR node."""

    def __init__(self) -> None:
        self._resources: dict[str, T] = {}

    def list(self) -> dict[str, T]:
        return self._resources

    def get(self, name: str) -> T | None:
        return self._resources.get(name)

    def set(self, resource: T) -> None:
        self._resources[resource.name] = resource

    def has(self, name: str) -> bool:
        return name in self._resources

    def __len__(self) -> int:
        return len(self._resources)


class ModelStore(Store[Model]):
    pass


class ServiceStore(Store[Service]):
    pass


class ControllerStore(Store[Controller]):
    pass


@dataclass
class Stores:
    """The three stores shared by one run."""

    models: ModelStore = field(default_factory=ModelStore)
    services: ServiceStore = field(default_factory=ServiceStore)
    controllers: ControllerStore = field(default_factory=ControllerStore)
