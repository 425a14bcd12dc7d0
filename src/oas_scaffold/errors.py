"""Error types raised while compiling an OpenAPI document and emitting sources."""

from typing import Any


class ScaffoldError(Exception):
    """Base class for every error the generator raises on purpose."""


class SpecError(ScaffoldError):
    """The OpenAPI document is structurally unusable."""

    def __init__(self, message: str, location: str = ""):
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class MissingOperationIdError(SpecError):
    """An operation has no ``operationId`` to name its method after."""

    def __init__(self, path: str, verb: str):
        self.path = path
        self.verb = verb
        super().__init__(f"{verb.upper()} operation has no operationId", location=path)


class IRValidationError(ScaffoldError):
    """An assembled Model, Service or Controller failed its structural schema."""

    def __init__(self, kind: str, name: str, errors: list[dict[str, Any]]):
        self.kind = kind
        self.name = name
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or '<root>'}: {err.get('msg', '')}"
            for err in errors
        )
        super().__init__(f"Schema validation failed for {kind}: {name or '<unnamed>'} ({details})")


class EmissionError(ScaffoldError):
    """A builder could not produce a usable source file."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class ConfigError(ScaffoldError):
    """Generator settings from the environment or options are invalid."""
