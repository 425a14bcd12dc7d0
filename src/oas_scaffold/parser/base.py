"""Intermediate representation produced by the parsers.

Model, Service and Controller are the three resource kinds kept in the
stores. The pydantic models double as the structural schemas: a parser
assembles plain data and validates it through these classes before storing.
"""

from typing import Annotated, Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, StringConstraints, conlist, field_validator, model_validator

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]

HttpVerb = Literal["get", "post", "put", "delete", "patch"]

HTTP_VERBS: tuple[str, ...] = ("get", "post", "put", "delete", "patch")


class Parser(Protocol):
    """Compiles part of an OpenAPI document into a store."""

    def parse(self, spec: dict[str, Any]) -> None: ...


class IRNode(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Import(IRNode):
    """A class another generated file pulls in."""

    name: NonEmptyStr
    path: NonEmptyStr


def _unique_imports(imports: list[Import]) -> list[Import]:
    names = [i.name for i in imports]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"duplicate imports: {', '.join(duplicates)}")
    return imports


class Field(IRNode):
    """One property of a Model."""

    name: NonEmptyStr
    type: NonEmptyStr  # scalar, literal union, Ref or Ref[]
    nullable: bool = False
    description: str = ""
    format: str | None = None
    ref: str | None = None  # element type of a $ref array
    top_level: bool = False  # the field itself is a $ref
    enum_values: str | None = None


class Model(IRNode):
    name: NonEmptyStr
    description: str = ""
    fields: list[Field]
    imports: list[Import] = []

    @field_validator("imports")
    @classmethod
    def check_unique_imports(cls, imports: list[Import]) -> list[Import]:
        return _unique_imports(imports)


class Parameter(IRNode):
    """A path or query parameter of an operation."""

    location: NonEmptyStr  # path / query / header / cookie
    name: NonEmptyStr
    required: bool = False


class BodyParam(IRNode):
    name: NonEmptyStr
    type: NonEmptyStr


class MethodParameters(IRNode):
    params: list[Parameter] | None = None
    body: conlist(BodyParam, max_length=1) | None = None


class Method(IRNode):
    """One operation, shared by the Service and Controller shapes."""

    type: HttpVerb
    name: NonEmptyStr
    url: NonEmptyStr
    content_type: str | None = None
    parameters: MethodParameters | None = None

    def body_type(self) -> str | None:
        if self.parameters and self.parameters.body:
            return self.parameters.body[0].type
        return None


class Service(IRNode):
    name: NonEmptyStr
    description: str = ""
    methods: list[Method]
    imports: list[Import] = []

    @field_validator("imports")
    @classmethod
    def check_unique_imports(cls, imports: list[Import]) -> list[Import]:
        return _unique_imports(imports)


class Controller(IRNode):
    name: NonEmptyStr
    description: str = ""
    path: str = ""  # base route, e.g. /pets
    methods: list[Method]
    imports: list[Import]

    @field_validator("imports")
    @classmethod
    def check_unique_imports(cls, imports: list[Import]) -> list[Import]:
        return _unique_imports(imports)

    @model_validator(mode="after")
    def check_single_service(self) -> "Controller":
        services = [i for i in self.imports if i.name == self.service_class]
        if len(services) != 1:
            raise ValueError(f"expected exactly one {self.service_class} import, found {len(services)}")
        return self

    @property
    def service_class(self) -> str:
        return f"{self.name}Service"

    def service_import(self) -> Import:
        return next(i for i in self.imports if i.name == self.service_class)
