import pytest

from oas_scaffold.errors import IRValidationError
from oas_scaffold.parser.base import Controller, Field, Method, Model
from oas_scaffold.parser.validation import validate_controller, validate_model, validate_service


class TestField:
    def test_defaults(self):
        f = Field(name="name", type="string")
        assert f.nullable is False
        assert f.description == ""
        assert f.ref is None
        assert f.top_level is False

    def test_empty_type_rejected(self):
        with pytest.raises(ValueError):
            Field(name="name", type="")


class TestModel:
    def test_roundtrip(self):
        model = Model(name="Pet", fields=[Field(name="id", type="number")])
        assert Model(**model.model_dump()).fields[0].name == "id"

    def test_duplicate_imports_rejected(self):
        with pytest.raises(ValueError, match="duplicate imports: Tag"):
            Model(
                name="Pet",
                fields=[],
                imports=[{"name": "Tag", "path": "@/models/Tag"}, {"name": "Tag", "path": "@/models/Tag"}],
            )


class TestMethod:
    def test_body_type(self):
        method = Method(
            type="post",
            name="createPets",
            url="/pets",
            parameters={"body": [{"name": "pet", "type": "Pet"}]},
        )
        assert method.body_type() == "Pet"

    def test_no_parameters_has_no_body(self):
        assert Method(type="get", name="listPets", url="/pets").body_type() is None

    def test_unknown_verb_rejected(self):
        with pytest.raises(ValueError):
            Method(type="head", name="headPets", url="/pets")

    def test_body_holds_at_most_one_entry(self):
        with pytest.raises(ValueError):
            Method(
                type="post",
                name="createPets",
                url="/pets",
                parameters={"body": [{"name": "pet", "type": "Pet"}, {"name": "tag", "type": "Tag"}]},
            )


class TestController:
    def test_requires_its_service_import(self):
        with pytest.raises(ValueError, match="PetService"):
            Controller(name="Pet", methods=[], imports=[{"name": "Pet", "path": "@/models/Pet"}])

    def test_service_import(self):
        controller = Controller(
            name="Pet",
            methods=[],
            imports=[
                {"name": "PetService", "path": "@/services/PetService"},
                {"name": "Pet", "path": "@/models/Pet"},
            ],
        )
        assert controller.service_import().path == "@/services/PetService"


class TestValidators:
    def test_valid_model(self):
        model = validate_model({"name": "Pet", "fields": [{"name": "id", "type": "number"}]})
        assert isinstance(model, Model)

    def test_invalid_model_names_the_model_and_keeps_errors(self):
        with pytest.raises(IRValidationError) as excinfo:
            validate_model({"name": "Pet", "fields": [{"name": "id"}]})
        err = excinfo.value
        assert err.kind == "model"
        assert err.name == "Pet"
        assert err.errors[0]["loc"] == ("fields", 0, "type")
        assert "Pet" in str(err)
        assert err.__cause__ is not None

    def test_invalid_service(self):
        with pytest.raises(IRValidationError) as excinfo:
            validate_service({"name": "Pet", "methods": [{"type": "get", "url": "/pets"}]})
        assert excinfo.value.kind == "service"

    def test_unknown_keys_rejected(self):
        with pytest.raises(IRValidationError):
            validate_service({"name": "Pet", "methods": [], "functions": []})

    def test_invalid_controller(self):
        with pytest.raises(IRValidationError) as excinfo:
            validate_controller({"name": "Pet", "methods": [], "imports": []})
        assert excinfo.value.name == "Pet"
