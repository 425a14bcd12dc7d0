from pathlib import Path

import pytest

from oas_scaffold.errors import MissingOperationIdError
from oas_scaffold.parser.controllers import ControllerParser, base_route
from oas_scaffold.parser.loader import load_spec
from oas_scaffold.parser.services import ServiceParser
from oas_scaffold.store import ControllerStore, ServiceStore

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def spec():
    return load_spec(FIXTURES / "petstore.yaml")


@pytest.fixture
def controllers(spec):
    store = ControllerStore()
    ControllerParser(store).parse(spec)
    return store


class TestBaseRoute:
    def test_collection(self):
        assert base_route("/pets") == "/pets"

    def test_nested(self):
        assert base_route("/pets/{petId}/photos") == "/pets"


class TestControllerParser:
    def test_one_controller_per_resource(self, controllers):
        assert list(controllers.list()) == ["Pet", "Owner"]

    def test_service_import_comes_first(self, controllers):
        imports = [(i.name, i.path) for i in controllers.get("Pet").imports]
        assert imports == [("PetService", "@/services/PetService"), ("Pet", "@/models/Pet")]

    def test_base_path(self, controllers):
        assert controllers.get("Pet").path == "/pets"
        assert controllers.get("Owner").path == "/owners"

    def test_methods_match_service(self, spec, controllers):
        services = ServiceStore()
        ServiceParser(services).parse(spec)
        for name, controller in controllers.list().items():
            assert controller.methods == services.get(name).methods

    def test_reparse_keeps_single_service_import(self, spec, controllers):
        ControllerParser(controllers).parse(spec)
        names = [i.name for i in controllers.get("Pet").imports]
        assert names.count("PetService") == 1

    def test_later_path_without_operation_id_stores_nothing(self):
        store = ControllerStore()
        with pytest.raises(MissingOperationIdError):
            ControllerParser(store).parse({
                "openapi": "3.0.3",
                "paths": {
                    "/pets": {"get": {"operationId": "listPets"}},
                    "/pets/{petId}": {"get": {"responses": {}}},
                },
            })
        assert not store.has("Pet")

    def test_route_from_first_path_of_resource(self):
        store = ControllerStore()
        ControllerParser(store).parse({
            "openapi": "3.0.3",
            "paths": {
                "/pets": {"get": {"operationId": "listPets"}},
                "/pet/{id}": {"get": {"operationId": "getPet"}},
            },
        })
        controller = store.get("Pet")
        assert controller.path == "/pets"
        assert [m.name for m in controller.methods] == ["listPets", "getPet"]
