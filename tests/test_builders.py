from pathlib import Path

import pytest

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.engine import parse_spec
from oas_scaffold.errors import EmissionError
from oas_scaffold.generator.base import BuildOutcome, doc_comment, property_key
from oas_scaffold.generator.bootstrap import BootstrapBuilder
from oas_scaffold.generator.controllers import ControllerBuilder, route_suffix
from oas_scaffold.generator.models import ModelBuilder
from oas_scaffold.generator.typescript import check_balanced
from oas_scaffold.parser.base import Controller, Model
from oas_scaffold.parser.loader import load_spec

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def config(tmp_path):
    return GeneratorConfig(output_dir=tmp_path)


@pytest.fixture
def stores(config):
    return parse_spec(load_spec(FIXTURES / "petstore.yaml"), config)


class TestHelpers:
    def test_route_suffix(self):
        assert route_suffix("/pets", "/pets") == "/"
        assert route_suffix("/pets/{petId}", "/pets") == "/{petId}"

    def test_route_suffix_respects_segment_boundaries(self):
        assert route_suffix("/petstore", "/pets") == "/petstore"

    def test_doc_comment_escapes_terminator(self):
        assert doc_comment("a */ b") == "/** a *\\/ b */"

    def test_property_key(self):
        assert property_key("bornAt") == "bornAt"
        assert property_key("x-rate") == '"x-rate"'


class TestModelBuilder:
    def test_render(self, config, stores):
        source = ModelBuilder(config).render(stores.models.get("Pet"))
        assert source.startswith('import type { Owner } from "@/models/Owner.ts";\n')
        assert 'import type { Tag } from "@/models/Tag.ts";' in source
        assert "/** A pet for sale */\nexport class Pet {" in source
        assert "  name!: string;" in source
        assert "  tag?: string;" in source
        assert '  status!: "available" | "pending" | "sold";' in source
        assert "  tags!: Tag[];" in source
        assert "  /** When the pet was born @format date-time */\n  bornAt!: string;" in source
        assert check_balanced(source) == []

    def test_empty_model(self, config):
        source = ModelBuilder(config).render(Model(name="Pets", fields=[]))
        assert source == "export class Pets {\n}\n"

    def test_build_writes_and_overwrites(self, config, stores, tmp_path):
        builder = ModelBuilder(config)
        first = builder.build(stores.models.get("Tag"))
        assert first.outcome is BuildOutcome.CREATED
        assert first.path == tmp_path / "lib" / "models" / "Tag.ts"
        assert first.path.read_text().startswith("export class Tag {")

        second = builder.build(stores.models.get("Tag"))
        assert second.outcome is BuildOutcome.OVERWRITTEN

    def test_extension_from_config(self, tmp_path, stores):
        builder = ModelBuilder(GeneratorConfig(output_dir=tmp_path, extension="mts"))
        assert builder.build(stores.models.get("Tag")).path.name == "Tag.mts"

    def test_invalid_source_not_written(self, config):
        result = ModelBuilder(config).build(Model(name="Pet", fields=[{"name": "x", "type": "{"}]))
        assert result.outcome is BuildOutcome.VALIDATION_FAILED
        assert not result.ok
        assert result.errors
        assert not result.path.exists()

    def test_unwritable_target(self, tmp_path, stores):
        blocker = tmp_path / "lib"
        blocker.write_text("not a directory")
        with pytest.raises(EmissionError):
            ModelBuilder(GeneratorConfig(output_dir=tmp_path)).build(stores.models.get("Tag"))


class TestControllerBuilder:
    def test_route_of_differently_spelled_segment(self, config):
        controller = Controller(
            name="Pet",
            path="/pets",
            methods=[
                {"type": "get", "name": "listPets", "url": "/pets"},
                {"type": "get", "name": "getPet", "url": "/pet/{id}"},
            ],
            imports=[{"name": "PetService", "path": "@/services/PetService"}],
        )
        source = ControllerBuilder(config).render(controller)
        assert '@Get({ description: "", path: "/" })\n  listPets(' in source
        assert '@Get({ description: "", path: "/{id}" })\n  getPet(' in source
        assert "/pet/{id}" not in source

    def test_render(self, config, stores):
        source = ControllerBuilder(config).render(stores.controllers.get("Pet"))
        assert source.startswith('import { PetService } from "@/services/PetService.ts";\n')
        assert 'import type { Pet } from "@/models/Pet.ts";' in source
        assert (
            'import { Controller, Get, Post, Put, type Context, type InjectableRegistration } from "@eyrie/app";'
            in source
        )
        assert '@Controller("/pets")\nexport class PetController {' in source
        assert "constructor(private readonly petService: PetService) {}" in source
        assert check_balanced(source) == []

    def test_routed_methods_delegate(self, config, stores):
        source = ControllerBuilder(config).render(stores.controllers.get("Pet"))
        assert '@Get({ description: "", path: "/" })\n  listPets(context: Context, params: unknown) {' in source
        assert "return this.petService.listPets(context, params);" in source
        assert '@Put({ description: "", path: "/{petId}" })' in source
        assert "updatePet(context: Context, params: unknown, body: Pet) {" in source
        assert "return this.petService.updatePet(context, params, body);" in source
        assert '@Get({ description: "", path: "/{petId}/photos" })' in source

    def test_register_lists_service(self, config, stores):
        source = ControllerBuilder(config).render(stores.controllers.get("Pet"))
        assert "return { dependencies: [{ class: PetService }] };" in source

    def test_build_always_overwrites(self, config, stores, tmp_path):
        builder = ControllerBuilder(config)
        path = tmp_path / "lib" / "controllers" / "PetController.ts"
        path.parent.mkdir(parents=True)
        path.write_text("// hand edits are not kept\n")
        result = builder.build(stores.controllers.get("Pet"))
        assert result.outcome is BuildOutcome.OVERWRITTEN
        assert "hand edits" not in path.read_text()


class TestBootstrapBuilder:
    def test_render(self, config, stores):
        source = BootstrapBuilder(config).render(list(stores.controllers.list().values()))
        assert source.startswith('import { Application } from "@eyrie/app";\n')
        assert 'import { PetController } from "./controllers/PetController.ts";' in source
        assert 'import { OwnerController } from "./controllers/OwnerController.ts";' in source
        assert 'version: "v1",' in source
        assert "controllers: [PetController, OwnerController]," in source
        assert source.endswith("await app.listen();\n")

    def test_api_version_from_config(self, tmp_path, stores):
        builder = BootstrapBuilder(GeneratorConfig(output_dir=tmp_path, api_version="v2"))
        result = builder.build(list(stores.controllers.list().values()))
        assert result.path == tmp_path / "lib" / "main.ts"
        assert 'version: "v2",' in result.path.read_text()
