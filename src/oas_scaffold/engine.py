"""The engine compiles an OpenAPI document into the stores and fans emission out.

Parsing is sequential: models, then services, then controllers. Emission
starts only once every store is complete, and from then on the stores are
only read, so the builders run side by side without locking. Each task
writes its own file.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.errors import EmissionError
from oas_scaffold.generator.base import BuildResult
from oas_scaffold.generator.bootstrap import BootstrapBuilder
from oas_scaffold.generator.controllers import ControllerBuilder
from oas_scaffold.generator.models import ModelBuilder
from oas_scaffold.generator.services import ServiceBuilder
from oas_scaffold.parser.base import Parser
from oas_scaffold.parser.controllers import ControllerParser
from oas_scaffold.parser.models import ModelParser
from oas_scaffold.parser.services import ServiceParser
from oas_scaffold.store import Stores

logger = logging.getLogger(__name__)


def parse_spec(spec: dict[str, Any], config: GeneratorConfig | None = None, stores: Stores | None = None) -> Stores:
    """Run the three parsers over ``spec`` and return the filled stores."""
    config = config or GeneratorConfig()
    stores = stores or Stores()
    parsers: list[Parser] = [
        ModelParser(stores.models, config),
        ServiceParser(stores.services, config),
        ControllerParser(stores.controllers, config),
    ]
    for parser in parsers:
        parser.parse(spec)
    logger.debug(
        "Parsed %d models, %d services, %d controllers",
        len(stores.models),
        len(stores.services),
        len(stores.controllers),
    )
    return stores


class Engine:
    """Delegates every stored resource to its builder."""

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config or GeneratorConfig()
        self.model_builder = ModelBuilder(self.config)
        self.service_builder = ServiceBuilder(self.config)
        self.controller_builder = ControllerBuilder(self.config)
        self.bootstrap_builder = BootstrapBuilder(self.config)

    def process(self, stores: Stores) -> list[BuildResult]:
        """Emit every model, service and controller plus the bootstrap file.

        Raises EmissionError when any generated file fails validation;
        files written by other tasks are left in place.
        """
        tasks: list[tuple[Callable[[Any], BuildResult], Any]] = [
            *((self.model_builder.build, m) for m in stores.models.list().values()),
            *((self.service_builder.build, s) for s in stores.services.list().values()),
            *((self.controller_builder.build, c) for c in stores.controllers.list().values()),
            (self.bootstrap_builder.build, list(stores.controllers.list().values())),
        ]

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as ex:
            futures = [ex.submit(build, resource) for build, resource in tasks]
            results = [future.result() for future in futures]

        failed = [r for r in results if not r.ok]
        if failed:
            details = "; ".join(f"{r.path}: {', '.join(r.errors)}" for r in failed)
            raise EmissionError(str(failed[0].path), f"{len(failed)} generated file(s) failed validation ({details})")
        return results


def generate_project(spec: dict[str, Any], config: GeneratorConfig | None = None) -> list[BuildResult]:
    """Parse ``spec`` into fresh stores and emit the project."""
    config = config or GeneratorConfig()
    stores = parse_spec(spec, config)
    return Engine(config).process(stores)
