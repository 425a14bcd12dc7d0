"""Generator configuration.

Values come from, in increasing priority: the defaults below, environment
variables, and CLI options.

Environment variables:
- OAS_SCAFFOLD_OUTPUT_DIR: root directory the ``lib/`` tree is written under
- OAS_SCAFFOLD_EXTENSION: extension of generated files (default: ts)
- OAS_SCAFFOLD_API_VERSION: version the bootstrap file registers (default: v1)
- OAS_SCAFFOLD_MAX_WORKERS: emission thread pool size (default: executor default)
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from oas_scaffold.errors import ConfigError

ENV_PREFIX = "OAS_SCAFFOLD_"


class GeneratorConfig(BaseModel):
    """Project layout conventions shared by the parsers and the builders."""

    output_dir: Path = Path(".")
    extension: str = "ts"
    api_version: str = "v1"
    framework_module: str = "@eyrie/app"
    models_alias: str = "@/models"
    services_alias: str = "@/services"
    max_workers: int | None = Field(default=None, ge=1)

    @classmethod
    def from_env(cls, **overrides) -> "GeneratorConfig":
        """Build a config from ``OAS_SCAFFOLD_*`` variables; non-None overrides win.

        Raises ConfigError naming each invalid setting.
        """
        values: dict = {}
        for name in ("output_dir", "extension", "api_version", "max_workers"):
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors(include_url=False)
            )
            raise ConfigError(f"invalid configuration ({details})") from e

    @property
    def lib_dir(self) -> Path:
        return self.output_dir / "lib"

    def model_import_path(self, name: str) -> str:
        return f"{self.models_alias}/{name}"

    def service_import_path(self, service_class: str) -> str:
        return f"{self.services_alias}/{service_class}"
