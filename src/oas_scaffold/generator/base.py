"""Shared plumbing for the source builders."""

import json
import logging
import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.errors import EmissionError
from oas_scaffold.generator.validator import validate_source

logger = logging.getLogger(__name__)

INDENT = "  "


class BuildOutcome(str, Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    RECONCILED = "reconciled"  # the file existed and was updated in place
    VALIDATION_FAILED = "validation_failed"


class BuildResult(BaseModel):
    path: Path
    outcome: BuildOutcome
    errors: list[str] = []

    @property
    def ok(self) -> bool:
        return self.outcome is not BuildOutcome.VALIDATION_FAILED


class SourceBuilder:
    """Renders one kind of IR node into a TypeScript file under ``lib/``."""

    subdir = ""

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config or GeneratorConfig()

    def target(self, file_name: str) -> Path:
        return self.config.lib_dir / self.subdir / file_name if self.subdir else self.config.lib_dir / file_name

    def module(self, import_path: str) -> str:
        return f"{import_path}.{self.config.extension}"

    def _render_import(self, names: list[str], module: str, type_only: bool = False) -> str:
        keyword = "import type" if type_only else "import"
        return f'{keyword} {{ {", ".join(names)} }} from "{module}";'

    def _write(self, path: Path, source: str, class_name: str | None, outcome: BuildOutcome) -> BuildResult:
        """Check ``source`` and write it to ``path``; nothing is written when the check fails."""
        errors = validate_source(source, class_name)
        if errors:
            logger.error("Generated %s failed validation: %s", path, "; ".join(errors))
            return BuildResult(path=path, outcome=BuildOutcome.VALIDATION_FAILED, errors=errors)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source, encoding="utf-8")
        except OSError as e:
            raise EmissionError(str(path), f"cannot write file ({e.strerror})") from e
        logger.info("%s %s", outcome.value.capitalize(), path)
        return BuildResult(path=path, outcome=outcome)

    def _overwrite(self, path: Path, source: str, class_name: str | None) -> BuildResult:
        outcome = BuildOutcome.OVERWRITTEN if path.exists() else BuildOutcome.CREATED
        return self._write(path, source, class_name, outcome)


def indent(text: str, level: int = 1) -> str:
    prefix = INDENT * level
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


def method_parameters(context_type: str, body_type: str | None) -> str:
    params = [f"context: {context_type}", "params: unknown"]
    if body_type:
        params.append(f"body: {body_type}")
    return ", ".join(params)


def call_arguments(body_type: str | None) -> str:
    return "context, params, body" if body_type else "context, params"


def register_method(dependencies: list[str]) -> str:
    deps = ", ".join(f"{{ class: {name} }}" for name in dependencies)
    return (
        "register(): InjectableRegistration {\n"
        f"{INDENT}return {{ dependencies: [{deps}] }};\n"
        "}"
    )


def doc_comment(text: str) -> str:
    text = " ".join(text.split()).replace("*/", "*\\/")
    return f"/** {text} */"


def property_key(name: str) -> str:
    """Quote property names that are not plain identifiers."""
    if re.fullmatch(r"[A-Za-z_$][\w$]*", name):
        return name
    return json.dumps(name)
