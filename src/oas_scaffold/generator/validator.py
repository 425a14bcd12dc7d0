"""Validates generated TypeScript sources for structural correctness."""

import re

from oas_scaffold.generator.typescript import check_balanced, scan


def validate_source(source: str, class_name: str | None = None) -> list[str]:
    """Check a generated source file.

    Returns a list of error messages, empty when the source is usable.
    """
    errors = check_balanced(source)
    if class_name and not re.search(rf"\bclass\s+{re.escape(class_name)}\b", scan(source).masked):
        errors.append(f"class {class_name} is not declared")
    return errors
