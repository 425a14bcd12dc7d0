"""Resource naming helpers.

Every name that crosses from the OpenAPI document into the IR, and from the
IR into a generated file, goes through this module so that a class
identifier and the file that declares it always agree on the base token.
"""

import re
from enum import Enum

IRREGULAR_SINGULARS = {
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
    "feet": "foot",
    "teeth": "tooth",
    "movies": "movie",
    "cookies": "cookie",
    "caches": "cache",
    "statuses": "status",
    "buses": "bus",
    "sizes": "size",
}

# Words that already read as singular even though they end in "s"
UNCOUNTABLE = {"news", "series", "species", "status", "data", "metadata", "settings", "analysis"}

_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


class Role(str, Enum):
    """Suffix a generated class carries for its layer."""

    NONE = ""
    SERVICE = "Service"
    CONTROLLER = "Controller"


def split_words(value: str) -> list[str]:
    """Split snake, kebab, camel and Pascal case text into words."""
    value = _ACRONYM_BOUNDARY.sub(r"\1 \2", value)
    value = _WORD_BOUNDARY.sub(r"\1 \2", value)
    return [word for word in _SEPARATORS.split(value) if word]


def _singular_word(word: str) -> str:
    lower = word.lower()
    if lower in IRREGULAR_SINGULARS:
        singular = IRREGULAR_SINGULARS[lower]
        return word[:1] + singular[1:] if word[:1].isupper() else singular
    if lower in UNCOUNTABLE or len(lower) < 3:
        return word
    if lower.endswith("ies"):
        return word[:-3] + ("Y" if word.isupper() else "y")
    if lower.endswith(("sses", "shes", "ches", "xes")):
        return word[:-2]
    if lower.endswith(("ss", "us", "is")):
        return word
    if lower.endswith("s"):
        return word[:-1]
    return word


def singular(value: str) -> str:
    """Singularize the last word of ``value``, leaving separators intact.

    ``pets`` -> ``pet``, ``pet_ids`` -> ``pet_id``, ``categories`` -> ``category``.
    """
    match = re.search(r"([A-Za-z]+)$", value)
    if not match:
        return value
    head = value[: match.start()]
    tail = match.group(1)
    # Only the trailing word of a camel case run is inflected
    words = split_words(tail)
    if len(words) > 1:
        last = words[-1]
        return value[: len(value) - len(last)] + _singular_word(last)
    return head + _singular_word(tail)


def camel_case(value: str) -> str:
    words = split_words(value)
    if not words:
        return ""
    first, *rest = words
    return first.lower() + "".join(word.capitalize() for word in rest)


def pascal_case(value: str) -> str:
    return "".join(word.capitalize() for word in split_words(value))


def resource_name_for_path(path: str) -> str:
    """Derive the grouping key for a path template.

    Only the first segment after the root counts, so ``/pets/{id}/photos``
    groups under ``Pet``.
    """
    segments = path.split("/")
    first = segments[1] if len(segments) > 1 else ""
    return pascal_case(singular(first))


def class_name(name: str, role: Role = Role.NONE) -> str:
    """``("Pet", Role.SERVICE)`` -> ``PetService``."""
    return f"{name}{Role(role).value}"


def file_name(name: str, role: Role = Role.NONE, extension: str = "ts") -> str:
    """``("Pet", Role.SERVICE, "ts")`` -> ``PetService.ts``."""
    return f"{class_name(name, role)}.{extension.lstrip('.')}"
