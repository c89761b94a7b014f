"""
Printing and reading function configurations.

A printed function is a JSON-compatible dict:

    {"type": "RegexFind", "config": "b+"}

Reading it back rebuilds an equivalent, freshly-evaluated function.
Witnesses are never printed: they belong to one evaluation only.
"""

from __future__ import annotations

import json
from typing import Any

from .function import Function, ReadError
from .functions import Add, ApplyToAll, Exists, ForAll, Fork, RegexFind

__all__ = ["FUNCTION_TYPES", "ReadError", "dumps", "loads", "print_function", "read_function"]


FUNCTION_TYPES: dict[str, type[Function]] = {
    cls.__name__: cls
    for cls in (Add, ApplyToAll, Exists, ForAll, Fork, RegexFind)
}


def print_function(function: Function) -> dict[str, Any]:
    """Printed form of a function's type and configuration."""
    name = type(function).__name__
    if name not in FUNCTION_TYPES:
        raise ValueError(f"Function type {name} is not serializable")
    return {"type": name, "config": function.print_config()}


def read_function(obj: Any) -> Function:
    """
    Rebuild a function from its printed form.

    Raises:
        ReadError: If the object is not a printed function
    """
    if not isinstance(obj, dict) or "type" not in obj:
        raise ReadError(f"Unexpected object format: {obj!r}")

    cls = FUNCTION_TYPES.get(obj["type"])
    if cls is None:
        raise ReadError(f"Unknown function type: {obj['type']!r}")

    return cls.read_config(obj.get("config"))


def dumps(function: Function) -> str:
    return json.dumps(print_function(function))


def loads(text: str) -> Function:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReadError(f"Invalid JSON: {e}") from e
    return read_function(obj)
