import re
from typing import Any


_SNAKE_SEGMENT = re.compile(r"[-_]([a-z0-9])")
_CAMEL_UPPER = re.compile(r"[A-Z]")


def snake_to_camel(name: str) -> str:
    """``completed_value`` -> ``completedValue``"""
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), name)


def camel_to_snake(name: str) -> str:
    """``completedValue`` -> ``completed_value``"""
    return _CAMEL_UPPER.sub(lambda match: f"_{match.group(0).lower()}", name)


def to_camel_case(obj: Any) -> Any:
    """Recursively rename every mapping key to camelCase.

    Lists are walked element by element; scalar values are returned untouched.
    """
    if isinstance(obj, list):
        return [to_camel_case(item) for item in obj]
    if isinstance(obj, dict):
        return {snake_to_camel(key) if isinstance(key, str) else key: to_camel_case(value)
                for key, value in obj.items()}
    return obj


def to_snake_case(obj: Any) -> Any:
    """Recursively rename every mapping key to snake_case."""
    if isinstance(obj, list):
        return [to_snake_case(item) for item in obj]
    if isinstance(obj, dict):
        return {camel_to_snake(key) if isinstance(key, str) else key: to_snake_case(value)
                for key, value in obj.items()}
    return obj
