"""Key-case conversion between the upstream camelCase API and snake_case"""

import re
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def snake_keys(value: Any) -> Any:
    """Recursively convert dict keys to snake_case"""
    if isinstance(value, dict):
        return {camel_to_snake(k) if isinstance(k, str) else k: snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [snake_keys(v) for v in value]
    return value


def camel_keys(value: Any, drop_none: bool = True) -> Any:
    """Recursively convert dict keys to camelCase, dropping unset (None) values"""
    if isinstance(value, dict):
        return {
            snake_to_camel(k) if isinstance(k, str) else k: camel_keys(v, drop_none)
            for k, v in value.items()
            if not (drop_none and v is None)
        }
    if isinstance(value, list):
        return [camel_keys(v, drop_none) for v in value]
    return value
