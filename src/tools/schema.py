"""Argument validation against a descriptor's parameter schema."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

import structlog

from src.infra.errors import InvalidArgumentsError
from src.tools.base import Param, ParamType

logger = structlog.get_logger()


def validate_arguments(params: Iterable[Param], arguments: dict[str, Any]) -> dict[str, Any]:
    """Return the validated subset of arguments named by params.

    Raises InvalidArgumentsError naming the first offending field. Fields not
    declared by the schema are dropped. None counts as absent.
    """
    if not isinstance(arguments, dict):
        raise InvalidArgumentsError("<arguments>", "must be an object")
    return _validate_fields(tuple(params), arguments, prefix="")


def _validate_fields(
    params: tuple[Param, ...], arguments: dict[str, Any], *, prefix: str
) -> dict[str, Any]:
    declared = {p.name for p in params}
    unknown = sorted(set(arguments) - declared)
    if unknown:
        logger.debug("arguments_dropped", fields=[prefix + k for k in unknown])

    validated: dict[str, Any] = {}
    for param in params:
        field = prefix + param.name
        value = arguments.get(param.name)
        if value is None:
            if param.required:
                raise InvalidArgumentsError(field, "is required")
            continue
        validated[param.name] = _check_value(param, value, field)
    return validated


def _check_value(param: Param, value: Any, field: str) -> Any:
    match param.type:
        case ParamType.string:
            if not isinstance(value, str):
                raise InvalidArgumentsError(field, f"expected string, got {_type_name(value)}")
            if param.required and not value.strip():
                raise InvalidArgumentsError(field, "must not be empty")
            if param.enum is not None and value not in param.enum:
                raise InvalidArgumentsError(
                    field, f"must be one of {', '.join(param.enum)} (got '{value}')"
                )
            if param.pattern is not None and not re.fullmatch(param.pattern, value):
                raise InvalidArgumentsError(field, f"'{value}' does not match {param.pattern}")
            return value
        case ParamType.integer:
            # bool is an int subclass; JSON true/false is not a number.
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentsError(field, f"expected integer, got {_type_name(value)}")
            if param.minimum is not None and value < param.minimum:
                raise InvalidArgumentsError(field, f"must be >= {param.minimum} (got {value})")
            return value
        case ParamType.boolean:
            if not isinstance(value, bool):
                raise InvalidArgumentsError(field, f"expected boolean, got {_type_name(value)}")
            return value
        case ParamType.array:
            if not isinstance(value, list):
                raise InvalidArgumentsError(field, f"expected array, got {_type_name(value)}")
            if param.items is not None:
                item = Param(name=param.name, type=param.items)
                return [_check_value(item, v, f"{field}[{i}]") for i, v in enumerate(value)]
            return list(value)
        case ParamType.object:
            if not isinstance(value, dict):
                raise InvalidArgumentsError(field, f"expected object, got {_type_name(value)}")
            return _validate_fields(param.properties, value, prefix=f"{field}.")
    raise InvalidArgumentsError(field, f"unsupported parameter type {param.type}")


def _type_name(value: Any) -> str:
    match value:
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list():
            return "array"
        case dict():
            return "object"
    return type(value).__name__
