"""Wire format for results.

Pydantic models define the payload shape; this module converts between them
and live ``Result`` objects. Faults never cross the wire: an ``Error`` is
reduced to its message, code and detail, and a message-only ``Error`` is
rebuilt on load.

Payload shape::

    {"errors": [{"message": "...", "code": "...", "detail": ...}], "value": ...}

``value`` appears only for ``ValueResult`` payloads. Nested results inside a
value are dumped recursively.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar, cast, get_args, get_origin

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from transaction_helpers.config import Config, get_config
from transaction_helpers.error import Error
from transaction_helpers.exceptions import SerializationError
from transaction_helpers.result import Result, ValueResult

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)

R = TypeVar("R", bound=Result)

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


# --- Schema ---


class ErrorPayload(BaseModel):
    """Serialized ``Error``; the fault is reduced to its message."""

    model_config = {"extra": "ignore"}

    message: str | None = None
    code: str | None = None
    detail: Any = None


class ResultPayload(BaseModel):
    """Serialized ``Result``."""

    model_config = {"extra": "ignore"}

    errors: list[ErrorPayload] = Field(default_factory=list)


class ValueResultPayload(ResultPayload):
    """Serialized ``ValueResult``."""

    value: Any = None


# --- Dump ---


def dump_result(result: Result, *, config: Config | None = None) -> dict[str, Any]:
    """Convert *result* to a JSON-compatible dict."""
    cfg = config or get_config()
    errors = [_dump_error(error, cfg) for error in result.errors]
    payload: dict[str, Any] = {"errors": errors}
    if isinstance(result, ValueResult):
        value = _dump_value(result.value, cfg)
        if value is not None or not cfg.exclude_none:
            payload["value"] = value
    return payload


def dump_result_json(result: Result, *, config: Config | None = None) -> str:
    """Convert *result* to a JSON string."""
    cfg = config or get_config()
    return json.dumps(dump_result(result, config=cfg), indent=cfg.json_indent)


def _dump_error(error: Error, cfg: Config) -> dict[str, Any]:
    payload = ErrorPayload(
        message=error.message,
        code=error.code,
        detail=_dump_value(error.detail, cfg),
    )
    return payload.model_dump(mode="json", exclude_none=cfg.exclude_none)


def _dump_value(value: Any, cfg: Config) -> Any:
    if value is None:
        return None
    if isinstance(value, Result):
        return dump_result(value, config=cfg)
    if isinstance(value, dict):
        return {_dump_key(k): _dump_value(v, cfg) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_dump_value(v, cfg) for v in value]
    try:
        return _ANY_ADAPTER.dump_python(value, mode="json")
    except ValueError as exc:  # PydanticSerializationError
        raise SerializationError(
            f"Cannot serialize value of type {type(value).__name__}",
            hint="Use JSON-compatible values, dataclasses or pydantic models.",
        ) from exc


def _dump_key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


# --- Load ---


def load_result(
    data: Any,
    *,
    result_type: type[R] = Result,  # type: ignore[assignment]
    value_type: Any = None,
) -> R:
    """Rebuild a result of *result_type* from a dumped payload.

    For value results, *value_type* (when given) validates the raw value; a
    ``ValueResult[X]`` or ``Result`` value type rebuilds nested results.
    """
    is_value_result = issubclass(result_type, ValueResult)
    schema = ValueResultPayload if is_value_result else ResultPayload
    try:
        payload = schema.model_validate(data)
    except ValidationError as exc:
        raise SerializationError(
            f"Invalid {result_type.__name__} payload: {exc.error_count()} validation error(s)",
            hint="Expected an object with an 'errors' list.",
        ) from exc

    errors = _load_errors(payload.errors)
    if is_value_result:
        value = cast("ValueResultPayload", payload).value
        result = result_type(value_type=value_type)  # type: ignore[call-arg]
        result.assign_value(_load_value(value, value_type))  # type: ignore[attr-defined]
    else:
        result = result_type()
    result._replace_errors(errors)
    return result


def load_result_json(
    text: str | bytes,
    *,
    result_type: type[R] = Result,  # type: ignore[assignment]
    value_type: Any = None,
) -> R:
    """Rebuild a result from a JSON document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(
            f"Result payload is not valid JSON: {exc.msg}",
            hint="Pass the output of Result.to_json().",
        ) from exc
    return load_result(data, result_type=result_type, value_type=value_type)


def _load_errors(payloads: Iterable[ErrorPayload]) -> list[Error]:
    errors: list[Error] = []
    for payload in payloads:
        error = Error(message=payload.message, code=payload.code, detail=payload.detail)
        if not error.is_valid:
            log.debug("Skipping serialized error without message: %r", payload)
            continue
        errors.append(error)
    return errors


def _load_value(raw: Any, value_type: Any) -> Any:
    if raw is None or value_type is None:
        return raw
    origin = get_origin(value_type) or value_type
    if isinstance(origin, type) and issubclass(origin, Result):
        if issubclass(origin, ValueResult):
            args = get_args(value_type)
            inner = args[0] if args else None
            return load_result(raw, result_type=origin, value_type=inner)
        return load_result(raw, result_type=origin)
    try:
        return TypeAdapter(value_type).validate_python(raw)
    except ValidationError as exc:
        raise SerializationError(
            f"Value does not match {value_type!r}: {exc.error_count()} validation error(s)",
            hint="Check the value_type passed to from_dict()/from_json().",
        ) from exc
