"""Fluent builders shared by every result type.

These free functions hold the append and merge rules. ``Result`` and
``ValueResult`` methods delegate here, and any class implementing the
``ErrorSink``/``ValueSink`` capabilities can be chained with them directly::

    from transaction_helpers import ValueResult
    from transaction_helpers.fluent import with_error, with_result, with_value

    loaded = with_value(ValueResult[int](), 42)
    combined = with_result(ValueResult[int](), loaded)
    with_error(combined, "quota exceeded", code="quota")
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any, Protocol, TypeVar, runtime_checkable

from transaction_helpers._cloning import clone_payload
from transaction_helpers.error import Error

log = logging.getLogger(__name__)

ErrorLike = Error | BaseException | str | None


@runtime_checkable
class ErrorSink(Protocol):
    """Capability: exposes stored errors and accepts new ones.

    ``append_error`` stores unconditionally; the fluent functions apply the
    validity filter before calling it.
    """

    @property
    def errors(self) -> Sequence[Error]: ...  # noqa: D102

    def append_error(self, error: Error) -> None: ...  # noqa: D102


@runtime_checkable
class ValueSink(Protocol):
    """Capability: holds a typed value and can unwrap nested value layers."""

    @property
    def value_type(self) -> Any: ...  # noqa: D102

    def assign_value(self, value: Any) -> None: ...  # noqa: D102

    def try_extract_value(self, target_type: Any) -> tuple[bool, Any]: ...  # noqa: D102


S = TypeVar("S", bound=ErrorSink)


def _coerce(item: ErrorLike, code: str | None, detail: Any) -> Error | None:
    if item is None or isinstance(item, Error):
        return item
    if isinstance(item, BaseException):
        return Error(item, code=code, detail=clone_payload(detail))
    if isinstance(item, str):
        if not item:
            return None
        return Error(message=item, code=code, detail=clone_payload(detail))
    raise TypeError(
        f"with_error() expects Error, BaseException, str or None, got {type(item).__name__}"
    )


def with_error(
    result: S,
    *errors: ErrorLike,
    code: str | None = None,
    detail: Any = None,
) -> S:
    """Append errors to *result* in call order and return it.

    Exceptions and message strings are wrapped into ``Error`` records, taking
    *code* and their own copy of *detail*. ``None`` and errors without a
    derivable message are dropped silently.
    """
    for item in errors:
        error = _coerce(item, code, detail)
        if error is None or not error.is_valid:
            log.debug("Dropping invalid error %r", item)
            continue
        result.append_error(error)
    return result


def with_value(result: S, value: Any) -> S:
    """Set the value of *result*, leaving its errors untouched."""
    if not isinstance(result, ValueSink):
        raise TypeError(f"{type(result).__name__} has no value slot")
    result.assign_value(value)
    return result


def with_result(result: S, *others: ErrorSink | None) -> S:
    """Merge the errors, and where possible the value, of *others* into *result*.

    Every stored error of each other result is appended in order. When both
    are value results, the first layer of the other's (possibly nested) value
    that fits *result*'s declared value type replaces *result*'s value; if no
    layer fits, *result*'s value is left as it was.
    """
    for other in others:
        if other is None:
            continue
        # Snapshot first so merging a result into itself terminates.
        with_error(result, *tuple(other.errors))
        if isinstance(result, ValueSink) and isinstance(other, ValueSink):
            found, value = other.try_extract_value(result.value_type)
            if found:
                result.assign_value(value)
            else:
                log.debug(
                    "No value assignable to %r in %r; keeping current value",
                    result.value_type,
                    other,
                )
    return result
