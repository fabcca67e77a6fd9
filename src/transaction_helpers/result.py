"""Result types: error accumulation with an optional typed value.

``Result`` collects ``Error`` records for an operation and reports success
while none have been recorded. ``ValueResult[T]`` adds a value slot; it is
only successful when it holds a value and no errors.

Errors are a monotonic accumulator: once appended they are never removed, so
a failed result can never turn back into a successful one. Nothing here
raises during composition; exceptions surface only through the explicit
``throw_if_*`` and ``get_value_or_throw`` calls.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import types
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Literal,
    Self,
    TypeVar,
    Union,
    cast,
    get_args,
    get_origin,
)

from transaction_helpers import fluent
from transaction_helpers._cloning import clone_payload
from transaction_helpers.error import Error, empty_result_error
from transaction_helpers.exceptions import EmptyResultError

if TYPE_CHECKING:
    from transaction_helpers.config import Config
    from transaction_helpers.fluent import ErrorLike, ErrorSink

log = logging.getLogger(__name__)


class Result:
    """Outcome of an operation that produces no value.

    Example:
        step = Result().with_error(ValueError("bad input"))
        outcome = Result().with_result(step)
        assert outcome.is_error
        outcome.throw_if_error()  # raises the original ValueError
    """

    def __init__(self, *, errors: Iterable[ErrorLike] = ()) -> None:
        self._errors: list[Error] = []
        fluent.with_error(self, *errors)

    # --- Explicit constructors ---

    @classmethod
    def from_error(cls, error: Error) -> Self:
        """Create a result failed with *error*."""
        return cls().with_error(error)

    @classmethod
    def from_fault(cls, fault: BaseException) -> Self:
        """Create a result failed with the exception *fault*."""
        return cls().with_error(fault)

    # --- State ---

    @property
    def errors(self) -> tuple[Error, ...]:
        """Stored errors in insertion order."""
        return tuple(self._errors)

    @property
    def error(self) -> Error | None:
        """The last stored error, or None."""
        return self._errors[-1] if self._errors else None

    @property
    def is_success(self) -> bool:
        return not self._errors

    @property
    def is_error(self) -> bool:
        return not self.is_success

    def throw_if_error(self) -> None:
        """Raise the last error's fault, or a ``ResultError`` built from it."""
        error = self.error
        if error is not None:
            raise error.to_exception()

    # --- Fluent builders ---

    def with_error(
        self,
        *errors: ErrorLike,
        code: str | None = None,
        detail: Any = None,
    ) -> Self:
        """Append errors, exceptions or messages; invalid ones are dropped."""
        return fluent.with_error(self, *errors, code=code, detail=detail)

    def with_result(self, *others: ErrorSink | None) -> Self:
        """Merge every error of *others* into this result, in order."""
        return fluent.with_result(self, *others)

    def append_error(self, error: Error) -> None:
        """Store *error* as is; prefer ``with_error``, which filters first."""
        self._errors.append(error)

    def _replace_errors(self, errors: Iterable[Error]) -> None:
        self._errors = list(errors)

    # --- Copying and serialization ---

    def _empty_like(self) -> Self:
        return type(self)()

    def clone(self) -> Self:
        """Return an independent copy with every error cloned."""
        cloned = self._empty_like()
        cloned._errors = [error.clone() for error in self._errors]
        return cloned

    def to_dict(self, *, config: Config | None = None) -> dict[str, Any]:
        """Dump to a JSON-compatible dict; faults are not included."""
        from transaction_helpers.serialization import dump_result

        return dump_result(self, config=config)

    def to_json(self, *, config: Config | None = None) -> str:
        from transaction_helpers.serialization import dump_result_json

        return dump_result_json(self, config=config)

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        """Rebuild a result from ``to_dict`` output."""
        from transaction_helpers.serialization import load_result

        return load_result(data, result_type=cls)

    @classmethod
    def from_json(cls, text: str | bytes) -> Self:
        from transaction_helpers.serialization import load_result_json

        return load_result_json(text, result_type=cls)

    def __repr__(self) -> str:
        if self.is_success:
            return f"{type(self).__name__}(success)"
        messages = [error.message for error in self._errors]
        return f"{type(self).__name__}(errors={messages!r})"


class ValueResult[T](Result):
    """Outcome of an operation that produces a value of type ``T``.

    The declared value type drives merging: ``with_result`` unwraps nested
    value results until it finds a value of that type. Declare it by
    subscripting (``ValueResult[str]()``), subclassing
    (``class UserResult(ValueResult[User])``) or with ``value_type=``.

    Example:
        inner = ValueResult[str]().with_value("test")
        nested = ValueResult[ValueResult[str]]().with_value(inner)
        flat = ValueResult[str]().with_result(nested)
        assert flat.value == "test"
    """

    def __init__(
        self,
        value: T | None = None,
        *,
        errors: Iterable[ErrorLike] = (),
        value_type: Any = None,
    ) -> None:
        super().__init__(errors=errors)
        self._value = value
        self._value_type = value_type

    @classmethod
    def from_value(cls, value: T, *, value_type: Any = None) -> Self:
        """Create a result holding *value*."""
        return cls(value, value_type=value_type)

    # --- State ---

    @property
    def value(self) -> T | None:
        return self._value

    @value.setter
    def value(self, value: T | None) -> None:
        self._value = value

    @property
    def value_type(self) -> Any:
        """The declared ``T``, or None when it was never declared."""
        if self._value_type is not None:
            return self._value_type
        # Set by typing after ``ValueResult[X]()`` returns.
        alias = getattr(self, "__orig_class__", None)
        if alias is not None:
            return _first_type_arg(alias)
        return _declared_value_type(type(self))

    @property
    def has_value(self) -> bool:
        return self._value is not None

    @property
    def has_no_value(self) -> bool:
        return self._value is None

    @property
    def error(self) -> Error | None:
        """The last stored error, or the empty-result error when there is no value."""
        if self._errors:
            return self._errors[-1]
        if self._value is None:
            return empty_result_error()
        return None

    @property
    def is_success(self) -> bool:
        return not self._errors and self._value is not None

    def throw_if_error_or_has_no_value(self) -> None:
        """Raise on stored errors, else raise ``EmptyResultError`` when empty."""
        if self._errors:
            raise self._errors[-1].to_exception()
        if self._value is None:
            raise EmptyResultError()

    def get_value_or_throw(self) -> T:
        self.throw_if_error_or_has_no_value()
        return cast("T", self._value)

    # --- Fluent builders ---

    def with_value(self, value: T | None) -> Self:
        """Set the value; stored errors are kept."""
        return fluent.with_value(self, value)

    def assign_value(self, value: Any) -> None:
        self._value = value

    def try_extract_value(self, target_type: Any) -> tuple[bool, Any]:
        """Find the first value, walking nested value results, that fits *target_type*.

        Returns ``(True, value)`` on a match. A missing value at any layer, or
        a non-result value that does not fit, ends the walk with
        ``(False, None)``.
        """
        current: ValueResult[Any] = self
        while True:
            value = current._value
            if value is None:
                return False, None
            if _is_assignable(value, target_type):
                return True, value
            if not isinstance(value, ValueResult):
                return False, None
            current = value

    # --- Copying ---

    def _empty_like(self) -> Self:
        return type(self)(value_type=self.value_type)

    def clone(self) -> Self:
        """Return an independent copy; the value is cloned when it supports it."""
        cloned = super().clone()
        cloned._value = clone_payload(self._value)
        return cloned

    @classmethod
    def from_dict(cls, data: Any, value_type: Any = None) -> Self:
        """Rebuild a value result; *value_type* validates and types the value."""
        from transaction_helpers.serialization import load_result

        return load_result(data, result_type=cls, value_type=value_type)

    @classmethod
    def from_json(cls, text: str | bytes, value_type: Any = None) -> Self:
        from transaction_helpers.serialization import load_result_json

        return load_result_json(text, result_type=cls, value_type=value_type)

    def __repr__(self) -> str:
        name = type(self).__name__
        if self._errors:
            messages = [error.message for error in self._errors]
            return f"{name}(value={self._value!r}, errors={messages!r})"
        return f"{name}(value={self._value!r})"


def _first_type_arg(alias: Any) -> Any:
    args = get_args(alias)
    if not args or isinstance(args[0], TypeVar):
        return None
    return args[0]


def _declared_value_type(tp: Any) -> Any:
    """``T`` of a ``ValueResult[T]`` alias or a subclass bound through its base."""
    if get_args(tp):
        return _first_type_arg(tp)
    for base in getattr(tp, "__orig_bases__", ()):
        origin = get_origin(base)
        if isinstance(origin, type) and issubclass(origin, ValueResult):
            return _first_type_arg(base)
    return None


def _is_open(target: Any) -> bool:
    return target is None or target is Any or target is object or isinstance(target, TypeVar)


def _is_assignable(value: Any, target: Any) -> bool:
    if _is_open(target):
        return True
    origin = get_origin(target)
    if origin is Annotated:
        return _is_assignable(value, get_args(target)[0])
    if origin is Union or origin is types.UnionType:
        return any(_is_assignable(value, arg) for arg in get_args(target))
    if origin is Literal:
        return value in get_args(target)
    check = origin if origin is not None else target
    if not isinstance(check, type):
        log.debug("Cannot check assignability against %r", target)
        return False
    if not isinstance(value, check):
        return False
    if isinstance(value, ValueResult) and issubclass(check, ValueResult):
        # A nested result matches on its declared value type, not its class.
        expected = _declared_value_type(target)
        actual = value.value_type
        if _is_open(expected) or actual is None:
            return True
        return _type_fits(actual, expected)
    return True


def _type_fits(actual: Any, expected: Any) -> bool:
    """Whether a declared type *actual* can stand where *expected* is declared."""
    if _is_open(expected) or actual == expected:
        return True
    if get_origin(actual) is Annotated:
        return _type_fits(get_args(actual)[0], expected)
    expected_origin = get_origin(expected)
    if expected_origin is Annotated:
        return _type_fits(actual, get_args(expected)[0])
    if expected_origin is Union or expected_origin is types.UnionType:
        return any(_type_fits(actual, arg) for arg in get_args(expected))
    actual_class = get_origin(actual) or actual
    expected_class = expected_origin or expected
    if not (isinstance(actual_class, type) and isinstance(expected_class, type)):
        return False
    if not issubclass(actual_class, expected_class):
        return False
    if issubclass(expected_class, ValueResult):
        inner_expected = _declared_value_type(expected)
        inner_actual = _declared_value_type(actual)
        if _is_open(inner_expected) or inner_actual is None:
            return True
        return _type_fits(inner_actual, inner_expected)
    return True
