"""The structured failure record carried by results.

An ``Error`` unifies the ways an operation reports failure: an exception
(the *fault*), a human-readable message, an optional classification code and
an optional structured detail payload.
"""

from __future__ import annotations

from typing import Any, Self

from transaction_helpers._cloning import clone_fault, clone_payload
from transaction_helpers.exceptions import EmptyResultError, ResultError


def fault_message(fault: BaseException) -> str:
    """Return the message of *fault*, falling back to its class name."""
    return str(fault) or type(fault).__name__


class Error:
    """Failure record holding a fault, message, code and detail.

    When only a message is given, a synthetic ``ResultError`` carrying that
    message becomes the fault. When only a fault is given, the message is
    derived from it on read. An explicit message always wins over the
    fault's own message, even when it is the empty string.

    Example:
        error = Error(message="Not found").with_code("not_found")
        assert str(error.fault) == "Not found"
    """

    __slots__ = ("_code", "_detail", "_fault", "_message", "_message_fault")

    def __init__(
        self,
        fault: BaseException | None = None,
        message: str | None = None,
        *,
        code: str | None = None,
        detail: Any = None,
    ) -> None:
        self._fault = fault
        self._message: str | None = None
        self._message_fault: ResultError | None = None
        self._code = code
        self._detail = detail
        if message is not None:
            self.with_message(message)

    # --- Explicit constructors ---

    @classmethod
    def from_fault(
        cls, fault: BaseException, *, code: str | None = None, detail: Any = None
    ) -> Error:
        """Wrap an exception."""
        return cls(fault, code=code, detail=detail)

    @classmethod
    def from_message(
        cls, message: str, *, code: str | None = None, detail: Any = None
    ) -> Error:
        """Build an error from a message alone."""
        return cls(message=message, code=code, detail=detail)

    # --- Accessors ---

    @property
    def fault(self) -> BaseException | None:
        """The wrapped exception, or the synthetic one built from the message."""
        if self._fault is not None:
            return self._fault
        return self._message_fault

    @property
    def message(self) -> str | None:
        if self._message is not None:
            return self._message
        if self._fault is not None:
            return fault_message(self._fault)
        return None

    @property
    def code(self) -> str | None:
        return self._code

    @property
    def detail(self) -> Any:
        return self._detail

    @property
    def is_valid(self) -> bool:
        """True when a non-empty message can be derived from this error."""
        return bool(self.message)

    # --- Builders ---

    def with_fault(self, fault: BaseException | None) -> Self:
        self._fault = fault
        return self

    def with_message(self, message: str | None) -> Self:
        self._message = message
        self._message_fault = (
            None
            if message is None
            else ResultError(message, code=self._code, detail=self._detail)
        )
        return self

    def with_code(self, code: str | None) -> Self:
        self._code = code
        if self._message_fault is not None:
            self._message_fault.code = code
        return self

    def with_detail(self, detail: Any) -> Self:
        self._detail = detail
        if self._message_fault is not None:
            self._message_fault.detail = detail
        return self

    def clone(self) -> Error:
        """Return a copy; the fault and detail are cloned when they support it."""
        return Error(
            clone_fault(self._fault),
            self._message,
            code=self._code,
            detail=clone_payload(self._detail),
        )

    def to_exception(self) -> BaseException:
        """Return the exception ``throw_if_error`` raises for this record."""
        fault = self.fault
        if fault is not None:
            return fault
        return ResultError(self.message or "", code=self._code, detail=self._detail)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Error):
            return NotImplemented
        return (
            self.message == other.message
            and self.code == other.code
            and self.detail == other.detail
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [f"message={self.message!r}"]
        if self._code is not None:
            parts.append(f"code={self._code!r}")
        if self._fault is not None:
            parts.append(f"fault={type(self._fault).__name__}")
        return f"Error({', '.join(parts)})"


def empty_result_error() -> Error:
    """Build the synthetic error reported by a value result with nothing in it."""
    fault = EmptyResultError()
    return Error(fault, code=fault.code)


def is_empty_result(error: Error | None) -> bool:
    """Return True when *error* is the synthetic empty-result error."""
    return error is not None and isinstance(error.fault, EmptyResultError)
