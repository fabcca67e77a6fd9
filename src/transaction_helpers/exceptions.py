"""Exception hierarchy for transaction-helpers."""

from __future__ import annotations

from typing import Any

EMPTY_RESULT_CODE = "empty_result"


class TransactionHelpersError(Exception):
    """Base exception for all transaction-helpers errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ResultError(TransactionHelpersError):
    """A failure raised from an accumulated ``Error`` that had no fault.

    Also serves as the synthetic fault of message-only errors, so the
    message, code and detail of the originating record travel with it.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: Any = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code = code
        self.detail = detail


class EmptyResultError(ResultError):
    """A value result has neither a value nor an error."""

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            from transaction_helpers.config import get_config

            message = get_config().empty_result_message
        super().__init__(
            message,
            code=EMPTY_RESULT_CODE,
            hint="Attach a value with with_value() or record why it is missing with with_error().",
        )


class SerializationError(TransactionHelpersError):
    """A result payload could not be encoded or decoded."""


class ConfigurationError(TransactionHelpersError):
    """Configuration validation or resolution failed."""
