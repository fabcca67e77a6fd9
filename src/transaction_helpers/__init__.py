"""transaction-helpers: composable operation outcomes.

Public API:
    - Result: Error accumulator for operations without a value
    - ValueResult: Result with a typed value slot
    - Error: Structured failure record (fault, message, code, detail)
    - with_error / with_value / with_result: Fluent builders for any result
    - Config: Serialization and message configuration
"""

from __future__ import annotations

import logging

from transaction_helpers.config import Config, get_config, reset_config, set_config
from transaction_helpers.error import Error, empty_result_error, is_empty_result
from transaction_helpers.exceptions import (
    ConfigurationError,
    EmptyResultError,
    ResultError,
    SerializationError,
    TransactionHelpersError,
)
from transaction_helpers.fluent import with_error, with_result, with_value
from transaction_helpers.result import Result, ValueResult

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("transaction-helpers")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("transaction_helpers").addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "ConfigurationError",
    "EmptyResultError",
    "Error",
    "Result",
    "ResultError",
    "SerializationError",
    "TransactionHelpersError",
    "ValueResult",
    "empty_result_error",
    "get_config",
    "is_empty_result",
    "reset_config",
    "set_config",
    "with_error",
    "with_result",
    "with_value",
]
