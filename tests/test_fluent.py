"""Fluent free-function tests: same rules as the methods, any result subclass."""

from __future__ import annotations

import pytest

from tests.helpers import messages
from transaction_helpers import Error, Result, ValueResult, with_error, with_result, with_value
from transaction_helpers.fluent import ErrorSink, ValueSink

pytestmark = pytest.mark.unit


class AuditedResult(Result):
    """Result subclass relying entirely on inherited fluent behavior."""


class PagedResult(ValueResult[list[int]]):
    """Value result subclass with a bound value type."""


def test_free_functions_return_their_argument() -> None:
    result = AuditedResult()

    assert with_error(result, "x") is result
    assert with_result(result, Result()) is result


def test_free_functions_chain_across_subclasses() -> None:
    audited = with_error(AuditedResult(), ValueError("first"), "second")
    page = with_result(with_value(PagedResult(), [1, 2, 3]), audited)

    assert isinstance(page, PagedResult)
    assert page.value == [1, 2, 3]
    assert messages(page) == ["first", "second"]


def test_free_function_filter_matches_method_filter() -> None:
    items = [None, "", Error(), "kept", RuntimeError("also kept")]

    via_function = with_error(Result(), *items)
    via_method = Result().with_error(*items)

    assert messages(via_function) == messages(via_method) == ["kept", "also kept"]


def test_with_value_requires_value_slot() -> None:
    with pytest.raises(TypeError):
        with_value(Result(), 1)  # type: ignore[type-var]


def test_with_result_unwraps_for_value_sinks() -> None:
    nested = ValueResult[ValueResult[list[int]]]().with_value(
        ValueResult[list[int]]().with_value([4])
    )

    page = with_result(PagedResult(), nested)

    assert page.value == [4]


def test_capability_protocols() -> None:
    assert isinstance(Result(), ErrorSink)
    assert not isinstance(Result(), ValueSink)
    assert isinstance(ValueResult(), ErrorSink)
    assert isinstance(ValueResult(), ValueSink)


class AuditLog:
    """Plain class implementing the error capability, no Result base."""

    def __init__(self) -> None:
        self.entries: list[Error] = []

    @property
    def errors(self) -> tuple[Error, ...]:
        return tuple(self.entries)

    def append_error(self, error: Error) -> None:
        self.entries.append(error)


def test_custom_error_sink_chains_with_free_functions() -> None:
    log = with_error(AuditLog(), "first", None, "")
    with_result(log, Result().with_error("second"))

    assert isinstance(log, ErrorSink)
    assert [error.message for error in log.errors] == ["first", "second"]
    assert messages(Result().with_result(log)) == ["first", "second"]


def test_detail_is_copied_per_wrapped_error() -> None:
    detail = {"field": "email"}
    result = with_error(Result(), "taken", ValueError("invalid"), detail=detail)

    first, second = result.errors
    first.detail["field"] = "name"

    assert second.detail == {"field": "email"}
    assert detail == {"field": "email"}
