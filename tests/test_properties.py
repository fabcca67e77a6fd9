"""Property tests for the error-accumulation and serialization invariants."""

from __future__ import annotations

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
import pytest

from transaction_helpers import Error, Result, ValueResult

pytestmark = pytest.mark.unit

# Autouse env-isolation fixtures are function scoped; they hold no per-example state.
_SETTINGS = settings(
    max_examples=25,
    deadline=None,
    derandomize=True,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

_messages = st.text(min_size=1, max_size=20)
_codes = st.none() | st.sampled_from(["E1", "not_found", "quota"])
_json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=10),
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(st.text(max_size=5), children, max_size=3),
    max_leaves=8,
)
_errors = st.builds(
    lambda message, code, detail: Error(message=message, code=code, detail=detail),
    _messages,
    _codes,
    _json_values,
)


def _result(errors: list[Error]) -> Result:
    return Result().with_error(*errors)


@given(message=_messages)
@_SETTINGS
def test_message_only_error_keeps_fault_consistent(message: str) -> None:
    error = Error(message=message)

    assert error.message == message
    assert str(error.fault) == message


@given(a=st.lists(_errors, max_size=4), b=st.lists(_errors, max_size=4))
@_SETTINGS
def test_with_result_is_associative(a: list[Error], b: list[Error]) -> None:
    """Merging A then B equals merging one result holding A's then B's errors."""
    sequential = Result().with_result(_result(a), _result(b))
    combined = Result().with_result(_result(a).with_result(_result(b)))

    assert list(sequential.errors) == list(combined.errors) == a + b


@given(errors=st.lists(_errors, max_size=4))
@_SETTINGS
def test_invalid_errors_never_change_state(errors: list[Error]) -> None:
    result = _result(errors)
    before = result.errors

    result.with_error(None, "", Error())

    assert result.errors == before


@given(errors=st.lists(_errors, max_size=4), value=_json_values)
@_SETTINGS
def test_round_trip_is_stable(errors: list[Error], value: object) -> None:
    original = ValueResult(value).with_error(*errors)
    payload = original.to_dict()

    restored = ValueResult.from_dict(payload)

    assert restored.to_dict() == payload
    assert [e.message for e in restored.errors] == [e.message for e in errors]


@given(errors=st.lists(_errors, min_size=1, max_size=4))
@_SETTINGS
def test_clone_is_independent(errors: list[Error]) -> None:
    original = _result(errors)
    cloned = original.clone()

    for before, after in zip(original.errors, cloned.errors, strict=True):
        assert before is not after
        assert (before.message, before.code) == (after.message, after.code)

    cloned.with_error("extra")
    assert len(original.errors) == len(errors)
