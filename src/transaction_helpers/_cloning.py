"""Copy helpers shared by ``Error.clone`` and ``Result.clone``."""

from __future__ import annotations

import copy
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

_CONTAINERS = (dict, list, set, tuple, frozenset, bytearray)


@runtime_checkable
class Cloneable(Protocol):
    """Duck-typed protocol for objects that know how to copy themselves."""

    def clone(self) -> Any: ...  # noqa: D102


def clone_fault(fault: BaseException | None) -> BaseException | None:
    """Clone *fault* when it supports cloning, otherwise share it."""
    if isinstance(fault, Cloneable):
        return fault.clone()
    return fault


def clone_payload(payload: Any) -> Any:
    """Clone a detail or value payload.

    Cloneable objects clone themselves, pydantic models are deep-copied and
    builtin containers are deep-copied. Anything else is shared by reference.
    """
    if payload is None:
        return None
    if isinstance(payload, Cloneable):
        return payload.clone()
    if isinstance(payload, BaseModel):
        return payload.model_copy(deep=True)
    if isinstance(payload, _CONTAINERS):
        return copy.deepcopy(payload)
    return payload
