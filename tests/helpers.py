"""Test helpers (small, reusable builders and value types).

Keep this file tiny and purpose-built: it exists so suites share the same
sample payloads instead of redefining them per module.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from transaction_helpers import Result


class Dog(BaseModel):
    name: str
    description: str
    dog_breed: str


@dataclass
class Cat:
    name: str
    description: str
    cat_breed: str


SKIPPY = Dog(name="Skippy", description="Good boy", dog_breed="Golden retriever")
MEGATRON = Cat(name="Megatron", description="Spicy furbaby", cat_breed="Decepticon")


def failed(*messages: str) -> Result:
    """Build a Result holding one message-only error per message, in order."""
    return Result().with_error(*messages)


def messages(result: Result) -> list[str | None]:
    return [error.message for error in result.errors]
