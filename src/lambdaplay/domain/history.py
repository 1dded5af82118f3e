"""Reduction steps and the append-only reduction history."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Self

from pydantic import BaseModel, Field


class ReductionStep(BaseModel):
    """One committed reduction: ``from_`` became ``to``.

    Serialized with the keys ``from`` and ``to``.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    from_: str = Field(alias="from")
    to: str

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class History(BaseModel):
    """Ordered record of reduction steps, oldest first.

    Append-only except for :meth:`clear`, which empties it.
    """

    model_config = {"frozen": True}

    steps: tuple[ReductionStep, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def iter_steps(self) -> Iterator[ReductionStep]:
        return iter(self.steps)

    def append(self, step: ReductionStep) -> Self:
        return self.model_copy(update={"steps": (*self.steps, step)})

    def clear(self) -> Self:
        return self.model_copy(update={"steps": ()})

    def to_list(self) -> list[dict[str, Any]]:
        return [step.to_dict() for step in self.steps]
