"""Pydantic models for polled batches and handling results."""

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field, model_validator

DecodedRecord = dict[str, Any]


class Batch(BaseModel):
    """Messages returned by one poll.

    ``bodies`` and ``receipt_handles`` are index-aligned: the receipt handle at
    position i acknowledges the body at position i.
    """

    bodies: list[str] = Field(default_factory=list)
    receipt_handles: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_aligned(self) -> "Batch":
        if len(self.bodies) != len(self.receipt_handles):
            raise ValueError(
                f"{len(self.bodies)} bodies but {len(self.receipt_handles)} receipt handles"
            )
        return self

    def __len__(self) -> int:
        return len(self.bodies)

    @property
    def is_empty(self) -> bool:
        """True when the poll returned no messages."""
        return not self.bodies

    def messages(self) -> Iterator[tuple[str, str]]:
        """Yield (body, receipt_handle) pairs in poll order."""
        yield from zip(self.bodies, self.receipt_handles)


class HandleResult(BaseModel):
    """Outcome of handling one batch."""

    records: int = 0
    receipt_handles: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
