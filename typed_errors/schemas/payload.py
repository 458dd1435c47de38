"""Pydantic schemas for serialized typed errors."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TraceEntrySchema(BaseModel):
    """One call site in serialized form."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    file: str = Field(default="", description="Base name of the source file.")
    function: str = Field(default="", description="Qualified function name.")
    line: int = Field(default=0, description="Line number; 0 when unknown.")


class ErrorPayload(BaseModel):
    """Structured form of an error record for logging pipelines.

    The wrapped exception object is never included; only its rendered text
    travels as ``cause``.
    """

    model_config = ConfigDict(from_attributes=True)

    cause: str = Field(default="", description="Rendered text of the wrapped error.")
    message: str = Field(default="", description="User-facing description.")
    stack_message: str = Field(
        default="", description="Context message attached while propagating."
    )
    code: int = Field(default=0, description="Resolved HTTP-style status code.")
    trace: TraceEntrySchema = Field(
        default_factory=TraceEntrySchema,
        description="Call site where the error was constructed.",
    )
    stack: List[TraceEntrySchema] = Field(
        default_factory=list,
        description="Every trace entry appended, in order.",
    )
