"""Trace entry value type.

A trace entry identifies one call site in an error's propagation history.
Entries are immutable once created so they can be shared freely between
threads and copied stacks.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TraceEntry:
    """A single call site.

    Attributes:
        file: Base name of the source file.
        function: Qualified name of the function executing at that site.
        line: Line number; 0 when unknown.
    """

    file: str = ""
    function: str = ""
    line: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line} in {self.function}"


EMPTY_TRACE = TraceEntry()

# Returned by the location provider when no caller frame can be resolved
UNKNOWN_TRACE = TraceEntry(file="unknown", function="unknown", line=0)
