"""Construction options for typed errors.

Options form a small closed set of frozen values. Each one knows how to fold
itself into a ``RecordFields`` collector, so constructors accept any subset
in any order and only ever call ``apply``. Raw values
(exceptions, strings, trace entries, integers) are coerced into the matching
option; anything else is dropped.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable

from typed_errors.core.trace import TraceEntry
from typed_errors.utils.location import current_location

logger = logging.getLogger(__name__)


@dataclass
class RecordFields:
    """Mutable collector for the values an ErrorRecord is built from."""

    cause: str = ""
    wrapped: BaseException | None = None
    message: str = ""
    trace: TraceEntry | None = None
    stack: list[TraceEntry] = field(default_factory=list)
    code: int = 0


class Option(ABC):
    """A single construction parameter."""

    @abstractmethod
    def apply(self, fields: RecordFields) -> None:
        """Fold this option into the collected fields."""
        raise NotImplementedError


@dataclass(frozen=True)
class CauseOption(Option):
    error: BaseException

    def apply(self, fields: RecordFields) -> None:
        fields.cause = str(self.error)
        fields.wrapped = self.error


@dataclass(frozen=True)
class MessageOption(Option):
    text: str

    def apply(self, fields: RecordFields) -> None:
        fields.message = self.text


@dataclass(frozen=True)
class TraceOption(Option):
    entry: TraceEntry

    def apply(self, fields: RecordFields) -> None:
        # First trace is the origin; later ones only extend the stack
        if fields.trace is None:
            fields.trace = self.entry
        fields.stack.append(self.entry)


@dataclass(frozen=True)
class CodeOption(Option):
    value: int

    def apply(self, fields: RecordFields) -> None:
        fields.code = self.value


def with_cause(error: BaseException) -> CauseOption:
    """Wrap an underlying exception."""

    return CauseOption(error)


def with_message(text: str) -> MessageOption:
    """Set the user-facing message."""

    return MessageOption(text)


def with_messagef(template: str, *args: Any) -> MessageOption:
    """Set the message from a printf-style template.

    A template that does not match its arguments never raises: the raw
    template is kept and the arguments are appended as ``%!(EXTRA ...)``.
    """

    if not args:
        return MessageOption(template)
    try:
        return MessageOption(template % args)
    except (TypeError, ValueError) as exc:
        logger.debug(
            "errors.messagef_mismatch",
            extra={"template": template, "reason": str(exc)},
        )
        extra = ", ".join(f"{type(arg).__name__}={arg}" for arg in args)
        return MessageOption(f"{template}%!(EXTRA {extra})")


def with_trace() -> TraceOption:
    """Record the caller's location as the error's origin."""

    return TraceOption(current_location())


def with_code(value: int) -> CodeOption:
    """Override the category's default status code."""

    return CodeOption(value)


def as_option(value: Any) -> Option | None:
    """Coerce a raw construction parameter into an option.

    Returns:
        The matching option, or None when the value is not recognized.
    """

    if isinstance(value, Option):
        return value
    if isinstance(value, BaseException):
        return CauseOption(value)
    if isinstance(value, str):
        return MessageOption(value)
    if isinstance(value, TraceEntry):
        return TraceOption(value)
    # bool is an int subclass but never a status code
    if isinstance(value, int) and not isinstance(value, bool):
        return CodeOption(value)
    return None


def collect(params: Iterable[Any]) -> RecordFields:
    """Fold construction parameters into a fresh field set.

    Unrecognized parameters are skipped; collection never fails.
    """

    fields = RecordFields()
    for param in params:
        option = as_option(param)
        if option is None:
            logger.debug(
                "errors.param_ignored",
                extra={"param_type": type(param).__name__},
            )
            continue
        option.apply(fields)
    return fields
