"""Typed error categories and their shared record.

Every typed error wraps exactly one ``ErrorRecord``. The record holds the
category-independent state (cause, message, trace, status code) and a lock
guarding the parts that change after construction: the stack of trace
entries and the stack message. Aliases of an error share its record, so a
trace appended by one holder is visible to all of them.

Categories are a tag, not behavior: the seven category classes only fix
``category`` so they can be raised and caught individually, while the default
status code is a table lookup on the tag.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, ClassVar, Iterator, TypeVar

from typed_errors.core.config import settings
from typed_errors.core.options import collect
from typed_errors.core.trace import EMPTY_TRACE, TraceEntry
from typed_errors.utils.location import current_location

E = TypeVar("E", bound=BaseException)


class Category(str, Enum):
    """Fixed error kinds."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"
    FATAL = "fatal"
    NO_CONTENT = "no_content"


DEFAULT_CODES: dict[Category, int] = {
    Category.BAD_REQUEST: 400,
    Category.UNAUTHORIZED: 403,
    Category.NOT_FOUND: 404,
    Category.CONFLICT: 409,
    Category.INTERNAL: 500,
    Category.FATAL: 500,
    Category.NO_CONTENT: 204,
}


def default_code(category: Category) -> int:
    """Return the status code a category uses when none is given."""

    return DEFAULT_CODES[category]


def truncate_cause(cause: str) -> str:
    """Shorten a cause for single-line display."""

    limit = settings.errors.max_cause_length
    if len(cause) > limit:
        return cause[:limit] + settings.errors.ellipsis
    return cause


class ErrorRecord:
    """Shared state behind a typed error.

    ``cause``, ``wrapped``, ``message``, ``trace`` and ``status_code`` are
    fixed at construction. ``stack`` and ``stack_message`` change afterwards
    and are only touched under ``_lock``.
    """

    def __init__(
        self,
        *,
        cause: str = "",
        wrapped: BaseException | None = None,
        message: str = "",
        trace: TraceEntry = EMPTY_TRACE,
        stack: list[TraceEntry] | None = None,
        status_code: int = 0,
    ) -> None:
        self.cause = cause
        self.wrapped = wrapped
        self.message = message
        self.trace = trace
        self.status_code = status_code
        self._stack: list[TraceEntry] = list(stack or [])
        self._stack_message = ""
        self._lock = threading.RLock()

    def append(self, entry: TraceEntry, message: str | None = None) -> None:
        with self._lock:
            self._stack.append(entry)
            if message is not None:
                self._stack_message = message

    def snapshot(self) -> tuple[list[TraceEntry], str]:
        """Return a copy of the stack and the stack message, read together."""

        with self._lock:
            return list(self._stack), self._stack_message

    @property
    def stack_message(self) -> str:
        with self._lock:
            return self._stack_message

    def __getstate__(self) -> dict[str, Any]:
        with self._lock:
            state = self.__dict__.copy()
            state["_stack"] = list(self._stack)
        del state["_lock"]
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._lock = threading.RLock()


def _restore(cls: type["TypedError"], record: ErrorRecord) -> "TypedError":
    """Rebuild a typed error around an existing record (pickle/copy)."""

    err = cls.__new__(cls)
    Exception.__init__(err, record.message)
    err._record = record
    if record.wrapped is not None:
        err.__cause__ = record.wrapped
    return err


_CLASSES: dict[Category, type["TypedError"]] = {}


class TypedError(Exception):
    """Base class of all categorized errors.

    Construct one of the category subclasses; parameters may be options
    (``with_message``, ``with_cause``, ``with_trace``, ``with_code``) or raw
    values, in any order.
    """

    category: ClassVar[Category | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Keep the first class registered for a category as its canonical one
        if cls.category is not None:
            _CLASSES.setdefault(cls.category, cls)

    def __init__(self, *params: Any) -> None:
        category = type(self).category
        if category is None:
            raise TypeError("TypedError has no category; construct a category subclass")

        fields = collect(params)
        self._record = ErrorRecord(
            cause=fields.cause,
            wrapped=fields.wrapped,
            message=fields.message,
            trace=fields.trace or EMPTY_TRACE,
            stack=fields.stack,
            status_code=fields.code or default_code(category),
        )
        super().__init__(fields.message)
        if fields.wrapped is not None:
            self.__cause__ = fields.wrapped

    def __str__(self) -> str:
        record = self._record
        if record.trace.line == 0:
            return record.message

        where = f"(at {record.trace.function}:{record.trace.line})"
        cause = truncate_cause(record.cause)
        if not cause:
            return f"{record.message} {where}"
        return f"{cause}: {record.message} {where}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        state = {k: v for k, v in self.__dict__.items() if k != "_record"}
        return _restore, (type(self), self._record), state or None

    @property
    def record(self) -> ErrorRecord:
        return self._record

    @property
    def code(self) -> int:
        return self._record.status_code

    @property
    def cause(self) -> str:
        return self._record.cause

    @property
    def message(self) -> str:
        return self._record.message

    @property
    def stack_message(self) -> str:
        return self._record.stack_message

    @property
    def trace(self) -> TraceEntry:
        return self._record.trace

    @property
    def stack(self) -> list[TraceEntry]:
        """Copy of the trace history; changing it does not affect the error."""

        entries, _ = self._record.snapshot()
        return entries

    @property
    def wrapped(self) -> BaseException | None:
        return self._record.wrapped

    def unwrap(self) -> BaseException | None:
        return self._record.wrapped

    def push(self, entry: TraceEntry | None = None, message: str | None = None) -> "TypedError":
        """Append a trace entry (the caller's location when omitted).

        Returns:
            This same error, so calls can be chained or returned directly.
        """

        if entry is None:
            entry = current_location()
        self._record.append(entry, message)
        return self

    def render(self) -> str:
        """Multi-line dump of code, cause, message and the full stack."""

        record = self._record
        stack, stack_message = record.snapshot()

        lines = ["", f"Error [Code: {record.status_code}]"]
        if record.cause:
            lines.append(f"  Cause:   {record.cause}")
        if record.message:
            lines.append(f"  Message: {record.message}")
        if stack_message:
            lines.append(f"  Stack:   {stack_message}")

        if stack:
            lines.append("")
            lines.append("Stack Trace:")
            for index, entry in enumerate(stack, start=1):
                lines.append(f"  {index}. {entry.file}:{entry.line} in {entry.function}")

        return "\n".join(lines)


class BadRequestError(TypedError):
    """The caller sent something invalid (400)."""

    category = Category.BAD_REQUEST


class UnauthorizedError(TypedError):
    """The caller may not perform this action (403)."""

    category = Category.UNAUTHORIZED


class NotFoundError(TypedError):
    """The requested entity does not exist (404)."""

    category = Category.NOT_FOUND


class ConflictError(TypedError):
    """The request conflicts with current state (409)."""

    category = Category.CONFLICT


class InternalError(TypedError):
    """An unexpected server-side failure (500)."""

    category = Category.INTERNAL


class FatalError(TypedError):
    """An unrecoverable failure (500)."""

    category = Category.FATAL


class NoContentError(TypedError):
    """Nothing to return (204)."""

    category = Category.NO_CONTENT


def new_error(category: Category | str, *params: Any) -> TypedError:
    """Build the error class registered for ``category``.

    Raises:
        ValueError: If ``category`` is not a known category name.
    """

    return _CLASSES[Category(category)](*params)


def _next_link(err: BaseException) -> BaseException | None:
    if isinstance(err, TypedError) and err.wrapped is not None:
        return err.wrapped
    return err.__cause__


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, outermost first."""

    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = _next_link(current)


def is_category(err: BaseException | None, category: Category) -> bool:
    """True if any typed error on the chain has ``category``."""

    return any(
        isinstance(link, TypedError) and link.category == category
        for link in iter_chain(err)
    )


def category_of(err: BaseException | None) -> Category | None:
    """Category of the outermost typed error on the chain."""

    for link in iter_chain(err):
        if isinstance(link, TypedError):
            return link.category
    return None


def is_caused_by(err: BaseException | None, target: BaseException) -> bool:
    """True if ``target`` itself appears on the chain."""

    return any(link is target for link in iter_chain(err))


def find(err: BaseException | None, exc_type: type[E]) -> E | None:
    """First error on the chain that is an instance of ``exc_type``."""

    for link in iter_chain(err):
        if isinstance(link, exc_type):
            return link
    return None


def is_bad_request(err: BaseException | None) -> bool:
    return is_category(err, Category.BAD_REQUEST)


def is_unauthorized(err: BaseException | None) -> bool:
    return is_category(err, Category.UNAUTHORIZED)


def is_not_found(err: BaseException | None) -> bool:
    return is_category(err, Category.NOT_FOUND)


def is_conflict(err: BaseException | None) -> bool:
    return is_category(err, Category.CONFLICT)


def is_internal(err: BaseException | None) -> bool:
    return is_category(err, Category.INTERNAL)


def is_fatal(err: BaseException | None) -> bool:
    return is_category(err, Category.FATAL)


def is_no_content(err: BaseException | None) -> bool:
    return is_category(err, Category.NO_CONTENT)
