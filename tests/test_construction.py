"""Tests for typed error construction and category defaults."""

from __future__ import annotations

import copy
import itertools
import pickle

import pytest

from typed_errors import (
    BadRequestError,
    Category,
    ConflictError,
    FatalError,
    InternalError,
    NoContentError,
    NotFoundError,
    TraceEntry,
    TypedError,
    UnauthorizedError,
    get_cause,
    get_code,
    get_message,
    get_stack,
    get_trace,
    new_error,
    unwrap,
    with_cause,
    with_code,
    with_message,
    with_messagef,
    with_trace,
)

ALL_CLASSES = [
    (BadRequestError, 400),
    (UnauthorizedError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InternalError, 500),
    (FatalError, 500),
    (NoContentError, 204),
]


@pytest.mark.parametrize("cls,expected", ALL_CLASSES)
def test_default_code_per_category(cls: type[TypedError], expected: int) -> None:
    assert get_code(cls()) == expected


@pytest.mark.parametrize("cls,_", ALL_CLASSES)
def test_code_override_applies_to_every_category(cls: type[TypedError], _: int) -> None:
    assert get_code(cls(with_code(422))) == 422


def test_zero_code_falls_back_to_default() -> None:
    assert get_code(NotFoundError(with_code(0))) == 404


def test_message_is_stored() -> None:
    err = BadRequestError(with_message("invalid input"))

    assert get_message(err) == "invalid input"
    assert err.message == "invalid input"
    assert get_code(err) == 400


def test_messagef_formats_arguments() -> None:
    err = NotFoundError(with_messagef("user %d not found", 123))

    assert get_message(err) == "user 123 not found"


def test_empty_construction_is_valid() -> None:
    err = BadRequestError()

    assert get_message(err) == ""
    assert get_cause(err) == ""
    assert get_code(err) == 400
    assert get_stack(err) == []
    assert str(err) == ""


def test_internal_wraps_cause() -> None:
    original = ConnectionError("db down")
    err = InternalError(with_cause(original), with_message("query failed"))

    assert get_message(err) == "query failed"
    assert get_cause(err) == "db down"
    assert get_code(err) == 500
    assert unwrap(err) is original
    assert err.__cause__ is original


def test_multiple_options() -> None:
    original = LookupError("no rows in result set")
    err = NotFoundError(
        with_cause(original),
        with_message("user not found"),
        with_code(410),
        with_trace(),
    )

    assert get_message(err) == "user not found"
    assert get_cause(err) == "no rows in result set"
    assert get_code(err) == 410

    trace = get_trace(err)
    assert trace.file == "test_construction.py"
    assert trace.line > 0


def test_raw_values_are_coerced() -> None:
    original = ValueError("bad value")
    entry = TraceEntry("svc.py", "handle", 12)
    err = ConflictError(original, "already exists", entry, 418)

    assert err.wrapped is original
    assert err.message == "already exists"
    assert err.trace == entry
    assert err.code == 418


def test_unrecognized_params_are_ignored() -> None:
    err = InternalError(None, 3.5, {"a": 1}, object(), True, with_message("still fine"))

    assert err.message == "still fine"
    assert err.code == 500


def test_last_message_cause_and_code_win() -> None:
    first = ValueError("first")
    second = ValueError("second")
    err = BadRequestError("one", first, 401, "two", second, 402)

    assert err.message == "two"
    assert err.wrapped is second
    assert err.cause == "second"
    assert err.code == 402


def test_first_trace_is_origin_and_all_are_stacked() -> None:
    loc1 = TraceEntry("a.py", "first", 1)
    loc2 = TraceEntry("b.py", "second", 2)
    err = InternalError(loc1, loc2)

    assert get_trace(err) == loc1
    assert get_stack(err) == [loc1, loc2]


def test_parameter_order_does_not_matter() -> None:
    entry = TraceEntry("api.py", "create", 7)
    params = [with_message("bad"), entry, with_code(422)]

    observed = set()
    for permutation in itertools.permutations(params):
        err = BadRequestError(*permutation)
        observed.add((err.message, err.code, err.cause, err.trace, tuple(err.stack)))

    assert observed == {("bad", 422, "", entry, (entry,))}


def test_construction_does_not_touch_wrapped_typed_error() -> None:
    inner = NotFoundError(with_message("missing"))
    InternalError(with_cause(inner))

    assert inner.stack == []
    assert inner.code == 404


def test_base_class_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        TypedError(with_message("no category"))


def test_new_error_builds_registered_class() -> None:
    err = new_error(Category.CONFLICT, "duplicate")

    assert isinstance(err, ConflictError)
    assert err.code == 409
    assert isinstance(new_error("not_found"), NotFoundError)


def test_new_error_rejects_unknown_category() -> None:
    with pytest.raises(ValueError):
        new_error("teapot")


def test_subclass_inherits_category() -> None:
    class UserNotFound(NotFoundError):
        pass

    err = UserNotFound("user 7")

    assert err.category is Category.NOT_FOUND
    assert err.code == 404
    assert isinstance(new_error(Category.NOT_FOUND), NotFoundError)
    assert not isinstance(new_error(Category.NOT_FOUND), UserNotFound)


def test_typed_errors_can_be_raised_and_caught() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        raise NotFoundError(with_message("gone"))

    assert excinfo.value.message == "gone"
    assert isinstance(excinfo.value, TypedError)


def test_messagef_mismatch_never_raises() -> None:
    err = NotFoundError(with_messagef("user %d of %d", 1))

    assert err.code == 404
    assert err.message == "user %d of %d%!(EXTRA int=1)"


def test_messagef_without_placeholders_appends_arguments() -> None:
    err = BadRequestError(with_messagef("plain text", "x", 2))

    assert err.message == "plain text%!(EXTRA str=x, int=2)"


def _pickle_round_trip(err: TypedError) -> TypedError:
    return pickle.loads(pickle.dumps(err))


@pytest.mark.parametrize("copier", [_pickle_round_trip, copy.deepcopy])
def test_copies_keep_record_state(copier) -> None:
    origin = TraceEntry("a.py", "f", 1)
    err = NotFoundError(with_cause(KeyError("k")), with_message("gone"), origin, with_code(410))
    err.push(TraceEntry("b.py", "g", 2), message="retrying")

    clone = copier(err)

    assert type(clone) is NotFoundError
    assert clone is not err
    assert clone.cause == "'k'"
    assert isinstance(clone.wrapped, KeyError)
    assert clone.__cause__ is clone.wrapped
    assert clone.message == "gone"
    assert clone.code == 410
    assert clone.trace == origin
    assert clone.stack == [origin, TraceEntry("b.py", "g", 2)]
    assert clone.stack_message == "retrying"
    assert str(clone) == str(err)


def test_copied_error_has_its_own_lock_and_stack() -> None:
    err = InternalError(with_message("test"))
    clone = copy.deepcopy(err)

    clone.push(TraceEntry("c.py", "h", 3))

    assert err.stack == []
    assert len(clone.stack) == 1


def test_pickle_keeps_instance_attributes() -> None:
    err = ConflictError(with_message("duplicate"))
    err.order_id = 42

    clone = _pickle_round_trip(err)

    assert clone.order_id == 42
    assert clone.code == 409
