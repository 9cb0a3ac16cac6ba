"""Shared helpers for asserting NetSDR exceptions in tests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
TException = TypeVar("TException", bound=BaseException)


def _missing(exception_type: type[BaseException]) -> AssertionError:
    return AssertionError(f"Expected {exception_type.__name__} to be raised")


def expect_exception(
    func: Callable[P, object],
    exception_type: type[TException],
    *args: P.args,
    **kwargs: P.kwargs,
) -> TException:
    """Call ``func`` and return the raised exception so its attributes can be checked."""
    try:
        _ = func(*args, **kwargs)
    except exception_type as err:
        return err
    raise _missing(exception_type)  # pragma: no cover


async def expect_async_exception(
    func: Callable[P, Awaitable[object]],
    exception_type: type[TException],
    *args: P.args,
    **kwargs: P.kwargs,
) -> TException:
    """Await ``func`` and return the raised exception so its attributes can be checked."""
    try:
        _ = await func(*args, **kwargs)
    except exception_type as err:
        return err
    raise _missing(exception_type)  # pragma: no cover
