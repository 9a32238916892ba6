# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Uniform execution boundary for request handlers.

A wrapped handler never lets a failure escape: whatever it raises, or
whatever its awaitable raises, is handed to one ``on_error`` callback
exactly once and the callback's return value becomes the result.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from functools import partial, wraps
from typing import Any, TypeVar

from projectcamp.shared.errors import respond_to_error

R = TypeVar("R")
ErrorSink = Callable[[Exception], Any]


async def _settle(awaitable: Awaitable[R], on_error: ErrorSink) -> R | Any:
    try:
        return await awaitable
    except Exception as exc:
        return on_error(exc)


def wrap_handler(handler: Callable[..., Any], *, on_error: ErrorSink) -> Callable[..., Any]:
    if inspect.iscoroutinefunction(handler):

        @wraps(handler)
        async def async_wrapper(*args, **kwargs):
            try:
                return await handler(*args, **kwargs)
            except Exception as exc:
                return on_error(exc)

        return async_wrapper

    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            result = handler(*args, **kwargs)
        except Exception as exc:
            return on_error(exc)
        if inspect.isawaitable(result):
            return _settle(result, on_error)
        return result

    return wrapper


class RequestLifecycle:
    """Binds :func:`wrap_handler` to the application's error responder."""

    def __init__(self, on_error: ErrorSink | None = None, *, debug: bool = False) -> None:
        self._on_error = on_error or partial(respond_to_error, debug=debug)

    def wrap(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        return wrap_handler(handler, on_error=self._on_error)


__all__ = ["RequestLifecycle", "wrap_handler"]
