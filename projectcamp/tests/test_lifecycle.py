from __future__ import annotations

import asyncio
import inspect

from projectcamp.shared.errors import AppError
from projectcamp.shared.middleware.lifecycle import RequestLifecycle, wrap_handler


class _Sink:
    def __init__(self) -> None:
        self.calls: list[Exception] = []

    def __call__(self, exc: Exception) -> str:
        self.calls.append(exc)
        return "error-response"


def test_sync_handler_success_passes_through() -> None:
    sink = _Sink()
    wrapped = wrap_handler(lambda x: x * 2, on_error=sink)

    assert wrapped(21) == 42
    assert sink.calls == []


def test_sync_raise_reaches_sink_exactly_once() -> None:
    sink = _Sink()
    boom = AppError.unauthenticated("test")

    def handler() -> None:
        raise boom

    assert wrap_handler(handler, on_error=sink)() == "error-response"
    assert sink.calls == [boom]


def test_async_rejection_reaches_sink_exactly_once() -> None:
    sink = _Sink()

    async def handler(value: int) -> int:
        await asyncio.sleep(0)
        raise ValueError(value)

    wrapped = wrap_handler(handler, on_error=sink)

    assert inspect.iscoroutinefunction(wrapped)
    assert asyncio.run(wrapped(3)) == "error-response"
    assert len(sink.calls) == 1
    assert isinstance(sink.calls[0], ValueError)


def test_sync_handler_returning_awaitable_is_settled() -> None:
    sink = _Sink()

    async def fails() -> None:
        raise RuntimeError("late")

    wrapped = wrap_handler(lambda: fails(), on_error=sink)

    assert asyncio.run(wrapped()) == "error-response"
    assert len(sink.calls) == 1


def test_wrapper_keeps_handler_name() -> None:
    def register() -> str:
        return "ok"

    wrapped = RequestLifecycle(on_error=_Sink()).wrap(register)

    assert wrapped.__name__ == "register"
    assert wrapped() == "ok"
