from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class _ThreadRunner(Generic[T]):  # noqa: UP046
    def __init__(self, coro: Coroutine[Any, Any, T]):
        self.coro = coro
        self.out: T | None = None
        self.err: BaseException | None = None

    def run(self) -> None:
        try:
            self.out = asyncio.run(self.coro)
        except BaseException as e:  # noqa: BLE001
            self.err = e


def run_async(coro: Coroutine[Any, Any, T]) -> T:  # noqa: UP047
    """Drive a coroutine to completion from synchronous (WSGI) code.

    Inside a running loop the coroutine gets its own loop on a helper thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    runner: _ThreadRunner[T] = _ThreadRunner(coro)
    thread = threading.Thread(target=runner.run, daemon=True)
    thread.start()
    thread.join()
    if runner.err is not None:
        raise runner.err
    return runner.out  # type: ignore[return-value]
