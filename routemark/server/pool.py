"""
Worker pool for synchronous handlers.

Sync handlers, filters and template renders run on a bounded thread pool so
the event loop keeps serving other connections. ``min_threads`` workers are
started eagerly; ``idle_timeout_ms`` is the keep-alive timeout handed to
uvicorn for idle connections.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional
import asyncio
import functools
import logging
import threading

logger = logging.getLogger("routemark.server.pool")


class WorkerPool:

    def __init__(self, max_threads: int = 8, min_threads: int = 2, idle_timeout_ms: int = 30000):
        if max_threads < 1:
            raise ValueError("max_threads must be at least 1")
        if min_threads < 0 or min_threads > max_threads:
            raise ValueError("min_threads must be between 0 and max_threads")
        self.max_threads = max_threads
        self.min_threads = min_threads
        self.idle_timeout_ms = idle_timeout_ms
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def idle_timeout_seconds(self) -> int:
        return max(1, self.idle_timeout_ms // 1000)

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_threads,
                    thread_name_prefix="routemark-worker",
                )
                self._prestart(self._executor)
            return self._executor

    def _prestart(self, executor: ThreadPoolExecutor) -> None:
        # Each blocked no-op forces the executor to spawn a fresh thread.
        if not self.min_threads:
            return
        barrier = threading.Barrier(self.min_threads + 1)
        for _ in range(self.min_threads):
            executor.submit(barrier.wait, 5)
        try:
            barrier.wait(5)
        except threading.BrokenBarrierError:
            logger.warning("Could not prestart %d worker threads", self.min_threads)
        logger.debug("Started %d worker threads", self.min_threads)

    def start(self) -> None:
        self.executor

    async def run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, functools.partial(func, *args))

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __repr__(self) -> str:
        return (
            f"WorkerPool(max_threads={self.max_threads}, min_threads={self.min_threads}, "
            f"idle_timeout_ms={self.idle_timeout_ms})"
        )
