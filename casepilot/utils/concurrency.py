"""Concurrency utilities for CasePilot."""

import asyncio
import functools
from asyncio import Semaphore
from concurrent.futures import Executor
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

T = TypeVar('T')


class ConcurrencyController:
    """Bounds the number of coroutines running at once."""

    def __init__(self, max_workers: int = 4, executor: Optional[Executor] = None):
        """Initialize concurrency controller.

        Args:
            max_workers: Maximum concurrent workers
            executor: Executor for blocking calls (default: asyncio's thread pool)
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.semaphore = Semaphore(max_workers)
        self.executor = executor

    async def execute(self, coro: Awaitable[T]) -> T:
        """Execute coroutine under the semaphore."""
        async with self.semaphore:
            return await coro

    async def execute_in_thread(self, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking function in a worker thread under the semaphore."""
        async with self.semaphore:
            if self.executor is None:
                return await asyncio.to_thread(func, *args)
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(self.executor, functools.partial(func, *args))


async def execute_with_concurrency(
    tasks: List[Awaitable[T]],
    max_workers: int = 4,
    return_exceptions: bool = True
) -> List[T]:
    """Execute tasks with controlled concurrency.

    Args:
        tasks: List of coroutines to execute
        max_workers: Maximum concurrent workers
        return_exceptions: Whether to return exceptions instead of raising

    Returns:
        Results in task order (may include exceptions if return_exceptions=True)
    """
    if not tasks:
        return []

    controller = ConcurrencyController(max_workers)
    controlled_tasks = [controller.execute(task) for task in tasks]

    return await asyncio.gather(*controlled_tasks, return_exceptions=return_exceptions)
