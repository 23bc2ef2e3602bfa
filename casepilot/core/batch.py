"""Concurrent suite generation for many endpoints."""

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from casepilot.core.engine import TestStrategyEngine
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.models.test_case import TestSuite
from casepilot.utils.concurrency import ConcurrencyController
from casepilot.utils.logging import get_logger


@dataclass
class BatchResult:
    """Outcome of a batch run."""

    suites: List[TestSuite] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    timed_out: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success_count(self) -> int:
        return len(self.suites)

    @property
    def failure_count(self) -> int:
        return len(self.failures) + len(self.timed_out)

    @property
    def total_test_cases(self) -> int:
        return sum(len(suite.test_cases) for suite in self.suites)


class BatchGenerator:
    """Runs ``TestStrategyEngine.generate_suite`` over many endpoints.

    Endpoints run on a private thread pool, at most ``max_workers`` at a time.
    When a ``timeout`` is set, ``generate`` returns at the deadline and every
    unfinished endpoint is reported in ``BatchResult.timed_out``. Endpoints not
    yet started never run. Running threads cannot be interrupted; they finish
    in the background and their results are discarded.
    """

    def __init__(
        self,
        engine: TestStrategyEngine,
        max_workers: int = 4,
        timeout: Optional[float] = None
    ):
        """Initialize batch generator.

        Args:
            engine: Engine shared by all endpoints
            max_workers: Maximum concurrent endpoints
            timeout: Deadline for the whole batch in seconds (None or 0 = none)
        """
        self.engine = engine
        self.max_workers = max_workers
        self.timeout = timeout or None
        self.logger = get_logger("batch")

    async def generate(self, endpoints: List[EndpointDescriptor]) -> BatchResult:
        """Generate suites for all endpoints.

        Returns:
            Suites in input order plus per-endpoint failures
        """
        result = BatchResult()
        if not endpoints:
            return result

        start = time.time()
        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="casepilot-batch"
        )
        controller = ConcurrencyController(self.max_workers, executor=executor)
        tasks = [
            asyncio.create_task(controller.execute_in_thread(self.engine.generate_suite, endpoint))
            for endpoint in endpoints
        ]

        try:
            done, pending = await asyncio.wait(tasks, timeout=self.timeout)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for endpoint, task in zip(endpoints, tasks):
            key = endpoint.get_endpoint_id()
            if task in pending:
                result.timed_out.append(key)
                continue
            error = task.exception()
            if error is not None:
                result.failures[key] = str(error)
                self.logger.warning("Endpoint generation failed", endpoint=key, error=str(error))
            else:
                result.suites.append(task.result())

        result.duration = time.time() - start
        self.logger.info(
            "Batch generation finished",
            endpoints=len(endpoints),
            succeeded=result.success_count,
            failed=len(result.failures),
            timed_out=len(result.timed_out),
            duration=round(result.duration, 3),
        )
        return result
