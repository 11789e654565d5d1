"""
Fixed-size worker pool.

All candidates are queued up front, the queue is closed with one
sentinel per worker, and ``run`` joins every worker before returning.
"""

import queue
import threading
from datetime import datetime
from typing import Iterable, Optional

from bucketfinder.core.models import ScanResult
from bucketfinder.core.walker import Walker
from bucketfinder.utils.output import ScanLog
from bucketfinder.utils.rate_limiter import ProbeDelay, RateLimiter


_CLOSED = object()


class WorkerPool:
    """
    Dispatches candidate names to ``workers`` threads.

    Workers share only the queue, the walker and the log sink. Results are
    merged into a single ScanResult under a lock.
    """

    def __init__(
        self,
        walker: Walker,
        host: str,
        log: ScanLog,
        workers: int = 10,
        delay: float = 0.0,
        limiter: Optional[RateLimiter] = None,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")

        self.walker = walker
        self.host = host
        self.log = log
        self.workers = workers
        self.delay = ProbeDelay(delay)
        self.limiter = limiter
        self._lock = threading.Lock()

    def run(self, candidates: Iterable[str]) -> ScanResult:
        """Probe every candidate and block until the queue is drained."""
        jobs: queue.Queue = queue.Queue()
        total = 0
        for name in candidates:
            jobs.put(name)
            total += 1
        for _ in range(self.workers):
            jobs.put(_CLOSED)

        result = ScanResult(total_candidates=total, workers=self.workers)
        errors_before = self.walker.transport_errors

        threads = [
            threading.Thread(
                target=self._worker,
                args=(worker_id, jobs, result),
                name=f"bucketfinder-worker-{worker_id}",
                daemon=True,
            )
            for worker_id in range(self.workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        result.transport_errors = self.walker.transport_errors - errors_before
        result.completed_at = datetime.utcnow()
        return result

    def _worker(self, worker_id: int, jobs: queue.Queue, result: ScanResult) -> None:
        while True:
            name = jobs.get()
            if name is _CLOSED:
                return

            if self.log.verbose:
                self.log.line(f"[Worker {worker_id}] Checking bucket: {name}", style="dim", persist=False)

            self.delay.wait()
            if self.limiter is not None:
                self.limiter.acquire()

            try:
                findings = self.walker.walk(self.host, name, worker_id=worker_id)
            except Exception as e:
                self.log.line(f"[Worker {worker_id}] Error checking {name}: {e}", style="red")
                with self._lock:
                    result.probed += 1
                    result.failures += 1
                continue

            with self._lock:
                result.probed += 1
                result.buckets.extend(findings)
