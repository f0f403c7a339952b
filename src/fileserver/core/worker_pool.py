"""
=============================================================================
WORKER POOL
=============================================================================

A fixed set of threads, each handling one connection at a time.

=============================================================================
WHY A POOL?
=============================================================================

The request pipeline is fully blocking: a slow client stalls whoever is
serving it. Handing each connection to a worker means one stalled client
costs one worker, not the whole server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept thread          task queue            workers              │
    │   ─────────────          ──────────            ───────              │
    │                                                                      │
    │   conn ──submit()──►  [ task | task | ... ] ──get()──► Worker-0     │
    │                                             ──get()──► Worker-1     │
    │                                             ──get()──► Worker-2     │
    │                                                                      │
    │   shutdown(): one None ("poison pill") per worker, then join()      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A task that raises is logged and the worker moves on to the next one.

=============================================================================
"""

import threading
import queue
import logging
from typing import Any, Callable, List, Optional


logger = logging.getLogger(__name__)


class Worker(threading.Thread):
    """Worker thread that runs tasks from the shared queue until a None arrives."""

    def __init__(self, task_queue: queue.Queue, worker_id: int):
        # daemon=True: a hung client never keeps the process alive at exit
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            task = self.task_queue.get()
            try:
                if task is None:
                    break  # Poison pill
                func, args = task
                func(*args)
                self.tasks_completed += 1
            except Exception as e:
                # One bad connection must not take the worker down
                logger.exception(f"Worker {self.worker_id} task failed: {e}")
                self.tasks_failed += 1
            finally:
                self.task_queue.task_done()

        logger.debug(f"Worker {self.worker_id} stopped")


class WorkerPool:
    """
    Fixed-size thread pool.

    Usage:
        pool = WorkerPool(workers=4)
        pool.start()
        pool.submit(handle, conn)
        pool.shutdown()
    """

    def __init__(self, workers: int = 4):
        if workers < 1:
            raise ValueError("workers must be >= 1")

        self.num_workers = workers
        self._queue: queue.Queue = queue.Queue()
        self._workers: List[Worker] = []
        self._lock = threading.Lock()
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def queue_size(self) -> int:
        return self._queue.qsize()

    def start(self):
        with self._lock:
            if self._running:
                return
            for worker_id in range(self.num_workers):
                worker = Worker(self._queue, worker_id)
                worker.start()
                self._workers.append(worker)
            self._running = True

        logger.info(f"Worker pool started with {self.num_workers} workers")

    def submit(self, func: Callable[..., Any], *args: Any) -> bool:
        """
        Queue a call for a worker.

        Returns:
            False if the pool is not running (the call was not queued).
        """
        if not self._running:
            return False
        self._queue.put((func, args))
        return True

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop all workers after the tasks already queued.

        Args:
            wait: Join the worker threads.
            timeout: Per-thread join timeout in seconds.
        """
        with self._lock:
            if not self._running:
                return
            self._running = False

            for _ in self._workers:
                self._queue.put(None)

            if wait:
                for worker in self._workers:
                    worker.join(timeout)

            self._workers.clear()

        logger.info("Worker pool stopped")

    def stats(self) -> dict:
        return {
            "workers": self.num_workers,
            "queue_size": self.queue_size,
            "tasks_completed": sum(w.tasks_completed for w in self._workers),
            "tasks_failed": sum(w.tasks_failed for w in self._workers),
        }
