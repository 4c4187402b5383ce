from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

from app.logging.logger import Log

JobHandler = Callable[[str], None]


class BaseTaskQueue(ABC):
    """Hands a submitted job id to whatever will eventually process it."""

    @abstractmethod
    def enqueue(self, job_id: str) -> None:
        raise NotImplementedError

    def shutdown(self) -> None:
        """Release queue resources. Default: nothing to release."""


class DatabaseTaskQueue(BaseTaskQueue):
    """The ocr_jobs table is the queue: Worker polls for PENDING rows."""

    def enqueue(self, job_id: str) -> None:
        Log.debug(f"Job {job_id} left pending for the polling worker")


class InProcessTaskQueue(BaseTaskQueue):
    """Runs jobs on a local thread pool. Jobs are lost if the process exits.

    The handler is attached with ``start`` because it usually needs the
    lifecycle manager that itself holds this queue.
    """

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="ocr-job"
        )
        self._handler: JobHandler | None = None

    def start(self, handler: JobHandler) -> None:
        self._handler = handler

    def enqueue(self, job_id: str) -> None:
        if self._handler is None:
            raise RuntimeError("InProcessTaskQueue.start() must be called before enqueue()")
        future = self._executor.submit(self._handler, job_id)
        future.add_done_callback(lambda f: self._log_crash(job_id, f))

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    @staticmethod
    def _log_crash(job_id: str, future: Future[None]) -> None:
        exc = future.exception()
        if exc is not None:
            Log.error(f"Job {job_id} handler crashed: {exc}")


class TaskQueueFactory:
    BACKENDS = ("database", "in_process")

    @classmethod
    def create(cls, backend: str, max_workers: int = 2) -> BaseTaskQueue:
        if backend == "database":
            return DatabaseTaskQueue()
        if backend == "in_process":
            return InProcessTaskQueue(max_workers=max_workers)
        raise ValueError(
            f"Unknown task queue backend '{backend}'. Supported: {', '.join(cls.BACKENDS)}"
        )
