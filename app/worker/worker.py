import time
from collections.abc import Callable
from datetime import timedelta

from app.config.settings import Settings
from app.database.repositories.job_repository import JobRepository
from app.jobs.lifecycle import JobLifecycleManager
from app.logging.logger import Log
from app.worker.job_runner import JobRunner


class Worker:
    """Poll loop: sweep stuck jobs -> find pending job -> run it -> sleep when idle.

    Several workers may poll the same table. The PENDING -> PROCESSING
    compare-and-set inside JobRunner decides which of them gets a job.
    """

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        lifecycle: JobLifecycleManager,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._lifecycle = lifecycle
        self._settings = settings
        self._clock = clock
        self._last_sweep: float | None = None

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, polling for jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                self._sweep_stuck_jobs()
                job_id = self._next_job_id()
                if job_id:
                    self._run_job(job_id)
                    jobs_done += 1
                else:
                    Log.debug("No jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _run_job(self, job_id: str) -> None:
        try:
            self._job_runner.run(job_id)
        except Exception as exc:
            Log.error(f"Job {job_id} crashed the runner: {exc}")
            time.sleep(self._settings.job_poll_interval_seconds)

    def _next_job_id(self) -> str | None:
        """Oldest pending job id. Gracefully handle DB errors."""
        try:
            return self._job_repo.next_pending_id()
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None

    def _sweep_stuck_jobs(self) -> None:
        now = self._clock()
        interval = self._settings.stuck_job_sweep_interval_seconds
        if self._last_sweep is not None and now - self._last_sweep < interval:
            return
        self._last_sweep = now
        timeout = timedelta(minutes=self._settings.stuck_job_timeout_minutes)
        try:
            reclaimed = self._lifecycle.reclaim_stuck(timeout)
        except Exception as exc:
            Log.warning(f"Stuck job sweep failed, will retry: {exc}")
            return
        if reclaimed:
            Log.warning(f"Reclaimed {reclaimed} stuck jobs")
