from app.jobs.exceptions import FileDeletedError, JobError
from app.jobs.lifecycle import JobLifecycleManager
from app.logging.logger import Log
from app.processor.processor import Processor


def user_facing_message(exc: BaseException) -> str:
    message = getattr(exc, "user_message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


class JobRunner:
    """Run one job end to end. No started job is left PROCESSING.

    ``run`` never raises: every error is logged, and once the job is
    claimed it is turned into a FAILED status.
    """

    def __init__(self, processor: Processor, lifecycle: JobLifecycleManager) -> None:
        self._processor = processor
        self._lifecycle = lifecycle

    def run(self, job_id: str) -> None:
        Log.info(f"Running job {job_id}")
        try:
            job = self._lifecycle.start(job_id)
        except FileDeletedError as exc:
            Log.warning(str(exc))
            return
        except JobError as exc:
            Log.warning(f"Job {job_id} not started: {exc}")
            return
        except Exception as exc:
            # start claims last, so the job is still PENDING and will be retried
            Log.error(f"Job {job_id} could not be started, will retry: {exc}")
            return

        try:
            result = self._processor.process(job)
            self._lifecycle.complete(job.id, result)
        except Exception as exc:
            self._handle_failure(job.id, exc)

    def _handle_failure(self, job_id: str, exc: Exception) -> None:
        Log.error(f"Job {job_id} raised {exc.__class__.__name__}: {exc}")
        try:
            self._lifecycle.fail(job_id, user_facing_message(exc))
        except JobError as lifecycle_exc:
            Log.warning(f"Job {job_id} could not be marked failed: {lifecycle_exc}")
        except Exception as db_exc:
            Log.error(
                f"Job {job_id} could not be marked failed, left for stuck-job sweep: {db_exc}"
            )
