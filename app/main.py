from dataclasses import dataclass

from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.audit_repository import AuditRepository
from app.database.repositories.file_repository import FileRepository
from app.database.repositories.job_repository import JobRepository
from app.database.repositories.notification_repository import NotificationRepository
from app.jobs.lifecycle import JobLifecycleManager
from app.logging.logger import Log
from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.push import FcmPushSender
from app.processor.processor import build_processor
from app.ratelimit.limiter import RateLimiter
from app.worker.job_runner import JobRunner
from app.worker.task_queue import BaseTaskQueue, InProcessTaskQueue, TaskQueueFactory
from app.worker.worker import Worker


@dataclass
class Application:
    """Wired service objects. A web layer submits through ``lifecycle``."""

    lifecycle: JobLifecycleManager
    job_runner: JobRunner
    task_queue: BaseTaskQueue
    worker: Worker
    rate_limiter: RateLimiter


def build_application(settings: Settings) -> Application:
    job_repo = JobRepository()
    file_repo = FileRepository()
    dispatcher = NotificationDispatcher(
        NotificationRepository(),
        push_senders=[
            FcmPushSender(settings.fcm_server_key, timeout_seconds=settings.push_timeout_seconds)
        ],
    )
    task_queue = TaskQueueFactory.create(
        settings.task_queue_backend, max_workers=settings.task_queue_workers
    )
    lifecycle = JobLifecycleManager(
        job_repo, file_repo, AuditRepository(), dispatcher, task_queue=task_queue
    )
    processor = build_processor(settings, lifecycle.report_progress, file_repo=file_repo)
    job_runner = JobRunner(processor, lifecycle)
    if isinstance(task_queue, InProcessTaskQueue):
        task_queue.start(job_runner.run)

    return Application(
        lifecycle=lifecycle,
        job_runner=job_runner,
        task_queue=task_queue,
        worker=Worker(job_repo, job_runner, lifecycle, settings),
        rate_limiter=RateLimiter(purge_interval_seconds=settings.rate_limit_purge_interval_seconds),
    )


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    application: Application | None = None
    try:
        application = build_application(settings)
        application.worker.run()
    finally:
        if application is not None:
            application.task_queue.shutdown()
        close_pool()


if __name__ == "__main__":
    main()
