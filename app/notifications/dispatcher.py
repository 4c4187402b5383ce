from app.database.repositories.notification_repository import NotificationRepository
from app.logging.logger import Log
from app.notifications.models import JobOutcome, Notification, PushResult
from app.notifications.push import BasePushSender


def build_notification(user_id: str, outcome: JobOutcome) -> Notification:
    action_url = f"/documents?project={outcome.project_id}" if outcome.project_id else "/documents"
    if outcome.succeeded:
        pages = outcome.pages_processed
        return Notification(
            user_id=user_id,
            type="OCR_COMPLETE",
            title="Document Analysis Complete",
            message=f'Finished analyzing "{outcome.file_name}" ({pages} page{"" if pages == 1 else "s"})',
            severity="INFO",
            category="DOCUMENT",
            action_url=action_url,
            data={
                "jobId": outcome.job_id,
                "fileName": outcome.file_name,
                "pagesProcessed": pages,
                "projectId": outcome.project_id,
            },
        )
    return Notification(
        user_id=user_id,
        type="OCR_FAILED",
        title="Document Analysis Failed",
        message=f'Failed to analyze "{outcome.file_name}": {outcome.error}',
        severity="ERROR",
        category="DOCUMENT",
        action_url=action_url,
        data={
            "jobId": outcome.job_id,
            "fileName": outcome.file_name,
            "error": outcome.error,
            "projectId": outcome.project_id,
        },
    )


class NotificationDispatcher:
    """Best-effort delivery of job outcomes: in-app row plus device push.

    ``notify`` never raises. Delivery problems are logged and dropped so a
    job's terminal state is never affected by them.
    """

    def __init__(
        self,
        notification_repo: NotificationRepository,
        push_senders: list[BasePushSender] | None = None,
    ) -> None:
        self._notification_repo = notification_repo
        self._push_senders = {s.platform: s for s in push_senders or []}

    def notify(self, user_id: str, outcome: JobOutcome) -> None:
        try:
            notification = build_notification(user_id, outcome)
            self._notification_repo.create(notification)
        except Exception as exc:
            Log.error(f"Failed to store notification for job {outcome.job_id}: {exc}")
            return

        try:
            results = self._push(notification)
        except Exception as exc:
            Log.error(f"Failed to send push for job {outcome.job_id}: {exc}")
            return
        failed = [r for r in results if not r.success]
        if failed:
            Log.warning(
                f"Push delivery for job {outcome.job_id}: "
                f"{len(results) - len(failed)}/{len(results)} devices reached"
            )

    def _push(self, notification: Notification) -> list[PushResult]:
        results: list[PushResult] = []
        for device in self._notification_repo.active_device_tokens(notification.user_id):
            sender = self._push_senders.get(device.platform)
            if sender is None:
                results.append(
                    PushResult(False, device.platform, device.token, error="Unknown platform")
                )
                continue
            result = sender.send(device.token, notification)
            if result.token_invalid:
                self._notification_repo.deactivate_token(device.token)
            results.append(result)
        return results
