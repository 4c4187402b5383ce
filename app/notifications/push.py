from abc import ABC, abstractmethod

import httpx

from app.notifications.models import Notification, PushResult

FCM_SEND_URL = "https://fcm.googleapis.com/fcm/send"


class BasePushSender(ABC):
    """Contract for one push gateway (one device platform)."""

    platform: str = ""

    @abstractmethod
    def send(self, token: str, notification: Notification) -> PushResult:
        """Deliver ``notification`` to one device. Must not raise."""


class FcmPushSender(BasePushSender):
    """Android delivery through the Firebase Cloud Messaging HTTP API."""

    platform = "ANDROID"

    def __init__(
        self,
        server_key: str,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._server_key = server_key
        self._client = client if client is not None else httpx.Client(timeout=timeout_seconds)

    def send(self, token: str, notification: Notification) -> PushResult:
        if not self._server_key:
            return PushResult(False, self.platform, token, error="FCM not configured")

        payload = {
            "to": token,
            "notification": {
                "title": notification.title,
                "body": notification.message,
                "sound": "default",
            },
            # FCM data values must be strings
            "data": {k: str(v) for k, v in notification.data.items() if v is not None},
        }
        try:
            response = self._client.post(
                FCM_SEND_URL,
                json=payload,
                headers={"Authorization": f"key={self._server_key}"},
            )
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            return PushResult(False, self.platform, token, error=f"FCM send error: {exc}")

        if body.get("success") == 1:
            return PushResult(True, self.platform, token)

        results = body.get("results") or [{}]
        error = results[0].get("error") or f"FCM error: HTTP {response.status_code}"
        return PushResult(
            False,
            self.platform,
            token,
            error=error,
            token_invalid=error == "NotRegistered",
        )
