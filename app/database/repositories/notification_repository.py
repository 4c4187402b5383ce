from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.models import DeviceToken
from app.notifications.models import Notification


class NotificationRepository:
    """In-app notification rows and push device tokens."""

    def create(self, notification: Notification) -> int:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO notifications
                        (user_id, type, title, message, severity, category,
                         action_url, data)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        notification.user_id,
                        notification.type,
                        notification.title,
                        notification.message,
                        notification.severity,
                        notification.category,
                        notification.action_url,
                        Jsonb(notification.data),
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError("INSERT into notifications returned no row")
        return int(row[0])

    def active_device_tokens(self, user_id: str) -> list[DeviceToken]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT user_id, token, platform
                    FROM device_tokens
                    WHERE user_id = %s AND is_active
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()
        return [
            DeviceToken(user_id=str(r["user_id"]), token=r["token"], platform=r["platform"])
            for r in rows
        ]

    def deactivate_token(self, token: str) -> None:
        with get_connection() as conn:
            conn.execute("UPDATE device_tokens SET is_active = FALSE WHERE token = %s", (token,))
            conn.commit()
