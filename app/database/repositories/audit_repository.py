from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.models import AuditEntry


class AuditRepository:
    """Append-only writes to the audit_logs table."""

    def record(self, entry: AuditEntry) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO audit_logs
                    (action, resource, actor_id, resource_id, before_state,
                     after_state, project_id, success, error_message)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    entry.action,
                    entry.resource,
                    entry.actor_id,
                    entry.resource_id,
                    Jsonb(entry.before) if entry.before is not None else None,
                    Jsonb(entry.after) if entry.after is not None else None,
                    entry.project_id,
                    entry.success,
                    entry.error_message,
                ),
            )
            conn.commit()
