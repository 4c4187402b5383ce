from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.vision.models import ProjectInfo


class FileRepository:
    """Read-only access to the application's files and projects tables."""

    def file_exists(self, file_id: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 FROM files WHERE id = %s", (file_id,))
                row = cur.fetchone()
        return row is not None

    def find_project(self, project_id: str) -> ProjectInfo | None:
        """Load the project a job was submitted under, for name matching."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT id, name, address FROM projects WHERE id = %s",
                    (project_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return ProjectInfo(id=str(row["id"]), name=row["name"], address=row["address"])
