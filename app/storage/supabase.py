from urllib.parse import quote

import httpx

from app.storage.base import BaseStorage
from app.storage.exceptions import StorageError


class SupabaseStorage(BaseStorage):
    """Downloads objects from a Supabase Storage bucket with the service-role key."""

    def __init__(
        self,
        url: str,
        service_role_key: str,
        bucket: str,
        timeout_seconds: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not url or not service_role_key:
            raise ValueError(
                "Supabase storage requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
            )
        self._base_url = url.rstrip("/")
        self._bucket = bucket
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            headers={
                "Authorization": f"Bearer {service_role_key}",
                "apikey": service_role_key,
            },
        )

    def object_url(self, storage_path: str) -> str:
        path = quote(storage_path.lstrip("/"))
        return f"{self._base_url}/storage/v1/object/{self._bucket}/{path}"

    def download(self, storage_path: str) -> bytes:
        try:
            response = self._client.get(self.object_url(storage_path))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(
                f"Failed to download file from storage: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to download file from storage: {exc}") from exc
        return response.content
