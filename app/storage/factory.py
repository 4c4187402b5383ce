from pathlib import Path

from app.config.settings import Settings
from app.storage.base import BaseStorage
from app.storage.local import LocalStorage
from app.storage.supabase import SupabaseStorage


class StorageFactory:
    BACKENDS = ("local", "supabase")

    @classmethod
    def create(cls, settings: Settings) -> BaseStorage:
        backend = settings.storage_backend
        if backend == "local":
            return LocalStorage(files_root=Path(settings.storage_files_root))
        if backend == "supabase":
            return SupabaseStorage(
                url=settings.supabase_url,
                service_role_key=settings.supabase_service_role_key,
                bucket=settings.supabase_storage_bucket,
                timeout_seconds=settings.storage_timeout_seconds,
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Supported: {', '.join(cls.BACKENDS)}"
        )
