from pathlib import Path

from app.storage.base import BaseStorage
from app.storage.exceptions import StorageError


class LocalStorage(BaseStorage):
    """Reads files below a root directory on the local disk."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def download(self, storage_path: str) -> bytes:
        path = self._resolve_path(storage_path)
        if not path.is_file():
            raise StorageError(f"File not found: {storage_path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read file {storage_path}: {exc}") from exc

    def _resolve_path(self, storage_path: str) -> Path:
        root = self._files_root.resolve()
        path = (root / storage_path.lstrip("/")).resolve()
        if not path.is_relative_to(root):
            raise StorageError(f"Storage path escapes files root: {storage_path}")
        return path
