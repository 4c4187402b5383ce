from abc import ABC, abstractmethod


class BaseStorage(ABC):
    @abstractmethod
    def download(self, storage_path: str) -> bytes:
        """Return the file's bytes.

        Raises:
            StorageError: if the file cannot be read.
        """
        raise NotImplementedError
