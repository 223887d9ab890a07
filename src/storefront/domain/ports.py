# src/storefront/domain/ports.py
from abc import ABC, abstractmethod
from collections.abc import Sequence


class KeyValueStorePort(ABC):
    """
    Abstract interface of the durable, string-keyed, string-valued store.
    Every storage adapter MUST implement this interface.
    Services only know this interface and never touch a backend directly.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """
        Returns the stored value, or None if the key does not exist.

        Raises:
            StorageError: If the backend could not be read.
        """
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Stores the value, replacing any previous value under that key."""
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Deletes the key. Deleting a missing key is not an error."""
        ...

    @abstractmethod
    async def multi_remove(self, keys: Sequence[str]) -> None:
        """Deletes several keys at once."""
        ...

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """Lists every key currently stored."""
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class StorageError(Exception):
    def __init__(self, operation: str, key: str | None, detail: str):
        target = f" for key '{key}'" if key is not None else ""
        super().__init__(f"Storage {operation} failed{target}: {detail}")
        self.operation = operation
        self.key = key
        self.detail = detail
