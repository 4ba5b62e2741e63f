"""
Abstract Key-Value Storage Interface

DESIGN DECISION: Persistence is a plain string key-value store.
This allows us to:
1. Keep the durable format identical to the browser's local storage
2. Use in-memory storage for testing
3. Swap the JSON file for another backend later
4. Keep the expense engine decoupled from the storage medium

The interface is intentionally tiny - get, set, remove.
Everything expense-specific lives in the PersistenceGateway.
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional

from expense_tracker.exceptions import StorageQuotaExceededError


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for string key-value storage.

    Implementations raise PersistenceError (or a subclass) on failure.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self._max_bytes = max_bytes

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageQuotaExceededError: If the write exceeds capacity
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    def _check_capacity(self, items: Mapping[str, str]) -> None:
        """Raise if the given contents would exceed max_bytes."""
        if self._max_bytes is None:
            return
        size = sum(
            len(key.encode("utf-8")) + len(value.encode("utf-8"))
            for key, value in items.items()
        )
        if size > self._max_bytes:
            raise StorageQuotaExceededError(
                f"Storage quota exceeded: {size} bytes > {self._max_bytes} bytes"
            )
