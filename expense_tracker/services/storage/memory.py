"""In-memory key-value backend, used for tests and throwaway sessions."""

from typing import Optional

from expense_tracker.services.storage.interface import KeyValueStoreInterface


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dictionary-backed store. Contents vanish with the process."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        max_bytes: Optional[int] = None,
    ):
        super().__init__(max_bytes=max_bytes)
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        updated = dict(self._items)
        updated[key] = value
        self._check_capacity(updated)
        self._items = updated

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw stored strings."""
        return dict(self._items)
