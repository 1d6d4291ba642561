"""Key/value storage helpers and an indexable, iterable collection on top of them."""

from __future__ import annotations

from typing import Any, Callable, Iterator

from .platform import GenericError, MemoryStorage, NotFoundError, from_slice, to_vec

_OUT_OF_BOUNDS = "IterableStorage: index out of bounds."


def save(storage: MemoryStorage, key: bytes, value: Any) -> None:
    """Save a value under a key."""
    storage.set(key, to_vec(value))


def remove(storage: MemoryStorage, key: bytes) -> None:
    """Remove the value stored under a key."""
    storage.remove(key)


def load(storage: MemoryStorage, key: bytes) -> Any:
    """Load the value stored under a key, or None if there is none."""
    data = storage.get(key)
    if data is None:
        return None
    return from_slice(data)


def concat(namespace: bytes, key: bytes) -> bytes:
    """Join a namespace and a key into a namespaced key."""
    return bytes(namespace) + bytes(key)


def ns_save(storage: MemoryStorage, namespace: bytes, key: bytes, value: Any) -> None:
    """Save a value under a namespaced key."""
    save(storage, concat(namespace, key), value)


def ns_remove(storage: MemoryStorage, namespace: bytes, key: bytes) -> None:
    """Remove the value under a namespaced key."""
    remove(storage, concat(namespace, key))


def ns_load(storage: MemoryStorage, namespace: bytes, key: bytes) -> Any:
    """Load the value under a namespaced key."""
    return load(storage, concat(namespace, key))


def _index_key(index: int) -> bytes:
    return index.to_bytes(8, "big")


class IterableStorage:
    """A growable collection of items stored under a namespace.

    Reserves the keys ``ns + b"index"`` and ``ns + <8-byte big-endian N>``.
    """

    KEY_INDEX = b"index"

    def __init__(self, ns: bytes) -> None:
        self.ns = bytes(ns)
        self._len: int | None = None

    def iter(self, storage: MemoryStorage) -> StorageIterator:
        return StorageIterator(storage, self.ns, self.length(storage))

    def push(self, storage: MemoryStorage, value: Any) -> int:
        """Append a value and return the index it was stored at."""
        index = self._increment_index(storage)
        ns_save(storage, self.ns, _index_key(index), value)
        return index

    def pop(self, storage: MemoryStorage) -> None:
        """Remove the item at the end of the collection."""
        index = self._decrement_index(storage)
        ns_remove(storage, self.ns, _index_key(index))

    def get_at(self, storage: MemoryStorage, index: int) -> Any:
        return ns_load(storage, self.ns, _index_key(index))

    def update_at(
        self, storage: MemoryStorage, index: int, update: Callable[[Any], Any]
    ) -> bool:
        """Replace the item at ``index`` with ``update(item)``; False if there is no item."""
        item = self.get_at(storage, index)
        if item is None:
            return False
        ns_save(storage, self.ns, _index_key(index), update(item))
        return True

    def swap_remove(self, storage: MemoryStorage, index: int) -> Any:
        """Remove the item at ``index``, moving the last item into its place.

        Returns the moved item, or None when the removed item was the last one.
        """
        length = self.length(storage)
        if length == 0 or index < 0 or index > length - 1:
            raise GenericError(_OUT_OF_BOUNDS)
        tail = length - 1
        if index == tail:
            self.pop(storage)
            return None
        last_item = self.get_at(storage, tail)
        if last_item is None:
            raise NotFoundError(f"IterableStorage item {tail}")
        ns_save(storage, self.ns, _index_key(index), last_item)
        self.pop(storage)
        return last_item

    def length(self, storage: MemoryStorage) -> int:
        if self._len is not None:
            return self._len
        stored = ns_load(storage, self.ns, self.KEY_INDEX)
        return 0 if stored is None else int(stored)

    def _increment_index(self, storage: MemoryStorage) -> int:
        current = self.length(storage)
        new = current + 1
        ns_save(storage, self.ns, self.KEY_INDEX, new)
        self._len = new
        return current

    def _decrement_index(self, storage: MemoryStorage) -> int:
        new = max(self.length(storage) - 1, 0)
        ns_save(storage, self.ns, self.KEY_INDEX, new)
        self._len = new
        return new


class StorageIterator:
    """Double-ended iterator over the items of an IterableStorage."""

    def __init__(self, storage: MemoryStorage, ns: bytes, length: int) -> None:
        self.storage = storage
        self.ns = bytes(ns)
        self.current = 0
        self.end = length

    def _load(self, index: int) -> Any:
        item = ns_load(self.storage, self.ns, _index_key(index))
        if item is None:
            raise NotFoundError(f"IterableStorage item {index}")
        return item

    def __iter__(self) -> StorageIterator:
        return self

    def __next__(self) -> Any:
        if self.current >= self.end:
            raise StopIteration
        index = self.current
        self.current += 1
        return self._load(index)

    def __len__(self) -> int:
        return max(self.end - self.current, 0)

    def __reversed__(self) -> Iterator[Any]:
        while self.current < self.end:
            yield self.next_back()

    def next_back(self) -> Any:
        """Take the item from the back, or None when exhausted."""
        if self.current >= self.end:
            return None
        self.end -= 1
        return self._load(self.end)

    def nth(self, n: int) -> Any:
        """Skip ``n`` items from the front and return the next one, or None."""
        self.current += n
        return next(self, None)

    def nth_back(self, n: int) -> Any:
        """Skip ``n`` items from the back and return the next one, or None."""
        self.end = max(self.end - n, 0)
        return self.next_back()