"""Mixins that give objects and contexts convenient access to storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from .platform import MemoryStorage, from_slice, to_vec
from .storage import concat
from .storage import load as storage_load
from .storage import remove as storage_remove
from .storage import save as storage_save

_S = TypeVar("_S", bound="Storable")


class Storable(ABC):
    """An object that knows the key it is stored under.

    Subclasses implement ``key()`` and may override ``namespace()``. Stored
    values are rebuilt with ``cls(**data)`` for mappings, ``cls(data)`` otherwise.
    """

    @abstractmethod
    def key(self) -> bytes:
        """The storage key for this object."""

    def save(self, storage: MemoryStorage) -> None:
        type(self).static_save(storage, self.key(), self)

    def remove(self, storage: MemoryStorage) -> None:
        type(self).static_remove(storage, self.key())

    @classmethod
    def namespace(cls) -> bytes:
        return b""

    @classmethod
    def concat_key(cls, key: bytes) -> bytes:
        return concat(cls.namespace(), key)

    @classmethod
    def load(cls: type[_S], storage: MemoryStorage, key: bytes) -> _S | None:
        data = storage_load(storage, cls.concat_key(key))
        if data is None:
            return None
        if isinstance(data, dict):
            return cls(**data)
        return cls(data)  # type: ignore[call-arg]

    @classmethod
    def static_save(cls, storage: MemoryStorage, key: bytes, item: Storable) -> None:
        storage_save(storage, cls.concat_key(key), item)

    @classmethod
    def static_remove(cls, storage: MemoryStorage, key: bytes) -> None:
        storage_remove(storage, cls.concat_key(key))


class ReadonlyContext:
    """A context with read access to a storage."""

    def __init__(self, storage: MemoryStorage) -> None:
        self.storage = storage

    def load(self, key: bytes) -> Any:
        data = self.storage.get(key)
        if data is None:
            return None
        return from_slice(data)

    def load_ns(self, ns: bytes, key: bytes) -> Any:
        return self.load(concat(ns, key))


class WritableContext(ReadonlyContext):
    """A context with read and write access to a storage."""

    def save(self, key: bytes, val: Any) -> WritableContext:
        self.storage.set(key, to_vec(val))
        return self

    def save_ns(self, ns: bytes, key: bytes, val: Any) -> WritableContext:
        return self.save(concat(ns, key), val)