import pytest

from fadroma.platform import GenericError, MemoryStorage, NotFoundError
from fadroma.storage import (
    IterableStorage,
    StorageIterator,
    concat,
    load,
    ns_load,
    ns_remove,
    ns_save,
    remove,
    save,
)


def test_save_load_remove():
    storage = MemoryStorage()
    assert load(storage, b"key") is None
    save(storage, b"key", {"value": 7})
    assert load(storage, b"key") == {"value": 7}
    remove(storage, b"key")
    assert load(storage, b"key") is None


def test_concat():
    assert concat(b"ns", b"key") == b"nskey"
    assert concat(b"", b"key") == b"key"


def test_namespaced_functions():
    storage = MemoryStorage()
    ns_save(storage, b"ns", b"key", [1, 2])
    assert ns_load(storage, b"ns", b"key") == [1, 2]
    assert load(storage, b"nskey") == [1, 2]
    assert ns_load(storage, b"other", b"key") is None
    ns_remove(storage, b"ns", b"key")
    assert ns_load(storage, b"ns", b"key") is None


def test_iterable_storage_insertion():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")

    for i in range(5):
        assert storage.push(deps_storage, i) == i

    assert storage.length(deps_storage) == 5

    storage.pop(deps_storage)
    assert storage.length(deps_storage) == 4

    storage = IterableStorage(b"numbers")
    assert storage.length(deps_storage) == 4

    storage.pop(deps_storage)
    assert storage.length(deps_storage) == 3
    assert IterableStorage(b"numbers").length(deps_storage) == 3

    storage.push(deps_storage, 3)
    assert storage.length(deps_storage) == 4
    assert IterableStorage(b"numbers").length(deps_storage) == 4

    assert storage.get_at(deps_storage, 0) == 0
    assert storage.get_at(deps_storage, 3) == 3
    assert storage.get_at(deps_storage, 4) is None

    def update(x):
        return x + 1

    assert storage.update_at(deps_storage, 4, update) is False
    assert storage.update_at(deps_storage, 3, update) is True
    assert storage.get_at(deps_storage, 3) == 4


def test_iterable_storage_iter():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    for i in range(1, 7):
        storage.push(deps_storage, i)

    it = storage.iter(deps_storage)
    assert len(it) == 6
    assert next(it) == 1
    assert len(it) == 5
    assert it.next_back() == 6
    assert len(it) == 4
    assert it.next_back() == 5
    assert len(it) == 3
    assert next(it) == 2
    assert len(it) == 2
    assert next(it) == 3
    assert len(it) == 1
    assert next(it) == 4
    assert len(it) == 0
    assert next(it, None) is None
    assert len(it) == 0
    assert it.next_back() is None

    it = storage.iter(deps_storage)
    assert it.nth_back(4) == 2
    assert it.nth(0) == 1
    assert it.nth_back(0) is None
    assert it.nth(0) is None


def test_iterable_storage_full_iteration():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    for i in range(1, 7):
        storage.push(deps_storage, i)
    assert list(storage.iter(deps_storage)) == [1, 2, 3, 4, 5, 6]
    assert list(reversed(storage.iter(deps_storage))) == [6, 5, 4, 3, 2, 1]


def test_iterator_missing_item_raises():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    storage.push(deps_storage, 1)
    ns_remove(deps_storage, b"numbers", (0).to_bytes(8, "big"))
    with pytest.raises(NotFoundError):
        next(storage.iter(deps_storage))


def test_storage_iterator_direct():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"ns")
    storage.push(deps_storage, "a")
    storage.push(deps_storage, "b")
    it = StorageIterator(deps_storage, b"ns", 2)
    assert list(it) == ["a", "b"]
    assert len(it) == 0


def test_iterable_storage_swap_remove():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    for i in range(1, 7):
        storage.push(deps_storage, i)

    assert storage.length(deps_storage) == 6

    returned = storage.swap_remove(deps_storage, 0)
    length = storage.length(deps_storage)
    assert length == 5
    item = storage.get_at(deps_storage, 0)
    assert item == 6
    assert item == returned
    assert storage.get_at(deps_storage, length - 1) == 5

    returned = storage.swap_remove(deps_storage, 1)
    length = storage.length(deps_storage)
    assert length == 4
    item = storage.get_at(deps_storage, 1)
    assert item == 5
    assert item == returned
    assert storage.get_at(deps_storage, length - 1) == 4

    returned = storage.swap_remove(deps_storage, 3)
    length = storage.length(deps_storage)
    assert length == 3
    assert storage.get_at(deps_storage, 2) == 3
    assert returned is None
    assert storage.get_at(deps_storage, length - 2) == 5

    with pytest.raises(GenericError) as err:
        storage.swap_remove(deps_storage, 3)
    assert storage.length(deps_storage) == 3
    assert err.value == GenericError("IterableStorage: index out of bounds.")

    returned = storage.swap_remove(deps_storage, 1)
    assert storage.length(deps_storage) == 2
    item = storage.get_at(deps_storage, 1)
    assert item == 3
    assert item == returned
    assert storage.get_at(deps_storage, 0) == 6

    returned = storage.swap_remove(deps_storage, 0)
    item = storage.get_at(deps_storage, 0)
    assert storage.length(deps_storage) == 1
    assert item == 3
    assert item == returned

    returned = storage.swap_remove(deps_storage, 0)
    assert storage.get_at(deps_storage, 0) is None
    assert returned is None
    assert storage.length(deps_storage) == 0


def test_swap_remove_from_front_repeatedly():
    num_items = 20
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    for i in range(num_items):
        storage.push(deps_storage, i)

    for i in reversed(range(num_items)):
        returned = storage.swap_remove(deps_storage, 0)
        if storage.length(deps_storage) != 0:
            item = storage.get_at(deps_storage, 0)
            assert item == returned
            assert item == i

    assert storage.length(deps_storage) == 0


def test_swap_remove_from_back_repeatedly():
    num_items = 20
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    for i in range(num_items):
        storage.push(deps_storage, i)

    for i in reversed(range(num_items)):
        returned = storage.swap_remove(deps_storage, i)
        assert returned is None
        if storage.length(deps_storage) != 0:
            index = i - 1
            assert storage.get_at(deps_storage, index) == index

    assert storage.length(deps_storage) == 0


def test_swap_remove_empty_raises():
    storage = IterableStorage(b"numbers")
    with pytest.raises(GenericError):
        storage.swap_remove(MemoryStorage(), 0)


def test_pop_on_empty_stays_at_zero():
    deps_storage = MemoryStorage()
    storage = IterableStorage(b"numbers")
    storage.pop(deps_storage)
    assert storage.length(deps_storage) == 0
    assert storage.push(deps_storage, 9) == 0