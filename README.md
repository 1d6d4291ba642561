# fadroma

Building blocks for contract-style programs that keep their state in a
byte-keyed store. Stored values are JSON; everything runs in memory.

## Modules

- `fadroma.platform`
  - `MemoryStorage`: an in-memory store with `get`, `set` and `remove` on
    byte keys and byte values. It also supports `in`, `len()` and iteration
    over its keys in sorted order.
  - `MockApi`: `canonical_address(human)` turns a string of 3 to 20 bytes
    (by default) into a fixed-length, zero-padded byte string, and
    `human_address(canonical)` turns it back. Bad input raises `GenericError`.
  - `Deps` (a storage and an API), `Env` (sender, block, contract address and
    code hash), `BlockInfo`, `Coin`, `HandleResponse` (messages, log, data).
  - The error family: `StdError` and its subclasses `GenericError`,
    `NotFoundError` and `UnauthorizedError`. Two errors compare equal when
    they have the same class and the same message.
  - `to_vec(value)` serialises to compact JSON bytes (bytes become base64,
    dataclasses become dicts); `from_slice(data)` parses them back. Both
    raise `GenericError` on failure.
- `fadroma.storage`
  - `save`, `load`, `remove` on a key, and `ns_save`, `ns_load`,
    `ns_remove` on a namespace plus a key; `concat(namespace, key)` joins
    them. `load` returns `None` when nothing is stored.
  - `IterableStorage(ns)`: a list kept in storage. It reserves the keys
    `ns + b"index"` (the length) and `ns` plus an 8-byte big-endian index for
    each item. It has `push` (returns the new item's index), `pop`,
    `get_at`, `update_at(storage, index, update)` (returns `False` when no
    item is stored there), `swap_remove` and `length`. The length is cached
    on the object once it has been written.
  - `swap_remove(storage, index)` moves the last item into `index` and
    returns it, or returns `None` when the removed item was the last one.
    An index out of range raises `GenericError` with the message
    `IterableStorage: index out of bounds.`.
  - `StorageIterator`, returned by `IterableStorage.iter(storage)`: iterates
    forwards, `reversed()` iterates from the back, `len()` gives the items
    left, and `next_back`, `nth(n)` and `nth_back(n)` take items from either
    end, returning `None` when exhausted.
- `fadroma.traits`
  - `Storable`: an abstract base for objects that implement `key()` and may
    override the class method `namespace()`. It provides `save`, `remove`,
    and the class methods `concat_key`, `load`, `static_save` and
    `static_remove`. `load` rebuilds the object with `cls(**data)` for a
    stored mapping and `cls(data)` otherwise.
  - `ReadonlyContext(storage)` with `load` and `load_ns`, and
    `WritableContext`, which adds `save` and `save_ns`; both return the
    context so calls can be chained.
- `fadroma.transaction_history`
  - `store_transfer`, `store_mint`, `store_burn`, `store_deposit` and
    `store_redeem` record a transaction for each distinct party, with ids
    from a global counter (`tx_count(storage)`). Transfers are also kept in a
    separate legacy transfer history.
  - `get_txs` and `get_transfers` return one page of an address's history,
    newest first, with the total number of entries: `(items, total)`.
  - Results are `RichTx` (with a `TxAction`: transfer, mint, burn, deposit or
    redeem, and a `TxCode`) and `Tx`; each has `to_dict()`.
- `fadroma.padding`
  - `space_pad(block_size, message)` pads bytes with spaces to a multiple of
    the block size; `pad_response(response, block_size=256)` returns the
    response with its data padded.
- `fadroma.voting`: a voting contract. `init(deps, env, options)` sets up the
  options, `vote(deps, env, option)` lets each sender vote once (raising
  `GenericError("Already voted")` or `GenericError("Option not found")`), and
  `query_status(deps)` returns `(option, count)` pairs.
- `fadroma.counter`: a contract holding one unsigned 64-bit value.
  `new(deps, initial_value)`, then `add`, `sub`, `mul`, `div` and `state`.
  Results outside the 64-bit unsigned range and division by zero raise
  `GenericError`. `handle(deps, msg)` takes a message such as
  `{"add": {"value": 5}}` as a dict or JSON bytes, and
  `query(deps, {"state": {}})` returns the JSON-encoded state.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from fadroma.platform import MemoryStorage
from fadroma.storage import IterableStorage

store = MemoryStorage()
numbers = IterableStorage(b"numbers")
for n in range(1, 7):
    numbers.push(store, n)

numbers.length(store)                # 6
numbers.get_at(store, 0)             # 1
numbers.swap_remove(store, 0)        # 6, which moved into slot 0
list(numbers.iter(store))            # [6, 2, 3, 4, 5]
list(reversed(numbers.iter(store)))  # [5, 4, 3, 2, 6]
```

## What it does not do

There is no persistent storage backend: `MemoryStorage` keeps everything in
memory. There is no chain, message router, token contract or command-line
tool; the contracts are plain functions called directly with a `Deps`.