"""Per-address transaction history for a fungible token contract."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import IntEnum
from itertools import islice
from typing import Any, Callable

from .platform import BlockInfo, Coin, GenericError, MemoryStorage, MockApi
from .storage import IterableStorage, load, save

PREFIX_TXS = b"transactions"
PREFIX_TRANSFERS = b"transfers"
_KEY_TX_COUNT = b"tx_count"


class TxCode(IntEnum):
    """The kind of a stored transaction."""

    TRANSFER = 0
    MINT = 1
    BURN = 2
    DEPOSIT = 3
    REDEEM = 4

    @classmethod
    def from_u8(cls, n: int) -> TxCode:
        try:
            return cls(n)
        except ValueError:
            raise GenericError(
                f"Unexpected Tx code in transaction history: {n} Storage is corrupted."
            ) from None


_ROLES: dict[TxCode, tuple[str, ...]] = {
    TxCode.TRANSFER: ("from", "sender", "recipient"),
    TxCode.MINT: ("minter", "recipient"),
    TxCode.BURN: ("burner", "owner"),
    TxCode.DEPOSIT: (),
    TxCode.REDEEM: (),
}


@dataclass(frozen=True)
class TxAction:
    """What a transaction did, with the human addresses involved in it."""

    code: TxCode
    addresses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        expected = len(_ROLES[self.code])
        if len(self.addresses) != expected:
            raise ValueError(
                f"{self.code.name.lower()} takes {expected} addresses, "
                f"got {len(self.addresses)}"
            )

    @classmethod
    def transfer(cls, from_: str, sender: str, recipient: str) -> TxAction:
        return cls(TxCode.TRANSFER, (from_, sender, recipient))

    @classmethod
    def mint(cls, minter: str, recipient: str) -> TxAction:
        return cls(TxCode.MINT, (minter, recipient))

    @classmethod
    def burn(cls, burner: str, owner: str) -> TxAction:
        return cls(TxCode.BURN, (burner, owner))

    @classmethod
    def deposit(cls) -> TxAction:
        return cls(TxCode.DEPOSIT)

    @classmethod
    def redeem(cls) -> TxAction:
        return cls(TxCode.REDEEM)

    @property
    def roles(self) -> dict[str, str]:
        return dict(zip(_ROLES[self.code], self.addresses))

    def to_dict(self) -> dict[str, Any]:
        return {self.code.name.lower(): self.roles}


def _coin_dict(coin: Coin) -> dict[str, str]:
    return {"denom": coin.denom, "amount": str(coin.amount)}


@dataclass(frozen=True)
class Tx:
    """A transfer in the legacy history format."""

    id: int
    from_: str
    sender: str
    receiver: str
    coins: Coin
    memo: str | None = None
    block_time: int | None = None
    block_height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "from": self.from_,
            "sender": self.sender,
            "receiver": self.receiver,
            "coins": _coin_dict(self.coins),
        }
        if self.memo is not None:
            result["memo"] = self.memo
        result["block_time"] = self.block_time
        result["block_height"] = self.block_height
        return result


@dataclass(frozen=True)
class RichTx:
    """A transaction of any kind."""

    id: int
    action: TxAction
    coins: Coin
    memo: str | None
    block_time: int
    block_height: int

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "action": self.action.to_dict(),
            "coins": _coin_dict(self.coins),
        }
        if self.memo is not None:
            result["memo"] = self.memo
        result["block_time"] = self.block_time
        result["block_height"] = self.block_height
        return result


# Stored forms


def _encode_addr(address: bytes) -> str:
    return base64.b64encode(bytes(address)).decode("ascii")


def _decode_addr(encoded: str) -> bytes:
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise GenericError(f"Error parsing data: {exc}") from exc


def _stored_coin(amount: int, denom: str) -> dict[str, str]:
    return {"denom": denom, "amount": str(amount)}


def _loaded_coin(data: dict[str, Any]) -> Coin:
    return Coin(denom=data["denom"], amount=int(data["amount"]))


def _stored_action(code: TxCode, *addresses: bytes) -> dict[str, Any]:
    slots: list[str | None] = [_encode_addr(a) for a in addresses]
    slots += [None] * (3 - len(slots))
    return {
        "tx_type": int(code),
        "address1": slots[0],
        "address2": slots[1],
        "address3": slots[2],
    }


def _humanize_action(api: MockApi, stored: dict[str, Any]) -> TxAction:
    code = TxCode.from_u8(stored["tx_type"])
    count = len(_ROLES[code])
    slots = [stored.get("address1"), stored.get("address2"), stored.get("address3")]
    needed = slots[:count]
    if any(slot is None for slot in needed):
        raise GenericError(
            f"Missing address in stored {code.name.capitalize()} transaction. "
            "Storage is corrupt"
        )
    humans = tuple(api.human_address(_decode_addr(slot)) for slot in needed)
    return TxAction(code, humans)


def _humanize_rich(api: MockApi, stored: dict[str, Any]) -> RichTx:
    return RichTx(
        id=stored["id"],
        action=_humanize_action(api, stored["action"]),
        coins=_loaded_coin(stored["coins"]),
        memo=stored.get("memo"),
        block_time=stored["block_time"],
        block_height=stored["block_height"],
    )


def _humanize_transfer(api: MockApi, stored: dict[str, Any]) -> Tx:
    return Tx(
        id=stored["id"],
        from_=api.human_address(_decode_addr(stored["from"])),
        sender=api.human_address(_decode_addr(stored["sender"])),
        receiver=api.human_address(_decode_addr(stored["receiver"])),
        coins=_loaded_coin(stored["coins"]),
        memo=stored.get("memo"),
        block_time=stored["block_time"],
        block_height=stored["block_height"],
    )


def _rich_tx(
    tx_id: int,
    action: dict[str, Any],
    amount: int,
    denom: str,
    memo: str | None,
    block: BlockInfo,
) -> dict[str, Any]:
    return {
        "id": tx_id,
        "action": action,
        "coins": _stored_coin(amount, denom),
        "memo": memo,
        "block_time": block.time,
        "block_height": block.height,
    }


# Storage functions


def _namespace(*parts: bytes) -> bytes:
    return b"".join(len(part).to_bytes(2, "big") + bytes(part) for part in parts)


def tx_count(storage: MemoryStorage) -> int:
    """The number of transactions recorded so far."""
    stored = load(storage, _KEY_TX_COUNT)
    return 0 if stored is None else int(stored)


def _increment_tx_count(store: MemoryStorage) -> int:
    tx_id = tx_count(store) + 1
    save(store, _KEY_TX_COUNT, tx_id)
    return tx_id


def _append_tx(store: MemoryStorage, tx: dict[str, Any], for_address: bytes) -> None:
    IterableStorage(_namespace(PREFIX_TXS, for_address)).push(store, tx)


def _append_transfer(
    store: MemoryStorage, transfer: dict[str, Any], for_address: bytes
) -> None:
    IterableStorage(_namespace(PREFIX_TRANSFERS, for_address)).push(store, transfer)


def store_transfer(
    store: MemoryStorage,
    owner: bytes,
    sender: bytes,
    receiver: bytes,
    amount: int,
    denom: str,
    memo: str | None,
    block: BlockInfo,
) -> None:
    """Record a transfer in the histories of every distinct party."""
    tx_id = _increment_tx_count(store)
    transfer = {
        "id": tx_id,
        "from": _encode_addr(owner),
        "sender": _encode_addr(sender),
        "receiver": _encode_addr(receiver),
        "coins": _stored_coin(amount, denom),
        "memo": memo,
        "block_time": block.time,
        "block_height": block.height,
    }
    action = _stored_action(TxCode.TRANSFER, owner, sender, receiver)
    tx = _rich_tx(tx_id, action, amount, denom, memo, block)

    parties = []
    if owner != sender and owner != receiver:
        parties.append(owner)
    if sender != receiver:
        parties.append(sender)
    parties.append(receiver)
    for party in parties:
        _append_tx(store, tx, party)
        _append_transfer(store, transfer, party)


def store_mint(
    store: MemoryStorage,
    minter: bytes,
    recipient: bytes,
    amount: int,
    denom: str,
    memo: str | None,
    block: BlockInfo,
) -> None:
    """Record a mint for the recipient and the minter."""
    tx_id = _increment_tx_count(store)
    tx = _rich_tx(
        tx_id, _stored_action(TxCode.MINT, minter, recipient), amount, denom, memo, block
    )
    if minter != recipient:
        _append_tx(store, tx, recipient)
    _append_tx(store, tx, minter)


def store_burn(
    store: MemoryStorage,
    owner: bytes,
    burner: bytes,
    amount: int,
    denom: str,
    memo: str | None,
    block: BlockInfo,
) -> None:
    """Record a burn for the owner and the burner."""
    tx_id = _increment_tx_count(store)
    tx = _rich_tx(
        tx_id, _stored_action(TxCode.BURN, burner, owner), amount, denom, memo, block
    )
    if burner != owner:
        _append_tx(store, tx, owner)
    _append_tx(store, tx, burner)


def store_deposit(
    store: MemoryStorage, recipient: bytes, amount: int, denom: str, block: BlockInfo
) -> None:
    """Record a deposit for the recipient."""
    tx_id = _increment_tx_count(store)
    tx = _rich_tx(tx_id, _stored_action(TxCode.DEPOSIT), amount, denom, None, block)
    _append_tx(store, tx, recipient)


def store_redeem(
    store: MemoryStorage, redeemer: bytes, amount: int, denom: str, block: BlockInfo
) -> None:
    """Record a redemption for the redeemer."""
    tx_id = _increment_tx_count(store)
    tx = _rich_tx(tx_id, _stored_action(TxCode.REDEEM), amount, denom, None, block)
    _append_tx(store, tx, redeemer)


def _page(
    storage: MemoryStorage,
    ns: bytes,
    page: int,
    page_size: int,
    humanize: Callable[[dict[str, Any]], Any],
) -> tuple[list[Any], int]:
    collection = IterableStorage(ns)
    total = collection.length(storage)
    if total == 0:
        return [], 0
    start = page * page_size
    newest_first = reversed(collection.iter(storage))
    try:
        items = [humanize(stored) for stored in islice(newest_first, start, start + page_size)]
    except (KeyError, TypeError, ValueError) as exc:
        raise GenericError(f"Error parsing data: {exc}") from exc
    return items, total


def get_txs(
    api: MockApi, storage: MemoryStorage, for_address: bytes, page: int, page_size: int
) -> tuple[list[RichTx], int]:
    """A page of an address's transactions, newest first, and their total count."""
    return _page(
        storage,
        _namespace(PREFIX_TXS, for_address),
        page,
        page_size,
        lambda stored: _humanize_rich(api, stored),
    )


def get_transfers(
    api: MockApi, storage: MemoryStorage, for_address: bytes, page: int, page_size: int
) -> tuple[list[Tx], int]:
    """A page of an address's transfers, newest first, and their total count."""
    return _page(
        storage,
        _namespace(PREFIX_TRANSFERS, for_address),
        page,
        page_size,
        lambda stored: _humanize_transfer(api, stored),
    )