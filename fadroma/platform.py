"""Core contract runtime types: errors, storage, address API and environment."""

from __future__ import annotations

import base64
import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Iterator


class StdError(Exception):
    """Base class for every error a contract reports."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StdError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class GenericError(StdError):
    """An error carrying a free-form message."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class NotFoundError(StdError):
    """Raised when an expected item is missing."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind


class UnauthorizedError(StdError):
    """Raised when the caller may not perform an action."""

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class MemoryStorage:
    """In-memory key/value store with byte keys and byte values."""

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}

    def get(self, key: bytes) -> bytes | None:
        return self._data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        self._data[bytes(key)] = bytes(value)

    def remove(self, key: bytes) -> None:
        self._data.pop(bytes(key), None)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (bytes, bytearray)) and bytes(key) in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[bytes]:
        return iter(sorted(self._data))


class MockApi:
    """Converts between human-readable and canonical (fixed-length) addresses."""

    def __init__(self, canonical_length: int = 20) -> None:
        self.canonical_length = canonical_length

    def canonical_address(self, human: str) -> bytes:
        raw = human.encode("utf-8")
        if len(raw) < 3:
            raise GenericError("Invalid input: human address too short")
        if len(raw) > self.canonical_length:
            raise GenericError("Invalid input: human address too long")
        return raw.ljust(self.canonical_length, b"\0")

    def human_address(self, canonical: bytes) -> str:
        if len(canonical) != self.canonical_length:
            raise GenericError("Invalid input: canonical address length not correct")
        try:
            return bytes(canonical).rstrip(b"\0").decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GenericError(f"Invalid input: {exc}") from exc


@dataclass
class Deps:
    """The storage and address API a contract runs against."""

    storage: MemoryStorage = field(default_factory=MemoryStorage)
    api: MockApi = field(default_factory=MockApi)


@dataclass(frozen=True)
class Coin:
    """An amount of a single denomination."""

    denom: str
    amount: int


@dataclass(frozen=True)
class BlockInfo:
    """Information about the block a message executes in."""

    height: int = 12345
    time: int = 1571797419
    chain_id: str = "cosmos-testnet-14002"


@dataclass
class Env:
    """The environment a message executes in."""

    sender: str
    block: BlockInfo = field(default_factory=BlockInfo)
    contract_address: str = "cosmos2contract"
    contract_code_hash: str = ""


@dataclass
class HandleResponse:
    """The result of executing a message."""

    messages: list[Any] = field(default_factory=list)
    log: list[tuple[str, str]] = field(default_factory=list)
    data: bytes | None = None


def _encode(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def to_vec(value: Any) -> bytes:
    """Serialize a value to compact JSON bytes."""
    try:
        return json.dumps(value, default=_encode, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise GenericError(f"Error serializing data: {exc}") from exc


def from_slice(data: bytes) -> Any:
    """Deserialize JSON bytes into Python values."""
    try:
        return json.loads(bytes(data))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise GenericError(f"Error parsing data: {exc}") from exc