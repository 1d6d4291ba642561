"""A counter contract holding one unsigned 64-bit value, changed by arithmetic messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .platform import Deps, GenericError, HandleResponse, MemoryStorage, NotFoundError, from_slice, to_vec
from .storage import load, save

_U64_MAX = 2**64 - 1


def _check_u64(value: Any, what: str = "value") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise GenericError(f"Invalid {what}: expected an unsigned 64-bit integer")
    if not 0 <= value <= _U64_MAX:
        raise GenericError(f"Invalid {what}: {value} is outside the unsigned 64-bit range")
    return value


@dataclass
class State:
    """The stored state of the counter."""

    value: int

    KEY_STATE = b"state"

    @staticmethod
    def save_state(storage: MemoryStorage, state: State) -> None:
        save(storage, State.KEY_STATE, {"value": state.value})

    @staticmethod
    def load_state(storage: MemoryStorage) -> State:
        data = load(storage, State.KEY_STATE)
        if data is None:
            raise NotFoundError("State")
        try:
            return State(value=_check_u64(data["value"]))
        except (KeyError, TypeError) as exc:
            raise GenericError(f"Error parsing data: {exc}") from exc


@dataclass(frozen=True)
class StateResponse:
    """The answer to a state query."""

    value: int

    def to_dict(self) -> dict[str, int]:
        return {"value": self.value}


def _apply(deps: Deps, value: int, op: Callable[[int, int], int]) -> HandleResponse:
    operand = _check_u64(value)
    state = State.load_state(deps.storage)
    result = op(state.value, operand)
    if not 0 <= result <= _U64_MAX:
        raise GenericError("Arithmetic overflow")
    state.value = result
    State.save_state(deps.storage, state)
    return HandleResponse()


def new(deps: Deps, initial_value: int) -> None:
    """Initialise the counter with a starting value."""
    State.save_state(deps.storage, State(value=_check_u64(initial_value, "initial_value")))


def add(deps: Deps, value: int) -> HandleResponse:
    return _apply(deps, value, lambda a, b: a + b)


def sub(deps: Deps, value: int) -> HandleResponse:
    return _apply(deps, value, lambda a, b: a - b)


def mul(deps: Deps, value: int) -> HandleResponse:
    return _apply(deps, value, lambda a, b: a * b)


def _floor_div(a: int, b: int) -> int:
    if b == 0:
        raise GenericError("Division by zero")
    return a // b


def div(deps: Deps, value: int) -> HandleResponse:
    return _apply(deps, value, _floor_div)


def state(deps: Deps) -> StateResponse:
    """The current counter value."""
    return StateResponse(value=State.load_state(deps.storage).value)


_HANDLERS: dict[str, Callable[[Deps, int], HandleResponse]] = {
    "add": add,
    "sub": sub,
    "mul": mul,
    "div": div,
}


def _variant(msg: Any) -> tuple[str, dict[str, Any]]:
    if isinstance(msg, (bytes, bytearray)):
        msg = from_slice(msg)
    if not isinstance(msg, dict) or len(msg) != 1:
        raise GenericError("Error parsing message: expected an object with a single variant")
    (name, body), = msg.items()
    if not isinstance(body, dict):
        raise GenericError(f"Error parsing message: variant {name!r} must hold an object")
    return name, body


def handle(deps: Deps, msg: Any) -> HandleResponse:
    """Dispatch a message such as ``{"add": {"value": 5}}``, given as a dict or JSON bytes."""
    name, body = _variant(msg)
    handler = _HANDLERS.get(name)
    if handler is None:
        raise GenericError(f"Error parsing message: unknown variant {name!r}")
    if set(body) != {"value"}:
        raise GenericError(f"Error parsing message: {name!r} takes exactly the field 'value'")
    return handler(deps, body["value"])


def query(deps: Deps, msg: Any) -> bytes:
    """Answer ``{"state": {}}`` with the JSON-encoded state response."""
    name, body = _variant(msg)
    if name != "state":
        raise GenericError(f"Error parsing message: unknown variant {name!r}")
    if body:
        raise GenericError("Error parsing message: 'state' takes no fields")
    return to_vec(state(deps).to_dict())