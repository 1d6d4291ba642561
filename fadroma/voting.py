"""A small voting contract: set options at init, one vote per address."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any

from .platform import Deps, Env, GenericError, HandleResponse, NotFoundError
from .storage import load, save

_KEY_STATE = b"state"


@dataclass
class State:
    """The contract's whole state."""

    creator: bytes
    votes: list[tuple[str, int]] = field(default_factory=list)
    voted: list[bytes] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "creator": base64.b64encode(self.creator).decode("ascii"),
            "votes": [[option, count] for option, count in self.votes],
            "voted": [base64.b64encode(a).decode("ascii") for a in self.voted],
        }

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> State:
        return cls(
            creator=base64.b64decode(data["creator"]),
            votes=[(option, int(count)) for option, count in data["votes"]],
            voted=[base64.b64decode(a) for a in data["voted"]],
        )


def _load_state(deps: Deps) -> State:
    data = load(deps.storage, _KEY_STATE)
    if data is None:
        raise NotFoundError("State")
    return State._from_dict(data)


def _save_state(deps: Deps, state: State) -> None:
    save(deps.storage, _KEY_STATE, state._to_dict())


def init(deps: Deps, env: Env, options: list[str]) -> State:
    """Create the contract state with every option at zero votes."""
    state = State(
        creator=deps.api.canonical_address(env.sender),
        votes=[(option, 0) for option in options],
    )
    _save_state(deps, state)
    return state


def vote(deps: Deps, env: Env, option: str) -> HandleResponse:
    """Cast the sender's single vote for an option."""
    state = _load_state(deps)
    voter = deps.api.canonical_address(env.sender)
    if voter in state.voted:
        raise GenericError("Already voted")
    for index, (name, count) in enumerate(state.votes):
        if name == option:
            state.votes[index] = (name, count + 1)
            break
    else:
        raise GenericError("Option not found")
    state.voted.append(voter)
    _save_state(deps, state)
    return HandleResponse()


def query_status(deps: Deps) -> list[tuple[str, int]]:
    """The options and their vote counts, in the order given at init."""
    return list(_load_state(deps).votes)