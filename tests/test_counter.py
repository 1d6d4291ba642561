import pytest

from fadroma.counter import (
    State,
    StateResponse,
    add,
    div,
    handle,
    mul,
    new,
    query,
    state,
    sub,
)
from fadroma.platform import Deps, GenericError, NotFoundError, from_slice


@pytest.fixture
def deps():
    d = Deps()
    new(d, 10)
    return d


def test_new_sets_initial_value(deps):
    assert state(deps) == StateResponse(value=10)


def test_state_round_trip_through_storage():
    d = Deps()
    State.save_state(d.storage, State(value=42))
    assert State.load_state(d.storage) == State(value=42)


def test_load_state_missing_raises():
    with pytest.raises(NotFoundError):
        State.load_state(Deps().storage)


def test_add_then_sub_restores(deps):
    add(deps, 55)
    assert state(deps).value > 10
    sub(deps, 55)
    assert state(deps).value == 10


def test_mul_then_div_restores(deps):
    mul(deps, 7)
    div(deps, 7)
    assert state(deps).value == 10


def test_div_floors(deps):
    div(deps, 3)
    assert state(deps).value == 10 // 3


def test_sub_underflow_raises_and_keeps_state(deps):
    with pytest.raises(GenericError):
        sub(deps, 11)
    assert state(deps).value == 10


def test_div_by_zero_raises(deps):
    with pytest.raises(GenericError):
        div(deps, 0)
    assert state(deps).value == 10


def test_mul_overflow_raises(deps):
    with pytest.raises(GenericError):
        mul(deps, 2**63)


def test_handle_dispatches_dict(deps):
    handle(deps, {"add": {"value": 55}})
    handle(deps, {"sub": {"value": 55}})
    assert state(deps).value == 10


def test_handle_accepts_json_bytes(deps):
    handle(deps, b'{"mul":{"value":1}}')
    assert state(deps).value == 10


def test_handle_unknown_variant_raises(deps):
    with pytest.raises(GenericError):
        handle(deps, {"pow": {"value": 2}})


def test_handle_missing_field_raises(deps):
    with pytest.raises(GenericError):
        handle(deps, {"add": {}})


def test_query_state_bytes(deps):
    assert query(deps, {"state": {}}) == b'{"value":10}'


def test_query_matches_state(deps):
    add(deps, 5)
    assert from_slice(query(deps, b'{"state":{}}')) == state(deps).to_dict()


def test_query_unknown_variant_raises(deps):
    with pytest.raises(GenericError):
        query(deps, {"count": {}})


def test_new_rejects_negative():
    with pytest.raises(GenericError):
        new(Deps(), -1)