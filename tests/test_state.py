"""
Tests for watcher state transitions.
"""

from kolibri_bot.state import ContractKind, WatcherPhase, WatcherState


def new_state():
    return WatcherState(contract_address="KT1oven", network="mainnet", kind=ContractKind.OVEN)


def test_new_state_is_bootstrapping():
    state = new_state()
    assert state.is_bootstrapping
    assert state.latest_operation_timestamp is None


def test_advance_moves_to_steady_and_records_owner():
    state = new_state().advance(1000, "tz1abc")
    assert state.phase is WatcherPhase.STEADY
    assert state.latest_operation_timestamp == 1000
    assert state.oven_owner == "tz1abc"


def test_watermark_never_moves_backwards():
    state = new_state().advance(5000, "tz1abc").advance(3000)
    assert state.latest_operation_timestamp == 5000


def test_owner_is_kept_once_set():
    state = new_state().advance(1000, "tz1abc").advance(2000, "tz1other")
    assert state.oven_owner == "tz1abc"
