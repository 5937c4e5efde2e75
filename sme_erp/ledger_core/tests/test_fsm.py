import pytest

from ledger_core.exceptions import InvalidTransitionError
from ledger_core.fsm import StateMachine
from ledger_core.models import (ADJUSTMENT_FLOW, JOURNAL_FLOW,
                                PURCHASE_ORDER_FLOW, SALES_ORDER_FLOW,
                                STOCK_TRANSACTION_FLOW)


@pytest.mark.parametrize(
    "flow, current, target",
    [
        (JOURNAL_FLOW, "draft", "posted"),
        (JOURNAL_FLOW, "posted", "reversed"),
        (STOCK_TRANSACTION_FLOW, "draft", "confirmed"),
        (ADJUSTMENT_FLOW, "draft", "approved"),
        (ADJUSTMENT_FLOW, "draft", "rejected"),
        (SALES_ORDER_FLOW, "processing", "completed"),
        (PURCHASE_ORDER_FLOW, "draft", "confirmed"),
        (PURCHASE_ORDER_FLOW, "confirmed", "received"),
    ],
)
def test_allowed_transitions(flow, current, target):
    assert flow.can_transition(current, target)
    flow.assert_transition(current, target)  # no error


@pytest.mark.parametrize(
    "flow, current, target",
    [
        (JOURNAL_FLOW, "posted", "draft"),
        (JOURNAL_FLOW, "draft", "reversed"),
        (JOURNAL_FLOW, "reversed", "posted"),
        (STOCK_TRANSACTION_FLOW, "confirmed", "draft"),
        (ADJUSTMENT_FLOW, "approved", "rejected"),
        (SALES_ORDER_FLOW, "draft", "completed"),
        (SALES_ORDER_FLOW, "completed", "cancelled"),
        (PURCHASE_ORDER_FLOW, "received", "cancelled"),
    ],
)
def test_forbidden_transitions(flow, current, target):
    assert not flow.can_transition(current, target)
    with pytest.raises(InvalidTransitionError):
        flow.assert_transition(current, target)


def test_terminal_states():
    assert JOURNAL_FLOW.is_terminal("reversed")
    assert not JOURNAL_FLOW.is_terminal("posted")
    assert STOCK_TRANSACTION_FLOW.is_terminal("confirmed")
    assert ADJUSTMENT_FLOW.is_terminal("rejected")


def test_states_include_targets_only_states():
    flow = StateMachine("demo", {"open": ("closed",)})
    assert flow.states == frozenset({"open", "closed"})
    # Missing from the table means no way out
    assert flow.is_terminal("closed")
    with pytest.raises(InvalidTransitionError, match="demo status from closed to open"):
        flow.assert_transition("closed", "open")
