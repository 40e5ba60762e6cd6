"""Unit tests for normalize.status against every known status payload shape."""

import pytest

from trader_sync.core.types import PositionSide, TradingState
from trader_sync.normalize import fields as F
from trader_sync.normalize.status import normalize_model_state, normalize_status, trading_state_of


def test_v1_flat_summary_and_symbol_keyed_positions(load_payload):
    snap = normalize_status(load_payload("status_v1"))
    assert snap.trading_state is TradingState.LIVE
    assert [p.symbol for p in snap.positions] == ["AAPL", "TSLA"]
    aapl, tsla = snap.positions
    assert aapl.side is PositionSide.LONG
    assert aapl.quantity == 10
    assert aapl.entry_price == 180.0
    assert aapl.current_price == 185.0
    assert aapl.unrealized_pnl == 50.0
    # Negative share count -> SHORT, stored unsigned
    assert tsla.side is PositionSide.SHORT
    assert tsla.quantity == 5

    s = snap.portfolio_summary
    assert s.portfolio_value == 10250.5
    assert s.balance == 8100.0
    assert s.realized_pnl == 170.5
    assert s.drawdown == 0.03
    assert s.trade_count == 12
    a = snap.activity_summary
    assert (a.total_decision_points, a.trades_executed, a.reconfirmations) == (12, 7, 4)


def test_v2_renamed_keys(load_payload):
    snap = normalize_status(load_payload("status_v2"))
    assert snap.trading_state is TradingState.LIVE  # status "Active"
    (msft,) = snap.positions
    assert msft.symbol == "MSFT"
    assert msft.quantity == 8
    assert msft.entry_price == 410.0
    assert snap.portfolio_summary.portfolio_value == 9900.0
    assert snap.portfolio_summary.balance == 7000.0
    assert snap.activity_summary.total_decision_points == 20


def test_v3_status_string_wins_over_false_flag(load_payload):
    snap = normalize_status(load_payload("status_v3"))
    assert snap.trading_state is TradingState.LIVE
    assert [p.symbol for p in snap.positions] == ["NVDA", "AMD"]  # duplicate NVDA dropped
    nvda, amd = snap.positions
    assert nvda.quantity == 4
    assert nvda.current_price == 920.0
    assert amd.side is PositionSide.SHORT
    assert amd.quantity == 3
    assert amd.current_price == 150.0  # falls back to entry price

    s = snap.portfolio_summary
    assert s.portfolio_value == 11000.0
    assert s.unrealized_pnl == 75.0
    assert s.realized_pnl == 500.0
    assert s.drawdown == 0.08
    assert s.balance == 10500.0
    assert s.daily_pnl == 75.0
    assert s.trade_count == 9
    a = snap.activity_summary
    assert a.total_decision_points == 9
    assert a.trades_executed == 5  # winning + losing


def test_stopped_payload_discards_stale_fields(load_payload):
    snap = normalize_status(load_payload("status_stopped"))
    assert snap.trading_state is TradingState.STOPPED
    assert snap.positions == ()
    assert snap.portfolio_summary is None
    assert snap.activity_summary is None


@pytest.mark.parametrize("payload", [
    {"is_trading": False},
    {"is_trading": False, "positions": [{"symbol": "AAPL", "shares": 1}], "portfolio_value": 5},
    {"is_trading": False, "activity_summary": {"total_decision_points": 3}},
    {},
    {"is_trading": "true"},  # only a real boolean counts
])
def test_inactive_flag_without_status_is_stopped(payload):
    snap = normalize_status(payload)
    assert snap.trading_state is TradingState.STOPPED
    assert snap.positions == ()
    assert snap.portfolio_summary is None
    assert snap.activity_summary is None


@pytest.mark.parametrize("payload", [None, [], "running", 42])
def test_non_object_payload_is_stopped(payload):
    assert normalize_status(payload).trading_state is TradingState.STOPPED


@pytest.mark.parametrize("status,expected", [
    ("running", TradingState.LIVE),
    ("active", TradingState.LIVE),
    (" RUNNING ", TradingState.LIVE),
    ("stopped", TradingState.STOPPED),
    ("paused", TradingState.STOPPED),
])
def test_status_tokens(status, expected):
    assert trading_state_of({"status": status}) is expected


def test_missing_fields_default_to_zero():
    snap = normalize_status({"is_trading": True, "positions": [{"symbol": "X"}]})
    (pos,) = snap.positions
    assert pos.side is PositionSide.LONG
    assert pos.quantity == 0
    assert pos.entry_price == 0
    assert snap.portfolio_summary.portfolio_value == 0
    assert snap.activity_summary.total_decision_points == 0


def test_resolution_order_and_fallthrough():
    assert F.resolve_float({"a": None, "b": "3.5"}, ("a", "b")) == 3.5
    assert F.resolve_float({"a": "n/a", "b": 2}, ("a", "b")) == 2.0
    # zero is a real value, not a miss
    assert F.resolve_float({"a": 0, "b": 5}, ("a", "b")) == 0.0
    assert F.resolve_float({}, ("a",), 7.0) == 7.0
    assert F.resolve({"x": {"y": 1}}, ("x.y",)) == 1
    assert F.resolve({"x": 3}, ("x.y",), "d") == "d"


def test_model_state_from_recent_trades(load_payload):
    state = normalize_model_state(load_payload("status_v3"))
    p = state.last_prediction
    assert p.action == "SELL"
    assert p.confidence == pytest.approx(0.7)
    assert p.risk_score == pytest.approx(0.4)
    assert state.timestamp == "2025-06-01T15:00:00Z"


def test_model_state_explicit_last_prediction():
    state = normalize_model_state({
        "timestamp": "2025-01-01T00:00:00Z",
        "last_prediction": {"action_type": "BUY", "confidence": 0.9, "expected_return": 0.02},
    })
    assert state.last_prediction.action == "BUY"
    assert state.last_prediction.expected_return == pytest.approx(0.02)
    assert state.timestamp == "2025-01-01T00:00:00Z"


def test_model_state_without_decisions():
    state = normalize_model_state({"timestamp": "2025-01-01T00:00:00Z", "recent_trades": []})
    assert state.last_prediction is None
    assert state.timestamp == "2025-01-01T00:00:00Z"


def test_empty_positions_by_symbol_map_has_no_positions():
    snap = normalize_status({
        "status": "running",
        "position_details": {"total_portfolio_value": 10000.0, "positions_by_symbol": {}},
    })
    assert snap.positions == ()
    assert snap.portfolio_summary.portfolio_value == 10000.0


def test_positions_by_symbol_as_symbol_keyed_map():
    snap = normalize_status({
        "status": "running",
        "position_details": {
            "total_portfolio_value": 10000.0,
            "positions_by_symbol": {
                "AAPL": {"shares": 3, "entry_price": 150.0, "current_price": 155.0},
                "GOOG": {"shares": 1, "entry_price": 170.0, "direction": "SHORT"},
            },
        },
    })
    assert [p.symbol for p in snap.positions] == ["AAPL", "GOOG"]
    assert snap.positions[0].quantity == 3
    assert snap.positions[1].side is PositionSide.SHORT


def test_symbol_map_skips_values_that_are_not_positions():
    snap = normalize_status({
        "is_trading": True,
        "position_details": {
            "AAPL": {"shares": 2, "average_price": 180.0},
            "meta": {"updated": "2025-03-04T14:30:00Z"},
            "total_portfolio_value": 500.0,
        },
    })
    assert [p.symbol for p in snap.positions] == ["AAPL"]


@pytest.mark.parametrize("key", ["shares", "position_shares", "quantity", "position_size"])
def test_each_share_count_key_is_recognized(key):
    snap = normalize_status({
        "status": "running",
        "positions": [{"symbol": "SPY", key: 7, "entry_price": 500.0}],
    })
    (spy,) = snap.positions
    assert spy.quantity == 7
    assert spy.side is PositionSide.LONG
