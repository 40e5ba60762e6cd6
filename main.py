#!/usr/bin/env python3
"""
Trader sync CLI: watch | status | start | stop | history | performance | predict
Usage:
  python main.py watch [--config config.yaml]
  python main.py start AAPL MSFT --initial-balance 10000
  python main.py predict AAPL
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from pathlib import Path

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from trader_sync.core.config import load_config
from trader_sync.core.logger import setup_logging
from trader_sync.core.types import Snapshot, StartRequest, TraderConfig
from trader_sync.sync.session import TraderSession
from trader_sync.utils.tables import positions_frame, trades_frame
from trader_sync.utils.telegram import telegram_trade_listener

logger = logging.getLogger("trader_sync")

START_OPTIONS = [
    ("initial_balance", float),
    ("min_confidence", float),
    ("max_risk", float),
    ("max_position", float),
    ("max_risk_per_trade", float),
    ("max_positions", int),
    ("max_drawdown", float),
    ("position_limit", float),
    ("risk_multiplier", float),
    ("stop_loss", float),
    ("take_profit", float),
]


def print_snapshot(snapshot: Snapshot) -> None:
    print(f"\n--- Trader: {snapshot.trading_state.value} ---")
    s = snapshot.portfolio_summary
    if s:
        print(f"Portfolio value: {s.portfolio_value:.2f} | Balance: {s.balance:.2f}")
        print(f"PnL total: {s.total_pnl:.2f} | unrealized: {s.unrealized_pnl:.2f} | daily: {s.daily_pnl:.2f}")
        print(f"Drawdown: {s.drawdown:.2f} | Win rate: {s.win_rate*100:.1f}% | Trades: {s.trade_count}")
    a = snapshot.activity_summary
    if a:
        print(f"Decision points: {a.total_decision_points} | Executed: {a.trades_executed}")
    if snapshot.positions:
        print(positions_frame(snapshot.positions).to_string(index=False))
    m = snapshot.model_state
    if m and m.last_prediction:
        p = m.last_prediction
        print(f"Last action: {p.action} (confidence {p.confidence*100:.1f}%, risk {p.risk_score:.2f}) @ {m.timestamp}")


def build_session(config_path: Path | None) -> TraderSession:
    config = load_config(config_path, ROOT)
    setup_logging(
        config.log_level,
        config.log_dir,
        config.log_file,
        secrets=(config.api_key, config.telegram_bot_token),
    )
    session = TraderSession.from_config(config)
    if config.telegram_bot_token and config.telegram_chat_id:
        session.on_trade(telegram_trade_listener(config.telegram_bot_token, config.telegram_chat_id))
    return session


def run_watch(session: TraderSession) -> int:
    """Load, then poll while LIVE until interrupted."""
    session.on_snapshot(print_snapshot)
    session.load()
    if not session.snapshot.is_live:
        logger.info("Trader not running; polling stays idle. Ctrl-C to exit.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutdown by user")
    return 0


def run_start(session: TraderSession, args: argparse.Namespace) -> int:
    opts = {name: getattr(args, name) for name, _ in START_OPTIONS}
    request = StartRequest(
        symbols=tuple(s.strip().upper() for s in args.symbols if s.strip()),
        config=TraderConfig(**opts),
    )
    if not session.start(request):
        return 1
    print_snapshot(session.snapshot)
    return 0


def run_history(session: TraderSession) -> int:
    trades = session.fetch_trade_history()
    if not trades:
        print("No trades.")
        return 0
    print(trades_frame(trades).to_string(index=False))
    return 0


def run_performance(session: TraderSession) -> int:
    report = session.fetch_performance()
    if report is None:
        return 1
    m = report.metrics
    print("\n--- Performance ---")
    print(f"Total return: {m.total_return*100:.2f}%")
    print(f"Sharpe ratio: {m.sharpe_ratio:.2f}")
    print(f"Sortino ratio: {m.sortino_ratio:.2f}")
    print(f"Calmar ratio: {m.calmar_ratio:.2f}")
    print(f"Max drawdown: {m.max_drawdown*100:.2f}%")
    print(f"Win rate: {m.win_rate*100:.1f}%")
    print(f"Trades: {m.num_trades} (closed: {m.closed_trades})")
    print(f"Final balance: {m.final_balance:.2f}")
    if report.trades:
        print(trades_frame(report.trades).to_string(index=False))
    return 0


def run_predict(session: TraderSession, symbol: str) -> int:
    prediction = session.fetch_prediction(symbol)
    if prediction is None:
        return 1
    p = prediction
    print(f"Action: {p.action}")
    print(f"Confidence: {p.confidence*100:.1f}%")
    print(f"Position size: {p.position_size*100:.1f}%")
    print(f"Expected return: {p.expected_return*100:.2f}%")
    print(f"Risk score: {p.risk_score:.2f}")
    for key, value in p.metadata.items():
        print(f"{key.replace('_', ' ').capitalize()}: {value}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Trader sync CLI")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="mode", required=True)
    sub.add_parser("watch", help="Poll status while the trader is live")
    sub.add_parser("status", help="Print one snapshot")
    start = sub.add_parser("start", help="Start live trading")
    start.add_argument("symbols", nargs="+")
    for name, kind in START_OPTIONS:
        start.add_argument(f"--{name.replace('_', '-')}", dest=name, type=kind, default=None)
    sub.add_parser("stop", help="Stop live trading")
    sub.add_parser("history", help="Print trade history")
    sub.add_parser("performance", help="Print performance metrics")
    predict = sub.add_parser("predict", help="Manual prediction for one symbol")
    predict.add_argument("symbol")
    args = parser.parse_args()

    session = build_session(args.config)
    try:
        if args.mode == "watch":
            return run_watch(session)
        if args.mode == "status":
            print_snapshot(session.load())
            return 0
        if args.mode == "start":
            return run_start(session, args)
        if args.mode == "stop":
            return 0 if session.stop() else 1
        if args.mode == "history":
            return run_history(session)
        if args.mode == "performance":
            return run_performance(session)
        return run_predict(session, args.symbol)
    finally:
        session.close()


if __name__ == "__main__":
    exit(main())
