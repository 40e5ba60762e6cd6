"""
Core data types: snapshot, positions, trades, metrics, predictions.
All values are rebuilt wholesale from each fetch; nothing here is mutated in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


class TradingState(str, Enum):
    LIVE = "LIVE"
    STOPPED = "STOPPED"
    PENDING = "PENDING"


class PositionSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Position:
    """Open position, keyed by symbol."""
    symbol: str
    side: PositionSide
    quantity: float
    entry_price: float
    current_price: float
    unrealized_pnl: float = 0.0


@dataclass(frozen=True)
class PortfolioSummary:
    portfolio_value: float = 0.0
    unrealized_pnl: float = 0.0
    realized_pnl: float = 0.0
    total_pnl: float = 0.0
    drawdown: float = 0.0
    balance: float = 0.0
    daily_pnl: float = 0.0
    win_rate: float = 0.0
    trade_count: int = 0


@dataclass(frozen=True)
class ActivitySummary:
    total_decision_points: int = 0  # trades opened
    trades_executed: int = 0  # trades closed
    reconfirmations: int = 0


@dataclass(frozen=True)
class Prediction:
    """Point-in-time decision recommendation from the remote model."""
    action: str
    confidence: float = 0.0
    expected_return: float = 0.0
    risk_score: float = 0.0
    position_size: float = 0.0
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ModelState:
    last_prediction: Optional[Prediction]
    timestamp: str


@dataclass(frozen=True)
class Snapshot:
    """
    Canonical view of the remote trader. When not LIVE, positions are empty and
    both summaries are absent; the constructor enforces it.
    """
    trading_state: TradingState
    positions: Tuple[Position, ...] = ()
    portfolio_summary: Optional[PortfolioSummary] = None
    activity_summary: Optional[ActivitySummary] = None
    model_state: Optional[ModelState] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(self.positions))
        if self.trading_state is not TradingState.LIVE:
            object.__setattr__(self, "positions", ())
            object.__setattr__(self, "portfolio_summary", None)
            object.__setattr__(self, "activity_summary", None)

    @property
    def is_live(self) -> bool:
        return self.trading_state is TradingState.LIVE

    @classmethod
    def stopped(cls) -> "Snapshot":
        return cls(TradingState.STOPPED)

    @classmethod
    def pending(cls) -> "Snapshot":
        return cls(TradingState.PENDING)


@dataclass(frozen=True)
class Trade:
    """Trade record; exit fields are None while the trade is open."""
    symbol: str
    entry_timestamp: str
    quantity: float
    entry_price: float
    exit_timestamp: Optional[str] = None
    exit_price: Optional[float] = None
    pnl: float = 0.0
    fees: float = 0.0

    @property
    def is_closed(self) -> bool:
        return self.exit_timestamp is not None


@dataclass(frozen=True)
class PerformanceMetrics:
    total_return: float = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    calmar_ratio: float = 0.0
    max_drawdown: float = 0.0
    win_rate: float = 0.0
    num_trades: int = 0  # including open positions
    closed_trades: int = 0
    final_balance: float = 0.0


@dataclass(frozen=True)
class PerformanceReport:
    metrics: PerformanceMetrics
    trades: Tuple[Trade, ...] = ()


@dataclass(frozen=True)
class ToastMessage:
    text: str
    severity: Severity
    lifetime: float


@dataclass(frozen=True)
class TradeExecutedEvent:
    """Decision-point counter advanced between two LIVE snapshots."""
    delta: int
    total: int


@dataclass(frozen=True)
class TraderConfig:
    """Optional tuning parameters sent with a start request."""
    initial_balance: Optional[float] = None
    min_confidence: Optional[float] = None
    max_risk: Optional[float] = None
    max_position: Optional[float] = None
    max_risk_per_trade: Optional[float] = None
    max_positions: Optional[int] = None
    max_drawdown: Optional[float] = None
    position_limit: Optional[float] = None
    risk_multiplier: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class StartRequest:
    symbols: Tuple[str, ...]
    config: TraderConfig = field(default_factory=TraderConfig)

    def to_payload(self) -> dict[str, Any]:
        return {"symbols": list(self.symbols), "config": self.config.to_dict()}
