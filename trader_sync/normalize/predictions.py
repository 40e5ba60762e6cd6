"""Prediction payloads -> Prediction. Rich metadata is kept only when the backend sends it."""

from __future__ import annotations
from typing import Any, Mapping

from trader_sync.core.types import Prediction
from trader_sync.normalize import fields as F


def normalize_prediction(payload: Any, default_action: str = "HOLD") -> Prediction:
    if not isinstance(payload, Mapping):
        return Prediction(action=default_action)
    t = F.PREDICTION_FIELDS
    metadata = {}
    for name, paths in F.PREDICTION_METADATA_FIELDS.items():
        value = F.resolve(payload, paths)
        if value is not None:
            metadata[name] = value
    return Prediction(
        action=F.resolve_str(payload, t["action"], default_action) or default_action,
        confidence=F.resolve_float(payload, t["confidence"]),
        expected_return=F.resolve_float(payload, t["expected_return"]),
        risk_score=F.resolve_float(payload, t["risk_score"]),
        position_size=F.resolve_float(payload, t["position_size"]),
        metadata=metadata,
    )
