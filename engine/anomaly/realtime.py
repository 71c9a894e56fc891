"""
Sliding-window real-time anomaly detection: a bounded FIFO of recent observations plus a model trained on seed data, rescoring each new value as it arrives.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Optional, Sequence

import numpy as np

from config import settings
from engine.enums import Severity
from engine.errors import InvalidInput, InvalidModel
from engine.methods import AnomalyMethod, StatisticalMethod, realtime_threshold
from engine.models import AnomalyPoint, PointContext


@dataclass(frozen=True)
class AnomalyModel:
    mean: Optional[float]
    std: Optional[float]
    threshold: float
    method: AnomalyMethod
    trained_on: datetime


@dataclass
class RealTimeAnomalyDetector:
    """
    Rolling detector state. Not thread-safe: callers serialise updates.

    Notes:
    - historical_data never holds more than window_size values.
    - model is trained once at creation and is not refreshed by updates.
    """

    window_size: int
    method: AnomalyMethod
    threshold: float
    historical_data: Deque[float] = field(default_factory=deque)
    model: Optional[AnomalyModel] = None

    def __post_init__(self) -> None:
        self.historical_data = deque(self.historical_data, maxlen=self.window_size)

    def update(self, value: float, timestamp: Optional[datetime] = None) -> Optional[AnomalyPoint]:
        return update_realtime_detector(self, value, timestamp)


def train_model(data: Sequence[float], method: AnomalyMethod) -> AnomalyModel:
    arr = np.asarray(data, dtype=float)
    return AnomalyModel(
        mean=float(arr.mean()),
        std=float(arr.std()),
        threshold=realtime_threshold(method),
        method=method,
        trained_on=datetime.now(timezone.utc),
    )


def create_realtime_detector(
    initial_data: Sequence[float],
    window_size: int | None = None,
    method: Optional[AnomalyMethod] = None,
) -> RealTimeAnomalyDetector:
    if window_size is None:
        window_size = settings.realtime_window_size
    if method is None:
        method = StatisticalMethod(threshold=settings.realtime_statistical_threshold)
    if window_size < 1:
        raise InvalidInput("Window size must be positive")
    if len(initial_data) < window_size:
        raise InvalidInput("Initial data must be at least window size")
    if not np.isfinite(np.asarray(initial_data, dtype=float)).all():
        raise InvalidInput("Initial data must contain only finite values")

    return RealTimeAnomalyDetector(
        window_size=window_size,
        method=method,
        threshold=realtime_threshold(method),
        historical_data=deque(float(v) for v in list(initial_data)[-window_size:]),
        model=train_model(initial_data, method),
    )


def realtime_score(detector: RealTimeAnomalyDetector, value: float) -> float:
    if isinstance(detector.method, StatisticalMethod):
        model = detector.model
        if model is None or model.mean is None or model.std is None:
            raise InvalidModel("Statistical model parameters missing")
        return abs(value - model.mean) / max(model.std, settings.std_floor)

    window = np.asarray(detector.historical_data, dtype=float)
    return abs(value - float(window.mean())) / max(float(window.std()), settings.std_floor)


def update_realtime_detector(
    detector: RealTimeAnomalyDetector,
    value: float,
    timestamp: Optional[datetime] = None,
) -> Optional[AnomalyPoint]:
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInput("Value must be finite")

    # deque(maxlen=window_size) evicts the oldest value on append
    detector.historical_data.append(value)
    score = realtime_score(detector, value)
    if not score > detector.threshold:
        return None

    return AnomalyPoint(
        index=len(detector.historical_data) - 1,
        value=value,
        timestamp=timestamp,
        score=score,
        severity=Severity.from_ratio(score, detector.threshold),
        context=PointContext(
            window_size=detector.window_size,
            method=detector.method.describe(),
            threshold=detector.threshold,
        ),
    )
