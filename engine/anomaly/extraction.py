"""
Extraction of anomaly points from score vectors, shared severity mapping and the separation-based confidence score applied by every detection path.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from engine.enums import Severity
from engine.models import AnomalyPoint, MultiVariateAnomalyPoint


def _timestamp_at(timestamps: Optional[Sequence[datetime]], index: int) -> Optional[datetime]:
    if timestamps is None or not 0 <= index < len(timestamps):
        return None
    return timestamps[index]


def extract_points(
    data: np.ndarray,
    scores: np.ndarray,
    threshold: float,
    timestamps: Optional[Sequence[datetime]] = None,
) -> List[AnomalyPoint]:
    anomalies: List[AnomalyPoint] = []
    for i in np.flatnonzero(scores > threshold):
        i = int(i)
        anomalies.append(AnomalyPoint(
            index=i,
            value=float(data[i]),
            timestamp=_timestamp_at(timestamps, i),
            score=float(scores[i]),
            severity=Severity.from_ratio(float(scores[i]), threshold),
        ))
    return anomalies


def extract_multivariate_points(
    features: np.ndarray,
    scores: np.ndarray,
    contributions: np.ndarray,
    threshold: float,
    timestamps: Optional[Sequence[datetime]] = None,
) -> List[MultiVariateAnomalyPoint]:
    anomalies: List[MultiVariateAnomalyPoint] = []
    for i in np.flatnonzero(scores > threshold):
        i = int(i)
        anomalies.append(MultiVariateAnomalyPoint(
            index=i,
            values=features[:, i].tolist(),
            timestamp=_timestamp_at(timestamps, i),
            overall_score=float(scores[i]),
            feature_scores=contributions[i].tolist(),
            severity=Severity.from_ratio(float(scores[i]), threshold),
        ))
    return anomalies


def confidence(scores: np.ndarray, anomaly_indices: Sequence[int]) -> float:
    """Separation between flagged and unflagged scores, scaled by the max score."""
    if len(anomaly_indices) == 0:
        return 1.0
    mask = np.zeros(len(scores), dtype=bool)
    mask[list(anomaly_indices)] = True
    if mask.all():
        return 0.5

    separation = float(scores[mask].mean() - scores[~mask].mean())
    max_score = float(scores.max())
    if max_score <= 0:
        return 0.0
    return min(1.0, max(0.0, separation / max_score))
