"""
Detection entry points for univariate, multivariate and ensemble anomaly detection: validate the input, dispatch to the scorer the method selects, derive the threshold, then extract anomaly points with a severity tier and compute the confidence of the run.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import settings
from engine.anomaly import ensemble, multivariate
from engine.anomaly.extraction import confidence, extract_multivariate_points, extract_points
from engine.anomaly.isolation import isolation_forest_scores
from engine.anomaly.lof import lof_scores
from engine.anomaly.statistical import zscore_scores
from engine.errors import InvalidInput
from engine.methods import (
    AnomalyMethod,
    EnsembleMethod,
    IsolationForestMethod,
    LocalOutlierFactorMethod,
    StatisticalMethod,
    adaptive_threshold,
    contamination_threshold,
    select_threshold,
)
from engine.models import (
    AnomalyResult,
    DetectionMetadata,
    EnsembleMetadata,
    MultiVariateAnomalyResult,
    MultivariateMetadata,
)

log = logging.getLogger(__name__)


def _series(data: Sequence[float]) -> np.ndarray:
    arr = np.asarray(list(data), dtype=float)
    if arr.size == 0:
        raise InvalidInput("Data cannot be empty")
    if not np.isfinite(arr).all():
        raise InvalidInput("Data must contain only finite values")
    return arr


def _metadata(total: int, flagged: int) -> dict:
    return {
        "total_points": total,
        "anomaly_count": flagged,
        "anomaly_rate": flagged / total if total else 0.0,
    }


def _univariate_scores(
    arr: np.ndarray,
    method: AnomalyMethod,
    rng: Optional[np.random.Generator],
) -> Tuple[np.ndarray, float]:
    if isinstance(method, StatisticalMethod):
        return zscore_scores(arr), method.threshold
    if isinstance(method, IsolationForestMethod):
        scores = isolation_forest_scores(arr, num_trees=method.num_trees, rng=rng)
        return scores, contamination_threshold(scores, method.contamination)
    if isinstance(method, LocalOutlierFactorMethod):
        return lof_scores(arr, method.neighbors), settings.lof_threshold

    log.warning("%s has no scorer, falling back to statistical scoring", method.kind)
    return zscore_scores(arr), settings.fallback_threshold


def detect_univariate(
    data: Sequence[float],
    timestamps: Optional[Sequence[datetime]] = None,
    method: Optional[AnomalyMethod] = None,
    rng: Optional[np.random.Generator] = None,
) -> AnomalyResult:
    if method is None:
        method = StatisticalMethod()
    if isinstance(method, EnsembleMethod):
        return detect_ensemble(data, method.methods, timestamps, rng=rng)

    arr = _series(data)
    scores, threshold = _univariate_scores(arr, method, rng)
    anomalies = extract_points(arr, scores, threshold, timestamps)
    flagged = [a.index for a in anomalies]

    return AnomalyResult(
        anomalies=anomalies,
        scores=scores.tolist(),
        threshold=threshold,
        method=method,
        confidence=confidence(scores, flagged),
        metadata=DetectionMetadata(**_metadata(len(arr), len(flagged))),
    )


def detect_multivariate(
    data: Sequence[Sequence[float]],
    timestamps: Optional[Sequence[datetime]] = None,
    method: Optional[AnomalyMethod] = None,
    rng: Optional[np.random.Generator] = None,
) -> MultiVariateAnomalyResult:
    """Score samples across aligned features.

    ``data`` holds one sequence per feature, all of equal length. The
    returned contribution matrix has one row per sample.
    """
    if method is None:
        method = IsolationForestMethod()

    features = multivariate.feature_matrix(data)
    scores, contributions = multivariate.score(features, method, rng=rng)
    threshold = select_threshold(scores, method)
    anomalies = extract_multivariate_points(features, scores, contributions, threshold, timestamps)
    flagged = [a.index for a in anomalies]

    return MultiVariateAnomalyResult(
        anomalies=anomalies,
        scores=scores.tolist(),
        feature_contributions=contributions.tolist(),
        threshold=threshold,
        method=method,
        confidence=confidence(scores, flagged),
        metadata=MultivariateMetadata(
            **_metadata(features.shape[1], len(flagged)),
            feature_count=features.shape[0],
        ),
    )


def detect_ensemble(
    data: Sequence[float],
    methods: Sequence[AnomalyMethod],
    timestamps: Optional[Sequence[datetime]] = None,
    rng: Optional[np.random.Generator] = None,
) -> AnomalyResult:
    if not methods:
        raise InvalidInput("Ensemble requires at least one method")
    arr = _series(data)

    runs: List[AnomalyResult] = []
    for sub in methods:
        runs.append(detect_univariate(arr, timestamps, sub, rng=rng))

    scores, weights = ensemble.combine(
        [np.asarray(r.scores, dtype=float) for r in runs],
        [r.confidence for r in runs],
    )
    threshold = adaptive_threshold(scores)
    anomalies = extract_points(arr, scores, threshold, timestamps)
    flagged = [a.index for a in anomalies]

    return AnomalyResult(
        anomalies=anomalies,
        scores=scores.tolist(),
        threshold=threshold,
        method=EnsembleMethod(methods=list(methods)),
        confidence=confidence(scores, flagged),
        metadata=EnsembleMetadata(
            **_metadata(len(arr), len(flagged)),
            method_count=len(runs),
            ensemble_weights=weights,
        ),
    )
