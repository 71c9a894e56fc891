"""
Multivariate anomaly scoring across aligned feature series, dispatching between the diagonal-covariance statistical scorer and the multivariate isolation forest, and returning the overall score per sample with a per-feature contribution matrix.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from engine.anomaly.isolation import multivariate_isolation_scores
from engine.anomaly.statistical import multivariate_scores
from engine.errors import InvalidInput
from engine.methods import AnomalyMethod, IsolationForestMethod, StatisticalMethod

log = logging.getLogger(__name__)


def feature_matrix(data: Sequence[Sequence[float]]) -> np.ndarray:
    if len(data) == 0 or len(data[0]) == 0:
        raise InvalidInput("Data cannot be empty")
    num_samples = len(data[0])
    if any(len(feature) != num_samples for feature in data):
        raise InvalidInput("All features must have the same number of samples")
    matrix = np.asarray([list(feature) for feature in data], dtype=float)
    if not np.isfinite(matrix).all():
        raise InvalidInput("Data must contain only finite values")
    return matrix


def score(
    features: np.ndarray,
    method: AnomalyMethod,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    if isinstance(method, IsolationForestMethod):
        return multivariate_isolation_scores(features, num_trees=method.num_trees, rng=rng)
    if not isinstance(method, StatisticalMethod):
        log.debug("multivariate scoring for %s uses the statistical scorer", method.kind)
    return multivariate_scores(features)
