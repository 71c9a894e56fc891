"""
Statistical z-score scoring for univariate series and the diagonal-covariance (Mahalanobis-style) scoring used for multivariate feature sets.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from config import settings
from engine.errors import InvalidInput


def zscore_scores(data: Sequence[float]) -> np.ndarray:
    arr = np.asarray(data, dtype=float)
    if arr.size == 0:
        raise InvalidInput("Data cannot be empty")
    mean, std = arr.mean(), arr.std()
    if std == 0:
        return np.zeros_like(arr)
    return np.abs(arr - mean) / std


def multivariate_scores(features: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Per-feature normalised deviations combined as an RMS score.

    ``features`` has one row per feature and one column per sample. Returns
    the overall score per sample and a samples x features contribution
    matrix holding the normalised deviations themselves.
    """
    means = features.mean(axis=1, keepdims=True)
    stds = np.maximum(features.std(axis=1, keepdims=True), settings.std_floor)
    deviations = (np.abs(features - means) / stds).T
    overall = np.sqrt(np.mean(deviations ** 2, axis=1))
    return overall, deviations
