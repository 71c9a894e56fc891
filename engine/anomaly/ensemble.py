"""
Confidence-weighted blending of score vectors produced by several single-method detectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from engine.errors import InvalidInput


def normalise_weights(confidences: Sequence[float]) -> np.ndarray:
    weights = np.asarray(confidences, dtype=float)
    total = weights.sum()
    if total <= 0:
        return np.full(len(weights), 1.0 / len(weights))
    return weights / total


def combine(
    score_vectors: Sequence[np.ndarray],
    confidences: Sequence[float],
) -> Tuple[np.ndarray, List[float]]:
    """Weighted sum of per-method scores, weights proportional to confidence.

    The confidences come from the same detection runs being blended; the
    weighting is intentionally self-referential.
    """
    if not score_vectors:
        raise InvalidInput("Ensemble requires at least one method")
    if len(score_vectors) != len(confidences):
        raise InvalidInput("Each score vector needs a matching confidence")

    stacked = np.vstack([np.asarray(s, dtype=float) for s in score_vectors])
    weights = normalise_weights(confidences)
    return weights @ stacked, weights.tolist()
