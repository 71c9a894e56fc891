"""
Correlation coefficients over cleaned paired samples: Pearson on centred values, Spearman as Pearson over positional ranks, and Kendall tau from concordant and discordant pair counts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import numpy as np


def _clip(r: float) -> float:
    return float(min(1.0, max(-1.0, r)))


def pearson(x: np.ndarray, y: np.ndarray) -> float:
    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denominator == 0:
        return 0.0
    return _clip(float(np.sum(dx * dy) / denominator))


def ranks(values: np.ndarray) -> np.ndarray:
    """1-based ranks; ties keep their input order (stable sort)."""
    order = np.argsort(values, kind="stable")
    ranked = np.empty(len(values), dtype=float)
    ranked[order] = np.arange(1, len(values) + 1)
    return ranked


def spearman(x: np.ndarray, y: np.ndarray) -> float:
    return pearson(ranks(x), ranks(y))


def kendall(x: np.ndarray, y: np.ndarray) -> float:
    n = len(x)
    total_pairs = n * (n - 1) / 2
    if total_pairs == 0:
        return 0.0

    concordant = 0
    discordant = 0
    for i in range(n - 1):
        agreement = np.sign(x[i + 1:] - x[i]) * np.sign(y[i + 1:] - y[i])
        concordant += int(np.count_nonzero(agreement > 0))
        discordant += int(np.count_nonzero(agreement < 0))
    return _clip((concordant - discordant) / total_pairs)
