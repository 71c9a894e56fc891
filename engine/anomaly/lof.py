"""
Local outlier factor scoring for univariate series: k-distance, reachability distance, local reachability density (LRD) for every point including neighbors, and the ratio of neighbor density to own density.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from sklearn.neighbors import NearestNeighbors

from config import settings
from engine.errors import InvalidInput


def _neighborhoods(arr: np.ndarray, neighbors: int) -> Tuple[np.ndarray, np.ndarray]:
    # without a query set the point itself is excluded from its neighbors,
    # duplicates included
    nn = NearestNeighbors(n_neighbors=neighbors, metric="minkowski", p=1)
    nn.fit(arr.reshape(-1, 1))
    distances, indices = nn.kneighbors()
    return distances, indices


def local_reachability_density(distances: np.ndarray, indices: np.ndarray) -> np.ndarray:
    k = distances.shape[1]
    k_distance = distances[:, -1]
    reach = np.maximum(distances, k_distance[indices])
    return k / np.maximum(reach.sum(axis=1), settings.std_floor)


def lof_scores(data: Sequence[float], neighbors: int) -> np.ndarray:
    arr = np.asarray(data, dtype=float)
    if neighbors < 1:
        raise InvalidInput("Number of neighbors must be positive")
    if neighbors >= len(arr):
        raise InvalidInput("Number of neighbors must be less than data size")

    distances, indices = _neighborhoods(arr, neighbors)
    lrd = local_reachability_density(distances, indices)
    return lrd[indices].mean(axis=1) / lrd
