"""
Isolation forest construction and scoring. Trees are stored as flat node arrays (arena layout) built iteratively, so deep partitions never recurse, and every tree draws from its own generator spawned from a seedable parent so that results are reproducible regardless of how many worker threads build them.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import EULER_GAMMA, settings

LEAF = -1


@dataclass(frozen=True)
class IsolationTree:
    max_depth: int
    sample_size: int
    feature: np.ndarray
    threshold: np.ndarray
    left: np.ndarray
    right: np.ndarray
    size: np.ndarray
    depth: np.ndarray

    @property
    def node_count(self) -> int:
        return len(self.feature)

    def is_leaf(self, node: int) -> bool:
        return int(self.feature[node]) == LEAF

    def path_length(self, point: Sequence[float]) -> int:
        node = 0
        while not self.is_leaf(node):
            split_feature = int(self.feature[node])
            if split_feature >= len(point):
                return int(self.depth[node])
            if point[split_feature] < self.threshold[node]:
                node = int(self.left[node])
            else:
                node = int(self.right[node])
        return int(self.depth[node]) + leaf_adjustment(int(self.size[node]))

    def path_lengths(self, points: np.ndarray) -> np.ndarray:
        """Vectorised ``path_length`` over the rows of ``points``."""
        n_cols = points.shape[1]
        nodes = np.zeros(len(points), dtype=int)
        lengths = np.zeros(len(points), dtype=float)
        active = np.ones(len(points), dtype=bool)
        while True:
            feats = self.feature[nodes]
            internal = active & (feats != LEAF)
            malformed = internal & (feats >= n_cols)
            lengths[malformed] = self.depth[nodes[malformed]]
            active &= ~malformed
            internal &= ~malformed
            if not internal.any():
                break
            idx = np.flatnonzero(internal)
            current = nodes[idx]
            go_left = points[idx, feats[idx]] < self.threshold[current]
            nodes[idx] = np.where(go_left, self.left[current], self.right[current])

        adjustment = np.array([leaf_adjustment(int(s)) for s in self.size], dtype=float)
        lengths[active] = self.depth[nodes[active]] + adjustment[nodes[active]]
        return lengths


def leaf_adjustment(size: int) -> int:
    if size <= 1:
        return 0
    if size == 2:
        return 1
    return int(math.ceil(math.log2(size)))


def expected_path_length(size: int) -> float:
    if size <= 1:
        return 0.0
    if size == 2:
        return 1.0
    return 2.0 * (math.log(size - 1) + EULER_GAMMA) - 2.0 * (size - 1) / size


def max_depth_for(sample_size: int) -> int:
    if sample_size <= 1:
        return 0
    return int(math.ceil(math.log2(sample_size)))


def build_tree(sample: np.ndarray, max_depth: int, rng: np.random.Generator) -> IsolationTree:
    """Partition ``sample`` (rows = points, columns = features) at random.

    A node becomes a leaf at ``max_depth``, when it holds at most one point,
    or when the chosen feature is constant inside the partition.
    """
    n_features = sample.shape[1]
    feature: List[int] = []
    threshold: List[float] = []
    left: List[int] = []
    right: List[int] = []
    size: List[int] = []
    depth: List[int] = []

    def _new_node(rows: np.ndarray, level: int) -> int:
        feature.append(LEAF)
        threshold.append(0.0)
        left.append(LEAF)
        right.append(LEAF)
        size.append(len(rows))
        depth.append(level)
        return len(feature) - 1

    stack: List[Tuple[int, np.ndarray]] = [(_new_node(np.arange(len(sample)), 0), np.arange(len(sample)))]
    while stack:
        node, rows = stack.pop()
        level = depth[node]
        if level >= max_depth or len(rows) <= 1:
            continue

        split_feature = int(rng.integers(n_features))
        column = sample[rows, split_feature]
        lo, hi = float(column.min()), float(column.max())
        if not lo < hi:
            continue

        split_value = float(rng.uniform(lo, hi))
        goes_left = column < split_value
        left_rows, right_rows = rows[goes_left], rows[~goes_left]

        feature[node] = split_feature
        threshold[node] = split_value
        left[node] = _new_node(left_rows, level + 1)
        right[node] = _new_node(right_rows, level + 1)
        stack.append((right[node], right_rows))
        stack.append((left[node], left_rows))

    return IsolationTree(
        max_depth=max_depth,
        sample_size=len(sample),
        feature=np.asarray(feature, dtype=int),
        threshold=np.asarray(threshold, dtype=float),
        left=np.asarray(left, dtype=int),
        right=np.asarray(right, dtype=int),
        size=np.asarray(size, dtype=int),
        depth=np.asarray(depth, dtype=int),
    )


class IsolationForest:
    def __init__(
        self,
        num_trees: int | None = None,
        max_samples: int | None = None,
        rng: Optional[np.random.Generator] = None,
        max_workers: int | None = None,
    ) -> None:
        self.num_trees = num_trees if num_trees is not None else settings.iforest_num_trees
        self.max_samples = max_samples if max_samples is not None else settings.iforest_max_samples
        self.rng = rng if rng is not None else np.random.default_rng(settings.random_seed)
        self.max_workers = max_workers if max_workers is not None else settings.max_parallel_cpu_tasks
        self.trees: List[IsolationTree] = []
        self.sample_size = 0

    def fit(self, points: np.ndarray) -> IsolationForest:
        points = np.asarray(points, dtype=float)
        if points.ndim == 1:
            points = points.reshape(-1, 1)
        n = len(points)
        self.sample_size = min(self.max_samples, n)
        max_depth = max_depth_for(self.sample_size)

        # subsamples are drawn up front so the parent stream is consumed in a
        # fixed order; each tree then owns an independent child generator.
        samples = [
            points[self.rng.choice(n, size=self.sample_size, replace=False)]
            for _ in range(self.num_trees)
        ]
        children = self.rng.spawn(self.num_trees)

        workers = max(1, int(self.max_workers))
        if workers == 1 or self.num_trees == 1:
            self.trees = [build_tree(s, max_depth, g) for s, g in zip(samples, children)]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                self.trees = list(pool.map(lambda args: build_tree(args[0], max_depth, args[1]), zip(samples, children)))
        return self

    def path_lengths(self, points: np.ndarray) -> np.ndarray:
        """Matrix of path lengths, one row per point and one column per tree."""
        points = np.asarray(points, dtype=float)
        if points.ndim == 1:
            points = points.reshape(-1, 1)
        if not self.trees:
            return np.zeros((len(points), 0))
        return np.column_stack([tree.path_lengths(points) for tree in self.trees])

    def _normalise(self, path_lengths: np.ndarray) -> np.ndarray:
        c = expected_path_length(self.sample_size)
        if c == 0:
            # a single-point sample cannot separate anything
            return np.full(path_lengths.shape, 0.5)
        return np.power(2.0, -path_lengths / c)

    def score_samples(self, points: np.ndarray) -> np.ndarray:
        """Score from the mean path length across trees: 2^(-E[h] / c(s))."""
        return self._normalise(self.path_lengths(points).mean(axis=1))

    def score_per_tree(self, points: np.ndarray) -> np.ndarray:
        return self._normalise(self.path_lengths(points))


def isolation_forest_scores(
    data: Sequence[float],
    num_trees: int | None = None,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    arr = np.asarray(data, dtype=float)
    forest = IsolationForest(num_trees=num_trees, rng=rng).fit(arr)
    return forest.score_samples(arr)


def multivariate_isolation_scores(
    features: np.ndarray,
    num_trees: int | None = None,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Average per-tree score across a forest that splits on any feature.

    ``features`` has one row per feature. Feature contributions split each
    tree's score equally across features, so every column of the returned
    contribution matrix equals ``overall / n_features``.
    """
    points = np.asarray(features, dtype=float).T
    n_features = points.shape[1]
    forest = IsolationForest(num_trees=num_trees, rng=rng).fit(points)
    overall = forest.score_per_tree(points).mean(axis=1)
    contributions = np.repeat((overall / n_features)[:, None], n_features, axis=1)
    return overall, contributions
