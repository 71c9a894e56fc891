"""
Test cases for local outlier factor scoring.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import numpy as np
import pytest

from engine.anomaly.lof import local_reachability_density, lof_scores
from engine.errors import InvalidInput


def test_far_point_exceeds_threshold():
    scores = lof_scores([1, 1, 1, 1, 100], neighbors=2)
    assert scores[4] > 1.5
    assert (scores[:4] <= 1.5).all()


def test_uniform_spacing_scores_near_one():
    scores = lof_scores(list(range(20)), neighbors=3)
    assert scores[5:15].tolist() == pytest.approx([1.0] * 10)


def test_neighbor_density_is_computed_per_point():
    # the sparse point's neighbours are dense, so its ratio is large
    scores = lof_scores([0.0, 0.1, 0.2, 0.3, 5.0], neighbors=2)
    assert scores[4] > scores[:4].max()
    assert scores[4] > 10


def test_lrd_uses_reachability():
    distances = np.array([[1.0], [1.0], [2.0]])
    indices = np.array([[1], [0], [1]])
    lrd = local_reachability_density(distances, indices)
    assert lrd.tolist() == pytest.approx([1.0, 1.0, 0.5])


@pytest.mark.parametrize("neighbors", [0, 5, 9])
def test_invalid_neighbor_count(neighbors):
    with pytest.raises(InvalidInput):
        lof_scores([1, 2, 3, 4, 5], neighbors=neighbors)
