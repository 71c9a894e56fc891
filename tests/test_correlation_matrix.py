"""
Test cases for correlation matrix construction, sync and async, and the pair lookup helpers on the result.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.correlation import correlation_matrix, correlation_matrix_async
from engine.errors import InsufficientData, InvalidInput

A = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]
B = [2.0, 1.0, 4.0, 3.0, 6.0, 5.0, 8.0, 7.0, 10.0, 9.0]
C = list(reversed(A))
NAMES = ["steps", "calories", "resting_hr"]


def test_matrix_is_symmetric_with_fixed_diagonal():
    result = correlation_matrix([A, B, C], NAMES)
    n = len(NAMES)
    for i in range(n):
        assert result.correlation_matrix[i][i] == 1.0
        assert result.significance_matrix[i][i] is True
        assert result.p_value_matrix[i][i] == 0.0
        for j in range(n):
            assert result.correlation_matrix[i][j] == result.correlation_matrix[j][i]
            assert result.significance_matrix[i][j] == result.significance_matrix[j][i]
            assert result.p_value_matrix[i][j] == result.p_value_matrix[j][i]


def test_coefficient_lookup_by_name():
    result = correlation_matrix([A, B, C], NAMES, "spearman")
    assert result.coefficient("steps", "resting_hr") == pytest.approx(-1.0)
    assert result.coefficient("resting_hr", "steps") == pytest.approx(-1.0)
    assert result.coefficient("steps", "steps") == 1.0


def test_significant_pairs_sorted_by_magnitude():
    result = correlation_matrix([A, B, C], NAMES)
    pairs = result.significant_pairs()
    assert pairs[0][:2] == ("steps", "resting_hr")
    magnitudes = [abs(p[2]) for p in pairs]
    assert magnitudes == sorted(magnitudes, reverse=True)
    assert all(p[3] < 0.05 for p in pairs)


def test_name_count_mismatch():
    with pytest.raises(InvalidInput):
        correlation_matrix([A, B], NAMES)


def test_pair_errors_propagate():
    with pytest.raises(InsufficientData):
        correlation_matrix([[1.0, 2.0], [2.0, 3.0]], ["a", "b"])


def test_single_variable():
    result = correlation_matrix([A], ["steps"])
    assert result.correlation_matrix == [[1.0]]
    assert result.significant_pairs() == []


@pytest.mark.asyncio
async def test_async_matrix_matches_sync():
    sync = correlation_matrix([A, B, C], NAMES, "kendall")
    parallel = await correlation_matrix_async([A, B, C], NAMES, "kendall", max_parallel=2)
    assert parallel.correlation_matrix == sync.correlation_matrix
    assert parallel.p_value_matrix == sync.p_value_matrix
    assert parallel.significance_matrix == sync.significance_matrix


@pytest.mark.asyncio
async def test_async_matrix_validates_names():
    with pytest.raises(InvalidInput):
        await correlation_matrix_async([A], NAMES)
