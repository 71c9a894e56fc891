"""
Test cases for pairwise correlation: Pearson, Spearman and Kendall coefficients, p-values, Fisher confidence intervals, paired cleaning of non-finite samples and predictor ranking.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
import math

import numpy as np
import pytest

from engine.correlation import calculate_correlation, strongest_predictor
from engine.correlation.coefficients import kendall, pearson, ranks, spearman
from engine.correlation.significance import fisher_interval, p_value
from engine.enums import CorrelationDirection, CorrelationStrength, CorrelationType
from engine.errors import InsufficientData, InvalidInput

X = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]
Y = [2.0, 1.0, 4.0, 3.0, 6.0, 5.0, 8.0, 7.0, 10.0, 9.0]  # r = 77.5 / 82.5


def test_perfect_linear_pearson():
    result = calculate_correlation([1, 2, 3, 4, 5], [2, 4, 6, 8, 10], CorrelationType.pearson)
    assert result.coefficient == pytest.approx(1.0)
    assert result.p_value == pytest.approx(0.0, abs=1e-6)
    assert result.is_significant is True
    assert result.sample_size == 5
    assert result.strength == CorrelationStrength.strong
    assert result.direction == CorrelationDirection.positive


def test_pearson_hand_computed():
    assert pearson(np.array(X), np.array(Y)) == pytest.approx(77.5 / 82.5)


def test_pearson_constant_series_is_zero():
    result = calculate_correlation([1, 2, 3, 4], [5, 5, 5, 5])
    assert result.coefficient == 0.0
    assert result.p_value == pytest.approx(1.0)
    assert result.is_significant is False
    assert result.direction == CorrelationDirection.none


def test_ranks_break_ties_by_position():
    assert ranks(np.array([3.0, 1.0, 3.0, 2.0])).tolist() == [3.0, 1.0, 4.0, 2.0]


def test_spearman_is_monotonic():
    assert spearman(np.array([1.0, 2.0, 3.0, 4.0, 100.0]), np.array([1.0, 2.0, 3.0, 4.0, 5.0])) == pytest.approx(1.0)
    result = calculate_correlation([1, 2, 3, 4, 5], [50, 40, 30, 20, 1], "spearman")
    assert result.coefficient == pytest.approx(-1.0)
    assert result.correlation_type == CorrelationType.spearman


def test_kendall_extremes():
    assert kendall(np.array([1.0, 2.0, 3.0]), np.array([1.0, 2.0, 3.0])) == 1.0
    assert kendall(np.array([1.0, 2.0, 3.0]), np.array([3.0, 2.0, 1.0])) == -1.0


def test_kendall_counts_pairs():
    # pairs: (0,1) disc, (0,2) conc, (1,2) conc, (0,3) conc, (1,3) conc, (2,3) conc
    tau = kendall(np.array([1.0, 2.0, 3.0, 4.0]), np.array([2.0, 1.0, 3.0, 4.0]))
    assert tau == pytest.approx((5 - 1) / 6)


def test_kendall_p_value_uses_z_test():
    result = calculate_correlation([1, 2, 3], [1, 2, 3], CorrelationType.kendall)
    z = 1.0 / math.sqrt(2.0 * (2 * 3 + 5) / (9.0 * 3 * 2))
    assert result.p_value == pytest.approx(math.erfc(z / math.sqrt(2)))
    assert result.is_significant is False


def test_t_statistic_p_value():
    r, n = 0.5, 12
    t = r * math.sqrt((n - 2) / (1 - r * r))
    assert p_value(r, n, CorrelationType.pearson) == pytest.approx(math.erfc(t / math.sqrt(2)))


def test_fisher_interval():
    r = 77.5 / 82.5
    lower, upper = fisher_interval(r, len(X), level=0.95)
    se = 1.0 / math.sqrt(len(X) - 3)
    assert lower == pytest.approx(math.tanh(math.atanh(r) - 1.959964 * se), rel=1e-5)
    assert upper == pytest.approx(math.tanh(math.atanh(r) + 1.959964 * se), rel=1e-5)
    assert -1.0 <= lower < r < upper <= 1.0


def test_fisher_interval_small_sample_and_perfect_fit():
    assert fisher_interval(0.4, 3) == (-1.0, 1.0)
    assert fisher_interval(1.0, 10) == (1.0, 1.0)


def test_result_interval_brackets_coefficient():
    result = calculate_correlation(X, Y)
    lower, upper = result.confidence_interval
    assert lower < result.coefficient < upper


def test_non_finite_pairs_are_dropped():
    result = calculate_correlation([1, 2, float("nan"), 4, 5, 6], [2, 4, 6, float("inf"), 10, 12])
    assert result.sample_size == 4
    assert result.coefficient == pytest.approx(1.0)


def test_unequal_lengths_raise():
    with pytest.raises(InvalidInput):
        calculate_correlation([1, 2, 3], [1, 2])


def test_too_few_valid_pairs_raise():
    with pytest.raises(InsufficientData):
        calculate_correlation([1, 2, float("nan")], [1, 2, 3])


def test_min_samples_setting(monkeypatch):
    monkeypatch.setattr("config.settings.correlation_min_samples", 5)
    with pytest.raises(InsufficientData):
        calculate_correlation([1, 2, 3, 4], [1, 2, 3, 4])


def test_unknown_type_falls_back_to_pearson(caplog):
    with caplog.at_level(logging.WARNING, logger="engine.correlation.pairwise"):
        result = calculate_correlation(X, Y, "distance")
    assert result.correlation_type == CorrelationType.pearson
    assert any("unknown correlation type" in r.getMessage() for r in caplog.records)


def test_strongest_predictor():
    reversed_x = list(reversed(X))
    result = strongest_predictor(X, [Y, reversed_x, [3.0] * 10], ["noisy", "reversed", "flat"])
    assert result.predictor == "reversed"
    assert result.result.coefficient == pytest.approx(-1.0)
    assert result.combined_p_value == pytest.approx(min(
        calculate_correlation(X, p).p_value for p in (Y, reversed_x, [3.0] * 10)
    ))


def test_strongest_predictor_validates_names():
    with pytest.raises(InvalidInput):
        strongest_predictor(X, [Y], ["a", "b"])
    with pytest.raises(InvalidInput):
        strongest_predictor(X, [], [])
