"""
Test cases for the shared enums: severity tiers derived from score/threshold ratios and correlation strength and direction classification.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.enums import CorrelationDirection, CorrelationStrength, Severity


@pytest.mark.parametrize(
    "score, expected",
    [
        (2.1, Severity.low),
        (3.0, Severity.medium),
        (4.0, Severity.high),
        (5.9, Severity.high),
        (6.0, Severity.critical),
    ],
)
def test_severity_from_ratio(score, expected):
    assert Severity.from_ratio(score, 2.0) == expected


def test_severity_zero_threshold():
    assert Severity.from_ratio(1.0, 0.0) == Severity.critical
    assert Severity.from_ratio(0.0, 0.0) == Severity.low


def test_severity_ratio_cutoffs_follow_settings(monkeypatch):
    monkeypatch.setattr("config.settings.severity_ratio_critical", 1.2)
    assert Severity.from_ratio(1.3, 1.0) == Severity.critical


def test_severity_weight_ordering():
    weights = [s.weight() for s in (Severity.low, Severity.medium, Severity.high, Severity.critical)]
    assert weights == sorted(weights)


def test_correlation_strength():
    assert CorrelationStrength.from_coefficient(0.95) == CorrelationStrength.strong
    assert CorrelationStrength.from_coefficient(-0.5) == CorrelationStrength.moderate
    assert CorrelationStrength.from_coefficient(0.25) == CorrelationStrength.weak
    assert CorrelationStrength.from_coefficient(0.05) == CorrelationStrength.negligible


def test_correlation_direction():
    assert CorrelationDirection.from_coefficient(0.3) == CorrelationDirection.positive
    assert CorrelationDirection.from_coefficient(-0.3) == CorrelationDirection.negative
    assert CorrelationDirection.from_coefficient(0.0) == CorrelationDirection.none
