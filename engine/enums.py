"""
Enumerations for Severity, Detection Method Kinds and Correlation Types

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

from config import SEVERITY_WEIGHTS


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"

    @classmethod
    def from_ratio(cls, score: float, threshold: float) -> Severity:
        # ratio cutoffs are configurable via settings so that every
        # detection path shares one mapping.
        from config import settings

        if threshold == 0:
            return cls.critical if score > 0 else cls.low
        ratio = score / threshold
        if ratio >= settings.severity_ratio_critical:
            return cls.critical
        if ratio >= settings.severity_ratio_high:
            return cls.high
        if ratio >= settings.severity_ratio_medium:
            return cls.medium
        return cls.low

    def weight(self) -> int:
        return SEVERITY_WEIGHTS[self.value]


class CorrelationType(str, Enum):
    pearson = "pearson"
    spearman = "spearman"
    kendall = "kendall"


class CorrelationStrength(str, Enum):
    negligible = "negligible"
    weak = "weak"
    moderate = "moderate"
    strong = "strong"

    @classmethod
    def from_coefficient(cls, coefficient: float) -> CorrelationStrength:
        from config import settings

        magnitude = abs(coefficient)
        if magnitude >= settings.correlation_strong_threshold:
            return cls.strong
        if magnitude >= settings.correlation_moderate_threshold:
            return cls.moderate
        if magnitude >= settings.correlation_weak_threshold:
            return cls.weak
        return cls.negligible


class CorrelationDirection(str, Enum):
    positive = "positive"
    negative = "negative"
    none = "none"

    @classmethod
    def from_coefficient(cls, coefficient: float) -> CorrelationDirection:
        if coefficient > 0:
            return cls.positive
        if coefficient < 0:
            return cls.negative
        return cls.none
