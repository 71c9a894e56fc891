"""
Significance testing and confidence intervals for correlation coefficients, using normal approximations for the p-value and the Fisher z-transform for the interval.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Tuple

from scipy import stats

from config import settings
from engine.enums import CorrelationType


def _two_sided(statistic: float) -> float:
    return float(min(1.0, max(0.0, 2.0 * (1.0 - stats.norm.cdf(abs(statistic))))))


def p_value(coefficient: float, n: int, correlation_type: CorrelationType) -> float:
    if correlation_type == CorrelationType.kendall:
        variance = 2.0 * (2 * n + 5) / (9.0 * n * (n - 1))
        return _two_sided(coefficient / math.sqrt(variance))

    remainder = 1.0 - coefficient * coefficient
    if remainder <= 0:
        return 0.0
    t = coefficient * math.sqrt((n - 2) / remainder)
    return _two_sided(t)


def fisher_interval(coefficient: float, n: int, level: float | None = None) -> Tuple[float, float]:
    if level is None:
        level = settings.correlation_confidence_level
    if n <= 3:
        return (-1.0, 1.0)
    if abs(coefficient) >= 1.0:
        return (coefficient, coefficient)

    z = math.atanh(coefficient)
    se = 1.0 / math.sqrt(n - 3)
    z_crit = float(stats.norm.ppf(1.0 - (1.0 - level) / 2.0))
    return (math.tanh(z - z_crit * se), math.tanh(z + z_crit * se))


def is_significant(p: float, alpha: float | None = None) -> bool:
    if alpha is None:
        alpha = settings.correlation_significance_level
    return p < alpha
