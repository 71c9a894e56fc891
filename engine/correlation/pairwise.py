"""
Pairwise correlation between two series: paired cleaning of non-finite samples, coefficient dispatch by correlation type, significance and Fisher confidence interval, plus ranking several predictors against one target.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Tuple, Union

import numpy as np

from config import settings
from engine.correlation import coefficients, significance
from engine.enums import CorrelationDirection, CorrelationStrength, CorrelationType
from engine.errors import InsufficientData, InvalidInput
from engine.models import CorrelationResult, PredictorCorrelation

log = logging.getLogger(__name__)

_COEFFICIENTS: Dict[CorrelationType, Callable[[np.ndarray, np.ndarray], float]] = {
    CorrelationType.pearson: coefficients.pearson,
    CorrelationType.spearman: coefficients.spearman,
    CorrelationType.kendall: coefficients.kendall,
}


def resolve_type(value: Union[CorrelationType, str, None]) -> CorrelationType:
    if value is None:
        return CorrelationType.pearson
    if isinstance(value, CorrelationType):
        return value
    try:
        return CorrelationType(str(value).strip().lower())
    except ValueError:
        log.warning("unknown correlation type %r, using pearson", value)
        return CorrelationType.pearson


def clean_pairs(var1: Sequence[float], var2: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    if len(var1) != len(var2):
        raise InvalidInput("Variables must have the same length")
    x = np.asarray(list(var1), dtype=float)
    y = np.asarray(list(var2), dtype=float)
    keep = np.isfinite(x) & np.isfinite(y)
    dropped = int(len(keep) - keep.sum())
    if dropped:
        log.debug("dropped %d non-finite pairs before correlating", dropped)

    minimum = max(3, settings.correlation_min_samples)
    if int(keep.sum()) < minimum:
        raise InsufficientData(f"Need at least {minimum} valid paired points")
    return x[keep], y[keep]


def calculate_correlation(
    var1: Sequence[float],
    var2: Sequence[float],
    correlation_type: Union[CorrelationType, str, None] = CorrelationType.pearson,
) -> CorrelationResult:
    kind = resolve_type(correlation_type)
    x, y = clean_pairs(var1, var2)
    n = len(x)

    r = _COEFFICIENTS[kind](x, y)
    p = significance.p_value(r, n, kind)
    return CorrelationResult(
        coefficient=r,
        p_value=p,
        confidence_interval=significance.fisher_interval(r, n),
        sample_size=n,
        is_significant=significance.is_significant(p),
        correlation_type=kind,
        strength=CorrelationStrength.from_coefficient(r),
        direction=CorrelationDirection.from_coefficient(r),
    )


def strongest_predictor(
    target: Sequence[float],
    predictors: Sequence[Sequence[float]],
    names: Sequence[str],
    correlation_type: Union[CorrelationType, str, None] = CorrelationType.pearson,
) -> PredictorCorrelation:
    """Predictor with the largest absolute correlation to ``target``.

    ``combined_p_value`` is the smallest p-value seen across all predictors.
    Ties keep the earliest predictor.
    """
    if not predictors:
        raise InvalidInput("At least one predictor is required")
    if len(predictors) != len(names):
        raise InvalidInput("Number of predictors must match number of names")

    results: List[CorrelationResult] = [
        calculate_correlation(target, predictor, correlation_type) for predictor in predictors
    ]
    best = max(range(len(results)), key=lambda i: (abs(results[i].coefficient), -i))
    return PredictorCorrelation(
        predictor=names[best],
        result=results[best],
        combined_p_value=min(r.p_value for r in results),
    )
