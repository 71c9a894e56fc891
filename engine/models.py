"""
Result models for anomaly detection and correlation analysis, shared by the synchronous engine and the async service facade.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, model_serializer

from engine.enums import CorrelationDirection, CorrelationStrength, CorrelationType, Severity
from engine.methods import AnomalyMethod


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class PointContext(NpModel):
    model_config = ConfigDict(frozen=True)

    window_size: int
    method: str
    threshold: float


class AnomalyPoint(NpModel):
    model_config = ConfigDict(frozen=True)

    index: int
    value: float
    timestamp: Optional[datetime] = None
    score: float
    severity: Severity
    context: Optional[PointContext] = None


class MultiVariateAnomalyPoint(NpModel):
    model_config = ConfigDict(frozen=True)

    index: int
    values: List[float]
    timestamp: Optional[datetime] = None
    overall_score: float
    feature_scores: List[float]
    severity: Severity


class DetectionMetadata(NpModel):
    total_points: int
    anomaly_count: int
    anomaly_rate: float


class EnsembleMetadata(DetectionMetadata):
    method_count: int
    weighted_average: bool = True
    ensemble_weights: List[float]


class MultivariateMetadata(DetectionMetadata):
    feature_count: int


class AnomalyResult(NpModel):

    anomalies: List[AnomalyPoint]
    scores: List[float]
    threshold: float
    method: AnomalyMethod
    confidence: float = Field(ge=0.0, le=1.0)
    metadata: SerializeAsAny[DetectionMetadata]

    @property
    def anomaly_indices(self) -> List[int]:
        return [a.index for a in self.anomalies]


class MultiVariateAnomalyResult(NpModel):

    anomalies: List[MultiVariateAnomalyPoint]
    scores: List[float]
    feature_contributions: List[List[float]]
    threshold: float
    method: AnomalyMethod
    confidence: float = Field(ge=0.0, le=1.0)
    metadata: MultivariateMetadata

    @property
    def anomaly_indices(self) -> List[int]:
        return [a.index for a in self.anomalies]


class CorrelationResult(NpModel):
    model_config = ConfigDict(frozen=True)

    coefficient: float = Field(ge=-1.0, le=1.0)
    p_value: float = Field(ge=0.0, le=1.0)
    confidence_interval: Tuple[float, float]
    sample_size: int
    is_significant: bool
    correlation_type: CorrelationType
    strength: CorrelationStrength
    direction: CorrelationDirection


class PredictorCorrelation(NpModel):

    predictor: str
    result: CorrelationResult
    combined_p_value: float


class MultiVariateCorrelation(NpModel):

    correlation_matrix: List[List[float]]
    variable_names: List[str]
    significance_matrix: List[List[bool]]
    p_value_matrix: List[List[float]]

    def coefficient(self, a: str, b: str) -> float:
        i = self.variable_names.index(a)
        j = self.variable_names.index(b)
        return self.correlation_matrix[i][j]

    def significant_pairs(self) -> List[Tuple[str, str, float, float]]:
        pairs: List[Tuple[str, str, float, float]] = []
        names = self.variable_names
        for i in range(len(names)):
            for j in range(i + 1, len(names)):
                if self.significance_matrix[i][j]:
                    pairs.append((
                        names[i],
                        names[j],
                        self.correlation_matrix[i][j],
                        self.p_value_matrix[i][j],
                    ))
        return sorted(pairs, key=lambda p: abs(p[2]), reverse=True)
