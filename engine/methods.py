"""
Detection method descriptors: a tagged union of the supported anomaly detection methods, each carrying its own parameters, plus the threshold policies that depend on the chosen method.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from config import settings


class _Method(BaseModel):
    model_config = ConfigDict(frozen=True)

    def describe(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in self.model_dump(exclude={"kind"}).items())
        return f"{self.kind}({params})"


class StatisticalMethod(_Method):
    kind: Literal["statistical"] = "statistical"
    threshold: float = Field(default_factory=lambda: settings.statistical_threshold, gt=0.0)


class IsolationForestMethod(_Method):
    kind: Literal["isolation_forest"] = "isolation_forest"
    num_trees: int = Field(default_factory=lambda: settings.iforest_num_trees, ge=1)
    contamination: float = Field(default_factory=lambda: settings.iforest_contamination, ge=0.0, le=1.0)


class LocalOutlierFactorMethod(_Method):
    kind: Literal["local_outlier_factor"] = "local_outlier_factor"
    neighbors: int = Field(default_factory=lambda: settings.lof_neighbors, ge=1)


class OneClassSVMMethod(_Method):
    kind: Literal["one_class_svm"] = "one_class_svm"
    nu: float = 0.1
    gamma: float = 0.1


class DBSCANMethod(_Method):
    kind: Literal["dbscan"] = "dbscan"
    epsilon: float = 0.5
    min_points: int = 5


class DeepLearningMethod(_Method):
    kind: Literal["deep_learning"] = "deep_learning"
    model_type: str = "autoencoder"


class EnsembleMethod(_Method):
    kind: Literal["ensemble"] = "ensemble"
    methods: List["AnomalyMethod"] = Field(default_factory=list)

    def describe(self) -> str:
        return f"ensemble({', '.join(m.describe() for m in self.methods)})"


AnomalyMethod = Annotated[
    Union[
        StatisticalMethod,
        IsolationForestMethod,
        LocalOutlierFactorMethod,
        OneClassSVMMethod,
        DBSCANMethod,
        DeepLearningMethod,
        EnsembleMethod,
    ],
    Field(discriminator="kind"),
]

EnsembleMethod.model_rebuild()

# methods accepted for compatibility that are scored statistically
UNSCORED_METHODS = (OneClassSVMMethod, DBSCANMethod, DeepLearningMethod)


def adaptive_threshold(scores: np.ndarray, sigma: float | None = None) -> float:
    if sigma is None:
        sigma = settings.adaptive_threshold_sigma
    arr = np.asarray(scores, dtype=float)
    return float(arr.mean() + sigma * arr.std())


def contamination_threshold(scores: np.ndarray, contamination: float) -> float:
    ordered = np.sort(np.asarray(scores, dtype=float))[::-1]
    index = int(len(ordered) * contamination)
    return float(ordered[min(max(index, 0), len(ordered) - 1)])


def select_threshold(scores: np.ndarray, method: AnomalyMethod) -> float:
    if isinstance(method, StatisticalMethod):
        return method.threshold
    if isinstance(method, IsolationForestMethod):
        return contamination_threshold(scores, method.contamination)
    if isinstance(method, LocalOutlierFactorMethod):
        return settings.lof_threshold
    return adaptive_threshold(scores)


def realtime_threshold(method: AnomalyMethod) -> float:
    if isinstance(method, StatisticalMethod):
        return method.threshold
    if isinstance(method, IsolationForestMethod):
        return 1.0 - method.contamination
    if isinstance(method, LocalOutlierFactorMethod):
        return settings.lof_threshold
    return settings.fallback_threshold
