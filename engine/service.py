"""
Async facade over the anomaly detection and correlation engine. Every public call off-loads its CPU work to a worker thread, is timed through the injected performance monitor, and reports failures to the injected error reporter before re-raising them. Health-specific presets wrap the generic detectors with the method choices used for vital signs, medication adherence and sleep.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional, Sequence, Union

import numpy as np

from config import settings
from engine.anomaly.detection import detect_ensemble, detect_multivariate, detect_univariate
from engine.anomaly.realtime import (
    RealTimeAnomalyDetector,
    create_realtime_detector,
    update_realtime_detector,
)
from engine.correlation.matrix import correlation_matrix_async
from engine.correlation.pairwise import calculate_correlation, strongest_predictor
from engine.enums import CorrelationType
from engine.instrumentation import (
    ErrorReporter,
    LoggingErrorReporter,
    LoggingPerformanceMonitor,
    PerformanceMonitor,
    instrumented,
)
from engine.methods import AnomalyMethod, EnsembleMethod, IsolationForestMethod, StatisticalMethod
from engine.models import (
    AnomalyPoint,
    AnomalyResult,
    CorrelationResult,
    MultiVariateAnomalyResult,
    MultiVariateCorrelation,
    PredictorCorrelation,
)

Timestamps = Optional[Sequence[datetime]]
CorrelationKind = Union[CorrelationType, str]


class AnalyticsService:
    def __init__(
        self,
        error_reporter: Optional[ErrorReporter] = None,
        performance_monitor: Optional[PerformanceMonitor] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.error_reporter = error_reporter or LoggingErrorReporter()
        self.performance_monitor = performance_monitor or LoggingPerformanceMonitor()
        self._rng = rng if rng is not None else np.random.default_rng(settings.random_seed)

    def _child_rng(self) -> np.random.Generator:
        # spawned on the event loop thread, consumed on the worker thread
        return self._rng.spawn(1)[0]

    @instrumented("univariate_anomaly_detection", "AnomalyDetection.detect_univariate_anomalies")
    async def detect_univariate_anomalies(
        self,
        data: Sequence[float],
        timestamps: Timestamps = None,
        method: Optional[AnomalyMethod] = None,
    ) -> AnomalyResult:
        return await asyncio.to_thread(detect_univariate, data, timestamps, method, self._child_rng())

    @instrumented("multivariate_anomaly_detection", "AnomalyDetection.detect_multivariate_anomalies")
    async def detect_multivariate_anomalies(
        self,
        data: Sequence[Sequence[float]],
        timestamps: Timestamps = None,
        method: Optional[AnomalyMethod] = None,
    ) -> MultiVariateAnomalyResult:
        return await asyncio.to_thread(detect_multivariate, data, timestamps, method, self._child_rng())

    @instrumented("ensemble_anomaly_detection", "AnomalyDetection.detect_ensemble_anomalies")
    async def detect_ensemble_anomalies(
        self,
        data: Sequence[float],
        methods: Sequence[AnomalyMethod],
        timestamps: Timestamps = None,
    ) -> AnomalyResult:
        return await asyncio.to_thread(detect_ensemble, data, methods, timestamps, self._child_rng())

    @instrumented("real_time_detector_creation", "AnomalyDetection.create_real_time_detector")
    async def create_real_time_detector(
        self,
        initial_data: Sequence[float],
        window_size: Optional[int] = None,
        method: Optional[AnomalyMethod] = None,
    ) -> RealTimeAnomalyDetector:
        return await asyncio.to_thread(create_realtime_detector, initial_data, window_size, method)

    @instrumented("real_time_detection", "AnomalyDetection.update_real_time_detector")
    async def update_real_time_detector(
        self,
        detector: RealTimeAnomalyDetector,
        value: float,
        timestamp: Optional[datetime] = None,
    ) -> Optional[AnomalyPoint]:
        # runs inline: the detector is mutable and updates must stay ordered
        return update_realtime_detector(detector, value, timestamp)

    @instrumented("correlation_calculation", "CorrelationEngine.calculate_correlation")
    async def calculate_correlation(
        self,
        var1: Sequence[float],
        var2: Sequence[float],
        correlation_type: CorrelationKind = CorrelationType.pearson,
    ) -> CorrelationResult:
        return await asyncio.to_thread(calculate_correlation, var1, var2, correlation_type)

    @instrumented("correlation_matrix_calculation", "CorrelationEngine.calculate_correlation_matrix")
    async def calculate_correlation_matrix(
        self,
        variables: Sequence[Sequence[float]],
        names: Sequence[str],
        correlation_type: CorrelationKind = CorrelationType.pearson,
    ) -> MultiVariateCorrelation:
        return await correlation_matrix_async(variables, names, correlation_type)

    @instrumented("correlation_calculation", "CorrelationEngine.find_strongest_predictor")
    async def find_strongest_predictor(
        self,
        target: Sequence[float],
        predictors: Sequence[Sequence[float]],
        names: Sequence[str],
        correlation_type: CorrelationKind = CorrelationType.pearson,
    ) -> PredictorCorrelation:
        return await asyncio.to_thread(strongest_predictor, target, predictors, names, correlation_type)

    async def detect_vital_sign_anomalies(
        self,
        heart_rate: Sequence[float],
        blood_pressure: Sequence[float],
        oxygen_saturation: Sequence[float],
        timestamps: Timestamps = None,
    ) -> MultiVariateAnomalyResult:
        method = IsolationForestMethod(
            num_trees=settings.iforest_num_trees,
            contamination=settings.vital_signs_contamination,
        )
        return await self.detect_multivariate_anomalies(
            [heart_rate, blood_pressure, oxygen_saturation], timestamps, method,
        )

    async def detect_medication_anomalies(
        self,
        adherence: Sequence[float],
        timestamps: Timestamps = None,
    ) -> AnomalyResult:
        method = StatisticalMethod(threshold=settings.medication_threshold)
        return await self.detect_univariate_anomalies(adherence, timestamps, method)

    async def detect_sleep_pattern_anomalies(
        self,
        duration: Sequence[float],
        quality: Sequence[float],
        timestamps: Timestamps = None,
    ) -> MultiVariateAnomalyResult:
        method = EnsembleMethod(methods=[
            StatisticalMethod(threshold=settings.sleep_statistical_threshold),
            IsolationForestMethod(
                num_trees=settings.sleep_iforest_num_trees,
                contamination=settings.sleep_contamination,
            ),
        ])
        return await self.detect_multivariate_anomalies([duration, quality], timestamps, method)
