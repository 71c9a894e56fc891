"""
Anomaly detection over numeric health series: statistical z-scores, isolation forests, local outlier factor, multivariate aggregation, confidence-weighted ensembles and a sliding-window real-time detector.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import detect_ensemble, detect_multivariate, detect_univariate
from engine.anomaly.realtime import (
    RealTimeAnomalyDetector,
    create_realtime_detector,
    update_realtime_detector,
)

__all__ = [
    "detect_univariate",
    "detect_multivariate",
    "detect_ensemble",
    "RealTimeAnomalyDetector",
    "create_realtime_detector",
    "update_realtime_detector",
]
