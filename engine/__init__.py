"""
Health analytics engine: anomaly detection and correlation analysis over numeric health series.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.enums import CorrelationDirection, CorrelationStrength, CorrelationType, Severity
from engine.errors import AnalyticsError, InsufficientData, InvalidInput, InvalidModel
from engine.service import AnalyticsService

__all__ = [
    "AnalyticsService",
    "Severity",
    "CorrelationType",
    "CorrelationStrength",
    "CorrelationDirection",
    "AnalyticsError",
    "InvalidInput",
    "InsufficientData",
    "InvalidModel",
]
