"""
Error taxonomy raised by the anomaly detection and correlation engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


class AnalyticsError(Exception):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidInput(AnalyticsError):
    pass


class InsufficientData(AnalyticsError):
    pass


class InvalidModel(AnalyticsError):
    pass
