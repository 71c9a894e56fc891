"""
Collaborator interfaces for error reporting and performance metrics, their logging defaults, and the decorator that wraps every public service call with timing and error reporting.

The :func:`instrumented` decorator records elapsed seconds under a metric name
whether the call succeeds or fails. On failure it hands the exception and a
context label to the error reporter and then re-raises it unchanged.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar, cast

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class ErrorReporter(ABC):
    @abstractmethod
    async def handle_error(self, error: BaseException, context: str) -> None:
        ...


class PerformanceMonitor(ABC):
    @abstractmethod
    def record_metric(self, name: str, value: float) -> None:
        ...


class LoggingErrorReporter(ErrorReporter):
    async def handle_error(self, error: BaseException, context: str) -> None:
        log.error("%s failed: %s", context, error)


class LoggingPerformanceMonitor(PerformanceMonitor):
    def record_metric(self, name: str, value: float) -> None:
        log.debug("metric %s=%.6fs", name, value)


def instrumented(metric: str, context: str) -> Callable[[F], F]:
    """Decorator for async methods of objects exposing ``error_reporter`` and
    ``performance_monitor`` attributes.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                await self.error_reporter.handle_error(exc, context)
                raise
            finally:
                self.performance_monitor.record_metric(metric, time.perf_counter() - started)

        return cast(F, wrapper)

    return decorator
