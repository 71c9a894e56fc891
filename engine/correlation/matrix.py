"""
Correlation matrix construction over N named variables: the upper triangle is computed pairwise and mirrored, with a fixed diagonal. The async variant fans pairs out to worker threads under a bounded semaphore.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
from typing import List, Sequence, Tuple, Union

from config import settings
from engine.correlation.pairwise import calculate_correlation, resolve_type
from engine.enums import CorrelationType
from engine.errors import InvalidInput
from engine.models import CorrelationResult, MultiVariateCorrelation


def _pairs(n: int) -> List[Tuple[int, int]]:
    return [(i, j) for i in range(n) for j in range(i + 1, n)]


def _validate(variables: Sequence[Sequence[float]], names: Sequence[str]) -> None:
    if len(variables) != len(names):
        raise InvalidInput("Number of variables must match number of names")


def _assemble(
    names: Sequence[str],
    pairs: List[Tuple[int, int]],
    results: Sequence[CorrelationResult],
) -> MultiVariateCorrelation:
    n = len(names)
    coefficients = [[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)]
    significant = [[i == j for j in range(n)] for i in range(n)]
    p_values = [[0.0] * n for _ in range(n)]

    for (i, j), result in zip(pairs, results):
        coefficients[i][j] = coefficients[j][i] = result.coefficient
        significant[i][j] = significant[j][i] = result.is_significant
        p_values[i][j] = p_values[j][i] = result.p_value

    return MultiVariateCorrelation(
        correlation_matrix=coefficients,
        variable_names=list(names),
        significance_matrix=significant,
        p_value_matrix=p_values,
    )


def correlation_matrix(
    variables: Sequence[Sequence[float]],
    names: Sequence[str],
    correlation_type: Union[CorrelationType, str, None] = CorrelationType.pearson,
) -> MultiVariateCorrelation:
    _validate(variables, names)
    kind = resolve_type(correlation_type)
    pairs = _pairs(len(variables))
    results = [calculate_correlation(variables[i], variables[j], kind) for i, j in pairs]
    return _assemble(names, pairs, results)


async def correlation_matrix_async(
    variables: Sequence[Sequence[float]],
    names: Sequence[str],
    correlation_type: Union[CorrelationType, str, None] = CorrelationType.pearson,
    max_parallel: int | None = None,
) -> MultiVariateCorrelation:
    _validate(variables, names)
    kind = resolve_type(correlation_type)
    pairs = _pairs(len(variables))
    if max_parallel is None:
        max_parallel = settings.max_parallel_cpu_tasks
    sem = asyncio.Semaphore(max(1, int(max_parallel)))

    async def _pair(i: int, j: int) -> CorrelationResult:
        async with sem:
            return await asyncio.to_thread(calculate_correlation, variables[i], variables[j], kind)

    results = await asyncio.gather(*[_pair(i, j) for i, j in pairs])
    return _assemble(names, pairs, results)
