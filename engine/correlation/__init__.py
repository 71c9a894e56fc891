"""
Correlation analysis between health variables: Pearson, Spearman and Kendall coefficients with p-values, confidence intervals and symmetric correlation matrices.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.matrix import correlation_matrix, correlation_matrix_async
from engine.correlation.pairwise import calculate_correlation, strongest_predictor

__all__ = ["calculate_correlation", "strongest_predictor", "correlation_matrix", "correlation_matrix_async"]
