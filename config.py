"""
Constants and configuration for the HealthStat anomaly and correlation engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Optional

from pydantic_settings import BaseSettings


# weight values assigned to severity labels for comparison and ranking
SEVERITY_WEIGHTS: dict[str, int] = {
    "low": 1,
    "medium": 2,
    "high": 4,
    "critical": 8,
}

# Euler-Mascheroni constant used by the expected isolation path length
EULER_GAMMA: float = 0.5772156649

_RANDOM_SEED = os.getenv("HEALTHSTAT_RANDOM_SEED")


class Settings(BaseSettings):
    # statistical scoring
    statistical_threshold: float = float(os.getenv("HEALTHSTAT_STATISTICAL_THRESHOLD", "2.0"))
    realtime_statistical_threshold: float = 2.5
    # threshold used when a method has no scorer of its own
    fallback_threshold: float = 2.0
    std_floor: float = 1e-10

    # isolation forest
    iforest_num_trees: int = 100
    iforest_contamination: float = 0.1
    iforest_max_samples: int = 256
    random_seed: Optional[int] = int(_RANDOM_SEED) if _RANDOM_SEED else None

    # local outlier factor
    lof_neighbors: int = 5
    lof_threshold: float = 1.5

    # adaptive threshold = mean + sigma * std of the score vector
    adaptive_threshold_sigma: float = 2.0

    # score / threshold ratios mapping to severity tiers
    severity_ratio_critical: float = 3.0
    severity_ratio_high: float = 2.0
    severity_ratio_medium: float = 1.5

    # real-time detection
    realtime_window_size: int = 100

    # correlation analysis
    correlation_min_samples: int = 3
    correlation_significance_level: float = 0.05
    correlation_confidence_level: float = 0.95
    correlation_strong_threshold: float = 0.7
    correlation_moderate_threshold: float = 0.4
    correlation_weak_threshold: float = 0.2

    # fan-out bound for tree construction and matrix pairs
    max_parallel_cpu_tasks: int = 4

    # health presets
    vital_signs_contamination: float = 0.05
    sleep_iforest_num_trees: int = 50
    sleep_statistical_threshold: float = 2.0
    sleep_contamination: float = 0.1
    medication_threshold: float = 2.0

    model_config = {
        "env_prefix": "HEALTHSTAT_",
        "extra": "ignore",
    }


settings = Settings()
