import os
import sys

import numpy as np
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def rng():
    """Seeded generator so forest shapes and scores are reproducible."""
    return np.random.default_rng(12345)


@pytest.fixture
def cluster_with_outlier():
    """Fifty points tightly packed around 10 followed by one far outlier."""
    data = np.random.default_rng(7).normal(loc=10.0, scale=0.5, size=50).tolist()
    return data + [100.0]
