import numpy as np
import pytest

from pyODT.dataset import Dataset
from pyODT.params import Params


def make_params(X, y, attribute_types=None, max_depth=2, seed=0, max_time=None):
    dataset = Dataset.from_arrays(X, y, attribute_types=attribute_types)
    return Params(dataset, max_depth=max_depth, max_time=max_time, seed=seed)


@pytest.fixture
def step_params():
    X = np.array([[0.0], [0.0], [1.0], [1.0]])
    y = np.array(["A", "A", "B", "B"])
    return make_params(X, y, max_depth=1)


@pytest.fixture
def noisy_params():
    rng = np.random.default_rng(3)
    X = rng.uniform(0, 1, size=(60, 4))
    y = ((X[:, 0] > 0.5) ^ (X[:, 1] > 0.3)).astype(int)
    flip = rng.random(60) < 0.1
    y[flip] = 1 - y[flip]
    return make_params(X, y, max_depth=3, seed=7)
