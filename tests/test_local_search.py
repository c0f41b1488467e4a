import numpy as np
import pytest

from pyODT import ODTClassifier
from pyODT.greedy import GreedyInducer, InductionMode
from pyODT.local_search import LocalSearch
from pyODT.solution import Solution

from conftest import make_params


def _three_attribute_params(max_depth=2):
    rng = np.random.default_rng(1)
    X = rng.uniform(size=(20, 3))
    y = (X[:, 0] > 0.5).astype(int)
    return make_params(X, y, max_depth=max_depth)


def test_swap_neighborhood_size_and_content():
    params = _three_attribute_params()
    solution = Solution(params)
    solution.set_representation([0, 1, -1, 2, -1, -1, -1])

    neighbors = solution.swap_neighbors()
    assert len(neighbors) == 2
    assert neighbors[0].tolist() == [1, 0, -1, 2, -1, -1, -1]
    assert neighbors[1].tolist() == [0, 2, -1, 1, -1, -1, -1]
    # the current representation is left untouched
    assert solution.representation.tolist() == [0, 1, -1, 2, -1, -1, -1]


def test_replace_neighborhood_size():
    params = _three_attribute_params()
    solution = Solution(params)
    solution.set_representation([0, 1, -1, 2, -1, -1, -1])

    neighbors = solution.replace_neighbors()
    assert len(neighbors) == 3 * 2
    assert neighbors[0].tolist() == [1, 1, -1, 2, -1, -1, -1]


def test_improve_is_monotone(noisy_params):
    start = Solution(noisy_params)
    GreedyInducer(noisy_params, start).run(InductionMode.RANDOM_ATTRIBUTE)

    search = LocalSearch(noisy_params)
    result = search.improve(start)

    assert result.accuracy >= start.accuracy
    assert search.history_[0] == start.accuracy
    assert all(b > a for a, b in zip(search.history_, search.history_[1:]))
    assert search.history_[-1] == result.accuracy
    result.check_accuracy()


def test_improve_result_is_local_optimum(noisy_params):
    start = Solution(noisy_params)
    GreedyInducer(noisy_params, start).run()
    search = LocalSearch(noisy_params)
    result = search.improve(start)

    for representation in result.swap_neighbors():
        assert search.decode(representation).accuracy <= result.accuracy


def test_improve_without_neighbors_returns_initial(step_params):
    start = Solution(step_params)
    GreedyInducer(step_params, start).run()
    assert LocalSearch(step_params).improve(start) is start


def test_replace_neighborhood_search(noisy_params):
    start = Solution(noisy_params)
    GreedyInducer(noisy_params, start).run(InductionMode.RANDOM_ATTRIBUTE)
    result = LocalSearch(noisy_params, neighborhood="replace").improve(start)
    assert result.accuracy >= start.accuracy


@pytest.mark.parametrize("seed", range(15))
def test_multistart_not_worse_than_greedy(seed):
    rng = np.random.default_rng(seed)
    X = rng.uniform(size=(80, 6))
    y = ((X[:, 0] > 0.5) ^ (X[:, 1] > 0.5)) | (X[:, 2] > 0.8)
    flip = rng.random(80) < 0.1
    y[flip] = ~y[flip]

    greedy = ODTClassifier(method="greedy", max_depth=2, random_state=seed).fit(X, y)
    multistart = ODTClassifier(method="multistart", max_depth=2, num_trials=5, random_state=seed).fit(X, y)

    assert greedy.accuracy_ < 1.0
    assert multistart.accuracy_ >= greedy.accuracy_
    assert multistart.greedy_solution_.accuracy == greedy.accuracy_


def test_multistart_respects_time_budget(noisy_params):
    params = make_params(noisy_params.dataset.X, noisy_params.dataset.y, max_time=1e-9)
    assert LocalSearch(params).run_multistart(100) is None


def test_unknown_neighborhood(step_params):
    with pytest.raises(ValueError):
        LocalSearch(step_params, neighborhood="shuffle")
