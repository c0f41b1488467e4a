import numpy as np
import pytest

from pyODT.greedy import GreedyInducer, InductionMode
from pyODT.solution import Solution
from pyODT.tree import NodeType
from pyODT.utils import SplitCandidate

from conftest import make_params


def test_exhaustive_split_of_simple_step(step_params):
    solution = Solution(step_params)
    GreedyInducer(step_params, solution).run(InductionMode.EXHAUSTIVE)

    root = solution.tree[0]
    assert root.node_type is NodeType.INTERNAL
    assert root.split_attribute == 0
    assert root.split_value == 0.0
    for k in (1, 2):
        child = solution.tree[k]
        assert child.node_type is NodeType.LEAF
        assert child.entropy == 0.0
        assert child.n_samples == 2
    assert solution.accuracy == 1.0
    assert solution.n_misclassified == 0
    assert solution.representation.tolist() == [0, -1, -1]


def test_depth_zero_keeps_root_leaf():
    params = make_params(np.array([[0.0], [1.0]]), np.array([0, 1]), max_depth=0)
    solution = Solution(params)
    GreedyInducer(params, solution).run()
    assert solution.tree[0].is_leaf
    assert solution.accuracy == 0.5


def test_pure_root_is_not_split():
    params = make_params(np.array([[0.0], [1.0], [2.0]]), np.array([1, 1, 1]))
    solution = Solution(params)
    GreedyInducer(params, solution).run()
    assert solution.tree[0].is_leaf
    assert solution.accuracy == 1.0


def test_contradictory_samples_become_leaf():
    X = np.array([[1.0, 2.0], [1.0, 2.0], [1.0, 2.0], [1.0, 2.0]])
    y = np.array([0, 1, 0, 1])
    params = make_params(X, y)
    solution = Solution(params)
    GreedyInducer(params, solution).run()
    assert solution.tree[0].is_leaf
    assert solution.representation.tolist() == [-1] * 7
    assert solution.accuracy == 0.5


def test_categorical_one_vs_rest_split():
    X = np.array([["red"], ["green"], ["blue"], ["red"]], dtype=object)
    y = np.array([1, 0, 0, 1])
    params = make_params(X, y, attribute_types=["categorical"], max_depth=1)
    solution = Solution(params)
    GreedyInducer(params, solution).run()

    # categories are sorted: blue=0, green=1, red=2
    assert solution.tree[0].split_value == 2.0
    assert solution.tree[1].samples.tolist() == [0, 3]
    assert solution.accuracy == 1.0


def test_attribute_list_follows_representation():
    X = np.array([[0.0, 5.0], [0.0, 5.0], [1.0, 5.0], [1.0, 5.0]])
    y = np.array([0, 0, 1, 1])
    params = make_params(X, y, max_depth=1)

    solution = Solution(params)
    solution.set_representation([0, -1, -1])
    GreedyInducer(params, solution).run(InductionMode.ATTRIBUTE_LIST)
    assert solution.accuracy == 1.0

    # attribute 1 has a single level: the root stays a leaf
    solution = Solution(params)
    solution.set_representation([1, -1, -1])
    GreedyInducer(params, solution).run(InductionMode.ATTRIBUTE_LIST)
    assert solution.tree[0].is_leaf
    assert solution.representation.tolist() == [-1, -1, -1]


def test_attribute_list_sentinel_stops(step_params):
    solution = Solution(step_params)
    GreedyInducer(step_params, solution).run(InductionMode.ATTRIBUTE_LIST)
    assert solution.tree[0].is_leaf
    assert solution.accuracy == 0.5


def test_random_attribute_mode_is_reproducible(noisy_params):
    reps = []
    for _ in range(2):
        params = make_params(noisy_params.dataset.X, noisy_params.dataset.y, max_depth=3, seed=11)
        solution = Solution(params)
        GreedyInducer(params, solution).run(InductionMode.RANDOM_ATTRIBUTE)
        reps.append(solution.representation.copy())
        assert all(-1 <= a < params.dataset.n_attributes for a in solution.representation)
    assert np.array_equal(reps[0], reps[1])


def test_representation_matches_tree(noisy_params):
    solution = Solution(noisy_params)
    GreedyInducer(noisy_params, solution).run()
    for k, node in enumerate(solution.tree.nodes):
        expected = node.split_attribute if node.is_internal else -1
        assert solution.representation[k] == expected
        if node.is_internal:
            left = solution.tree[2 * k + 1].samples
            right = solution.tree[2 * k + 2].samples
            assert sorted(np.concatenate([left, right]).tolist()) == sorted(node.samples.tolist())
    solution.check_accuracy()


def test_store_history(step_params):
    inducer = GreedyInducer(step_params, Solution(step_params), store_history=True)
    inducer.run()
    assert len(inducer.history_) == 1
    assert inducer.history_[0]["attribute"] == 0
    assert inducer.history_[0]["gain"] == 1.0


def test_malformed_split_is_fatal(step_params, monkeypatch):
    def broken(x, y, n_classes, parent_entropy, attribute=-1):
        return SplitCandidate(attribute=attribute + 3, threshold=0.0, gain=1.0, n_left=2, n_right=2)

    monkeypatch.setattr("pyODT.greedy.find_best_numeric_split", broken)
    with pytest.raises(RuntimeError):
        GreedyInducer(step_params, Solution(step_params)).run()


def test_equal_gain_keeps_earliest_attribute():
    x = np.array([0.0, 1.0, 2.0, 3.0])
    X = np.column_stack([x, x])
    y = np.array([0, 0, 1, 1])
    params = make_params(X, y, max_depth=1)
    solution = Solution(params)
    GreedyInducer(params, solution).run()
    assert solution.tree[0].split_attribute == 0
    assert solution.representation.tolist() == [0, -1, -1]


def test_levels_within_epsilon_do_not_split():
    X = np.array([[0.0], [1e-6], [0.0], [1e-6]])
    y = np.array([0, 1, 1, 0])
    params = make_params(X, y)
    solution = Solution(params)
    GreedyInducer(params, solution).run()
    assert solution.tree[0].is_leaf
    assert solution.accuracy == 0.5
