from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from .params import Params
from .solution import SENTINEL, Solution
from .tree import NodeType, Tree
from .utils import (
    NO_GAIN,
    SplitCandidate,
    find_best_categorical_split,
    find_best_numeric_split,
    goes_left,
)

logger = logging.getLogger(__name__)


class InductionMode(Enum):
    """How the split attribute of each node is chosen."""

    EXHAUSTIVE = "exhaustive"
    ATTRIBUTE_LIST = "attribute_list"
    RANDOM_ATTRIBUTE = "random_attribute"


class GreedyInducer:
    """Top-down information-gain tree construction on a Solution.

    Modes
    -----
    EXHAUSTIVE
        Every attribute is evaluated at every node (plain entropy CART).
    ATTRIBUTE_LIST
        Only the attribute stored in the solution representation is evaluated;
        a sentinel entry turns the node into a leaf. Thresholds are still
        chosen greedily, so this decodes a representation into a tree.
    RANDOM_ATTRIBUTE
        One attribute is drawn uniformly at random per node; its threshold is
        chosen greedily.

    The inducer has exclusive write access to the solution during ``run``.
    """

    def __init__(self, params: Params, solution: Solution, store_history: bool = False):
        self.params = params
        self.solution = solution
        self.store_history = store_history
        self.history_: List[Dict[str, Any]] = []

    def run(self, mode: InductionMode = InductionMode.EXHAUSTIVE) -> Solution:
        mode = InductionMode(mode)
        self.history_ = []
        self._build_tree(0, 0, mode)
        self.solution.update_metrics()
        logger.debug("Greedy %s induction: accuracy=%.6f", mode.value, self.solution.accuracy)
        return self.solution

    # -----------------------------
    # Stopping rules
    # -----------------------------
    def _should_stop(self, k: int, depth: int, mode: InductionMode) -> bool:
        node = self.solution.tree[k]
        if depth >= self.params.max_depth:
            return True
        if node.max_same_class == node.n_samples:
            return True
        if mode is InductionMode.ATTRIBUTE_LIST and self.solution.representation[k] == SENTINEL:
            return True
        return False

    # -----------------------------
    # Split search
    # -----------------------------
    def _candidate_attributes(self, k: int, mode: InductionMode) -> List[int]:
        if mode is InductionMode.RANDOM_ATTRIBUTE:
            return [int(self.params.rng.integers(self.params.dataset.n_attributes))]
        if mode is InductionMode.ATTRIBUTE_LIST:
            return [int(self.solution.representation[k])]
        return list(range(self.params.dataset.n_attributes))

    def _evaluate_attribute(self, k: int, attribute: int) -> Optional[SplitCandidate]:
        dataset = self.params.dataset
        node = self.solution.tree[k]
        x = dataset.X[node.samples, attribute]
        y = dataset.y[node.samples]
        if dataset.is_numerical(attribute):
            return find_best_numeric_split(x, y, dataset.n_classes, node.entropy, attribute)
        return find_best_categorical_split(
            x, y, int(dataset.n_levels[attribute]), dataset.n_classes, node.entropy, attribute
        )

    def _find_best_split(self, k: int, mode: InductionMode) -> Optional[SplitCandidate]:
        best: Optional[SplitCandidate] = None
        best_gain = NO_GAIN
        for attribute in self._candidate_attributes(k, mode):
            candidate = self._evaluate_attribute(k, attribute)
            if candidate is None:
                # single level at this node
                continue
            self._check_candidate(candidate, attribute)
            if candidate.gain > best_gain:
                best_gain = candidate.gain
                best = candidate
        return best

    def _check_candidate(self, candidate: SplitCandidate, attribute: int) -> None:
        n_attributes = self.params.dataset.n_attributes
        if (
            candidate.attribute != attribute
            or not 0 <= candidate.attribute < n_attributes
            or candidate.threshold is None
            or not np.isfinite(candidate.gain)
            or candidate.n_left <= 0
            or candidate.n_right <= 0
        ):
            raise RuntimeError(f"Invalid split computed for attribute {attribute}: {candidate}")

    # -----------------------------
    # Tree growth
    # -----------------------------
    def _build_tree(self, k: int, depth: int, mode: InductionMode) -> None:
        if self._should_stop(k, depth, mode):
            return

        candidate = self._find_best_split(k, mode)
        if candidate is None:
            # contradictory samples: no attribute separates them
            return

        self._apply_split(k, candidate)
        if self.store_history:
            node = self.solution.tree[k]
            self.history_.append(
                dict(
                    node=k,
                    depth=depth,
                    attribute=candidate.attribute,
                    threshold=candidate.threshold,
                    gain=candidate.gain,
                    n_samples=node.n_samples,
                    n_left=candidate.n_left,
                    n_right=candidate.n_right,
                )
            )

        self._build_tree(Tree.left(k), depth + 1, mode)
        self._build_tree(Tree.right(k), depth + 1, mode)

    def _apply_split(self, k: int, candidate: SplitCandidate) -> None:
        dataset = self.params.dataset
        tree = self.solution.tree
        node = tree[k]
        node.split_attribute = candidate.attribute
        node.split_value = candidate.threshold
        node.node_type = NodeType.INTERNAL

        values = dataset.X[node.samples, candidate.attribute]
        mask = goes_left(values, candidate.threshold, dataset.is_numerical(candidate.attribute))

        left, right = tree[Tree.left(k)], tree[Tree.right(k)]
        left.node_type = NodeType.LEAF
        right.node_type = NodeType.LEAF
        left.assign(node.samples[mask], dataset.y)
        right.assign(node.samples[~mask], dataset.y)
