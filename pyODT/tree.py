from __future__ import annotations

from enum import Enum
from typing import Iterator, List

import numpy as np

from .metrics import entropy
from .utils import class_histogram, goes_left


class NodeType(Enum):
    NULL = 0
    LEAF = 1
    INTERNAL = 2


class Node:
    """One slot of the complete binary tree, with its samples and statistics."""

    __slots__ = (
        "node_type", "split_attribute", "split_value", "samples", "class_counts",
        "n_samples", "majority_class", "max_same_class", "entropy",
    )

    def __init__(self, n_classes: int):
        self.node_type = NodeType.NULL
        self.split_attribute = -1
        self.split_value = -1.0e30
        self.samples = np.empty(0, dtype=np.int64)
        self.class_counts = np.zeros(n_classes, dtype=np.int64)
        self.n_samples = 0
        self.majority_class = -1
        self.max_same_class = 0
        self.entropy = -1.0e30

    @property
    def is_leaf(self) -> bool:
        return self.node_type is NodeType.LEAF

    @property
    def is_internal(self) -> bool:
        return self.node_type is NodeType.INTERNAL

    @property
    def n_misclassified(self) -> int:
        return self.n_samples - self.max_same_class

    def assign(self, samples: np.ndarray, y: np.ndarray) -> None:
        """Attach a sample subset and refresh the node statistics."""
        self.samples = np.asarray(samples, dtype=np.int64)
        self.class_counts = class_histogram(y[self.samples], len(self.class_counts))
        self.n_samples = int(self.samples.size)
        self.evaluate()

    def evaluate(self) -> None:
        self.entropy = entropy(self.class_counts)
        if self.n_samples > 0:
            # argmax keeps the lowest class index on ties
            self.majority_class = int(np.argmax(self.class_counts))
            self.max_same_class = int(self.class_counts[self.majority_class])


class Tree:
    """Complete binary tree stored as an array of nodes.

    Parent of node k is (k-1)//2, its children are 2k+1 and 2k+2.
    """

    def __init__(self, max_depth: int, n_classes: int):
        self.max_depth = max_depth
        self.nodes: List[Node] = [Node(n_classes) for _ in range(2 ** (max_depth + 1) - 1)]

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, k: int) -> Node:
        return self.nodes[k]

    @staticmethod
    def parent(k: int) -> int:
        return (k - 1) // 2

    @staticmethod
    def left(k: int) -> int:
        return 2 * k + 1

    @staticmethod
    def right(k: int) -> int:
        return 2 * k + 2

    @staticmethod
    def depth_of(k: int) -> int:
        return int(k + 1).bit_length() - 1

    def levels(self) -> Iterator[range]:
        """Index ranges of each depth level, root first."""
        for d in range(self.max_depth + 1):
            yield range(2 ** d - 1, 2 ** (d + 1) - 1)

    def leaves(self) -> List[int]:
        return [k for k, node in enumerate(self.nodes) if node.is_leaf]

    def predict(self, X: np.ndarray, numerical: List[bool]) -> np.ndarray:
        """Majority class of the leaf reached by each encoded row of X."""
        X = np.asarray(X, dtype=float)
        out = np.full(X.shape[0], -1, dtype=np.int64)
        self._predict_recursive(0, X, np.arange(X.shape[0]), numerical, out)
        return out

    def _predict_recursive(self, k, X, indices, numerical, out) -> None:
        if indices.size == 0:
            return
        node = self.nodes[k]
        if not node.is_internal:
            out[indices] = node.majority_class
            return
        att = node.split_attribute
        mask = goes_left(X[indices, att], node.split_value, numerical[att])
        self._predict_recursive(self.left(k), X, indices[mask], numerical, out)
        self._predict_recursive(self.right(k), X, indices[~mask], numerical, out)
