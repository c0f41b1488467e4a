from __future__ import annotations

from typing import List

import numpy as np

from .metrics import accuracy
from .params import Params
from .tree import NodeType, Tree


SENTINEL = -1
ACCURACY_TOLERANCE = 1e-5


class Solution:
    """A decision tree together with its attribute-assignment representation.

    ``representation[k]`` is the split attribute of node k, or ``SENTINEL``
    for leaves and unused slots. It is either the input of an attribute-list
    induction or derived from the tree afterwards by ``update_metrics``.
    """

    def __init__(self, params: Params):
        self.params = params
        dataset = params.dataset
        self.tree = Tree(params.max_depth, dataset.n_classes)
        self.representation = np.full(params.tree_capacity, SENTINEL, dtype=np.int64)
        self.n_misclassified = 0
        self.accuracy = 0.0

        root = self.tree[0]
        root.node_type = NodeType.LEAF
        root.assign(np.arange(dataset.n_samples), dataset.y)

    def __repr__(self) -> str:
        return f"Solution(accuracy={self.accuracy:.6f}, representation={self.format_representation()})"

    def update_metrics(self) -> None:
        """Re-derive the representation and accuracy from the current tree."""
        self.update_representation()
        self.n_misclassified = self._count_misclassified()
        self.accuracy = accuracy(self.params.dataset.n_samples, self.n_misclassified)

    def _count_misclassified(self) -> int:
        return sum(node.n_misclassified for node in self.tree.nodes if node.is_leaf)

    def update_representation(self) -> None:
        for k, node in enumerate(self.tree.nodes):
            self.representation[k] = node.split_attribute

    def set_representation(self, representation) -> None:
        rep = np.asarray(representation, dtype=np.int64)
        if rep.shape != self.representation.shape:
            raise ValueError(
                f"Representation must have {self.representation.size} entries, got {rep.size}"
            )
        self.representation = rep.copy()

    def swap_neighbors(self) -> List[np.ndarray]:
        """Representations obtained by exchanging a node's attribute with its parent's."""
        neighborhood = []
        for i in range(1, self.representation.size):
            if self.representation[i] == SENTINEL:
                continue
            neighbor = self.representation.copy()
            p = Tree.parent(i)
            neighbor[i], neighbor[p] = neighbor[p], neighbor[i]
            neighborhood.append(neighbor)
        return neighborhood

    def replace_neighbors(self) -> List[np.ndarray]:
        """Representations obtained by replacing one node's attribute by another one."""
        neighborhood = []
        for i in range(self.representation.size):
            current = self.representation[i]
            if current == SENTINEL:
                continue
            for att in range(self.params.dataset.n_attributes):
                if att == current:
                    continue
                neighbor = self.representation.copy()
                neighbor[i] = att
                neighborhood.append(neighbor)
        return neighborhood

    def check_accuracy(self) -> None:
        """Raise if the stored accuracy no longer matches the tree."""
        recount = accuracy(self.params.dataset.n_samples, self._count_misclassified())
        if abs(self.accuracy - recount) > ACCURACY_TOLERANCE:
            raise RuntimeError(
                f"Wrong accuracy value: stored {self.accuracy}, tree gives {recount}"
            )

    def predict(self, X) -> np.ndarray:
        dataset = self.params.dataset
        numerical = [dataset.is_numerical(j) for j in range(dataset.n_attributes)]
        return self.tree.predict(X, numerical)

    def format_representation(self) -> str:
        return "[ " + "".join(f"{a};" for a in self.representation) + " ]"

    def format_tree(self) -> str:
        """One line per depth level: internal nodes as (N,A<=v), leaves as (L,C,correct,wrong)."""
        dataset = self.params.dataset
        lines = []
        for level in self.tree.levels():
            parts = []
            for k in level:
                node = self.tree[k]
                if node.is_internal:
                    op = "<=" if dataset.is_numerical(node.split_attribute) else "="
                    parts.append(f"(N{k},A[{node.split_attribute}]{op}{node.split_value:g}) ")
                elif node.is_leaf:
                    parts.append(
                        f"(L{k},C{node.majority_class},{node.max_same_class},{node.n_misclassified}) "
                    )
            lines.append("".join(parts))
        return "\n".join(lines)

    def print_tree(self) -> None:
        n_samples = self.params.dataset.n_samples
        misclassified = self._count_misclassified()
        print(self.format_tree())
        print(f"{misclassified}/{n_samples} MISCLASSIFIED SAMPLES")
        print(f"ACCURACY: {accuracy(n_samples, misclassified)}")
