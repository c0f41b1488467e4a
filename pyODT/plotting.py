from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from .solution import Solution
from .tree import Tree


def _layout_tree(tree: Tree, k: int = 0, positions=None, leaf_positions=None):
    if positions is None:
        positions = {}
    if leaf_positions is None:
        leaf_positions = []

    depth = Tree.depth_of(k)
    if not tree[k].is_internal:
        xpos = len(leaf_positions)
        positions[k] = (xpos, -depth)
        leaf_positions.append(xpos)
        return positions, leaf_positions

    left, right = Tree.left(k), Tree.right(k)
    positions, leaf_positions = _layout_tree(tree, left, positions, leaf_positions)
    positions, leaf_positions = _layout_tree(tree, right, positions, leaf_positions)

    lx, _ = positions[left]
    rx, _ = positions[right]
    positions[k] = ((lx + rx) / 2, -depth)
    return positions, leaf_positions


def _node_label(solution: Solution, k: int) -> str:
    dataset = solution.params.dataset
    node = solution.tree[k]
    if not node.is_internal:
        label = dataset.classes[node.majority_class] if node.majority_class >= 0 else "-"
        return f"{label}\nn={node.n_samples}\nerr={node.n_misclassified}"

    att = node.split_attribute
    name = dataset.feature_names[att] if dataset.feature_names else f"X{att}"
    if dataset.is_numerical(att):
        return f"{name} ≤ {node.split_value:.3f}\nn={node.n_samples}"
    level = dataset.categories[att][int(node.split_value)]
    return f"{name} = {level}\nn={node.n_samples}"


def plot_tree(solution: Solution, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Draw the tree of a solution, leaves spread left to right."""
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 5))
    tree = solution.tree
    positions: Dict[int, Tuple[float, float]]
    positions, _ = _layout_tree(tree)

    edges: List[Tuple[int, int]] = [
        (k, child)
        for k in positions
        if tree[k].is_internal
        for child in (Tree.left(k), Tree.right(k))
    ]
    for k, child in edges:
        ax.plot(
            [positions[k][0], positions[child][0]],
            [positions[k][1], positions[child][1]],
            color="0.6",
        )

    for k, (x, y) in positions.items():
        ax.scatter([x], [y], s=200, color="#264653" if tree[k].is_internal else "#2a9d8f")
        ax.text(x, y, _node_label(solution, k), ha="center", va="center", color="white", fontsize=8)

    ax.set_axis_off()
    ax.set_title(f"Decision tree (accuracy={solution.accuracy:.3f})", fontsize=12)
    return ax
