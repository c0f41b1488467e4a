import numpy as np

from pyODT.tree import Node, NodeType, Tree


def test_index_arithmetic():
    assert Tree.left(0) == 1 and Tree.right(0) == 2
    assert Tree.left(2) == 5 and Tree.right(2) == 6
    assert Tree.parent(5) == 2 and Tree.parent(6) == 2 and Tree.parent(1) == 0
    assert [Tree.depth_of(k) for k in range(7)] == [0, 1, 1, 2, 2, 2, 2]


def test_tree_capacity_and_levels():
    tree = Tree(max_depth=2, n_classes=2)
    assert len(tree) == 7
    assert all(node.node_type is NodeType.NULL for node in tree.nodes)
    assert [list(level) for level in tree.levels()] == [[0], [1, 2], [3, 4, 5, 6]]


def test_node_statistics_break_ties_on_lowest_class():
    y = np.array([1, 0, 2, 2, 0])
    node = Node(n_classes=3)
    node.assign(np.array([0, 1, 2, 3, 4]), y)
    assert node.n_samples == 5
    assert node.class_counts.tolist() == [2, 1, 2]
    assert node.majority_class == 0
    assert node.max_same_class == 2
    assert node.n_misclassified == 3


def test_leaf_reached_by_prediction():
    tree = Tree(max_depth=1, n_classes=2)
    y = np.array([0, 0, 1])
    tree[0].node_type = NodeType.INTERNAL
    tree[0].split_attribute = 0
    tree[0].split_value = 0.5
    for k, samples in ((1, [0, 1]), (2, [2])):
        tree[k].node_type = NodeType.LEAF
        tree[k].assign(np.array(samples), y)

    pred = tree.predict(np.array([[0.1], [0.5], [0.9]]), numerical=[True])
    assert pred.tolist() == [0, 0, 1]
