from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .metrics import entropy

EPSILON = 1e-5
NO_GAIN = -1.0e30


@dataclass
class SplitCandidate:
    attribute: int
    threshold: float
    gain: float
    n_left: int
    n_right: int


def class_histogram(y: np.ndarray, n_classes: int) -> np.ndarray:
    return np.bincount(y, minlength=n_classes).astype(np.int64)


def find_best_numeric_split(
    x: np.ndarray,
    y: np.ndarray,
    n_classes: int,
    parent_entropy: float,
    attribute: int = -1,
) -> Optional[SplitCandidate]:
    """Best ``x <= threshold`` split of a numerical attribute by information gain.

    Distinct levels are visited in increasing order; all samples of a level move
    from the right histogram to the left one before the split is scored. The
    last level is skipped (it would leave the right side empty). The first
    level reaching the maximal gain wins. Returns None when every sample has
    the same value.
    """
    n_samples = len(x)
    levels = np.unique(x)
    if len(levels) <= 1:
        return None

    order = np.argsort(x, kind="mergesort")
    x_sorted = x[order]
    y_sorted = y[order]

    # Number of samples on the left once each level has been switched over.
    n_left = np.searchsorted(x_sorted, levels + EPSILON, side="left")
    valid = n_left < n_samples
    n_left = n_left[valid]
    levels = levels[valid]
    if n_left.size == 0:
        return None

    onehot = np.zeros((n_samples, n_classes), dtype=np.int64)
    onehot[np.arange(n_samples), y_sorted] = 1
    cumulative = np.cumsum(onehot, axis=0)
    left_counts = cumulative[n_left - 1]
    right_counts = cumulative[-1] - left_counts

    weighted = (n_left * entropy(left_counts) + (n_samples - n_left) * entropy(right_counts)) / n_samples
    gains = parent_entropy - weighted

    best = int(np.argmax(gains))
    return SplitCandidate(
        attribute=attribute,
        threshold=float(levels[best]),
        gain=float(gains[best]),
        n_left=int(n_left[best]),
        n_right=int(n_samples - n_left[best]),
    )


def find_best_categorical_split(
    x: np.ndarray,
    y: np.ndarray,
    n_levels: int,
    n_classes: int,
    parent_entropy: float,
    attribute: int = -1,
) -> Optional[SplitCandidate]:
    """Best one-vs-rest split (``x == level`` goes left) of a categorical attribute.

    Levels holding none or all of the samples are skipped. Returns None when no
    level separates the samples.
    """
    n_samples = len(x)
    codes = x.astype(np.int64)

    level_class = np.zeros((n_levels, n_classes), dtype=np.int64)
    np.add.at(level_class, (codes, y), 1)
    level_counts = level_class.sum(axis=1)
    class_counts = level_class.sum(axis=0)

    candidates = np.nonzero((level_counts > 0) & (level_counts < n_samples))[0]
    if candidates.size == 0:
        return None

    inside = level_class[candidates]
    others = class_counts - inside
    n_inside = level_counts[candidates]

    weighted = (n_inside * entropy(inside) + (n_samples - n_inside) * entropy(others)) / n_samples
    gains = parent_entropy - weighted

    best = int(np.argmax(gains))
    return SplitCandidate(
        attribute=attribute,
        threshold=float(candidates[best]),
        gain=float(gains[best]),
        n_left=int(n_inside[best]),
        n_right=int(n_samples - n_inside[best]),
    )


def goes_left(values: np.ndarray, threshold: float, numerical: bool) -> np.ndarray:
    """Mask of the samples sent to the left child by a split."""
    if numerical:
        return values < threshold + EPSILON
    return (values < threshold + EPSILON) & (values > threshold - EPSILON)
