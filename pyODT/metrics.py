from __future__ import annotations

import numpy as np


def entropy(class_counts) -> np.ndarray | float:
    """Shannon entropy (base 2) of class histograms.

    Accepts a single histogram (1-D) or one histogram per row (2-D).
    Classes with zero samples contribute nothing.
    """
    counts = np.asarray(class_counts, dtype=float)
    totals = counts.sum(axis=-1, keepdims=True)
    frac = np.divide(counts, totals, out=np.zeros_like(counts), where=totals > 0)
    logs = np.log2(frac, out=np.zeros_like(frac), where=frac > 0)
    result = 0.0 - np.sum(frac * logs, axis=-1)
    if counts.ndim == 1:
        return float(result)
    return result


def information_gain(parent_entropy: float, left_counts, right_counts) -> np.ndarray | float:
    """Parent entropy minus size-weighted entropies of the two children."""
    left = np.asarray(left_counts, dtype=float)
    right = np.asarray(right_counts, dtype=float)
    n_left = left.sum(axis=-1)
    n_right = right.sum(axis=-1)
    n_total = n_left + n_right
    weighted = (n_left * entropy(left) + n_right * entropy(right)) / n_total
    gain = parent_entropy - weighted
    if left.ndim == 1:
        return float(gain)
    return gain


def accuracy(n_samples: int, n_misclassified: int) -> float:
    """Fraction of correctly classified samples."""
    if n_samples <= 0:
        return 0.0
    return float(n_samples - n_misclassified) / n_samples
