from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np


class AttributeType(Enum):
    NUMERICAL = "numerical"
    CATEGORICAL = "categorical"


def _as_attribute_type(value) -> AttributeType:
    if isinstance(value, AttributeType):
        return value
    try:
        return AttributeType(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown attribute type {value!r}") from None


def _split_columns(X) -> Tuple[List[np.ndarray], List[str]]:
    """Return the columns of X and their names (pandas frames keep theirs)."""
    if hasattr(X, "columns") and hasattr(X, "values"):
        names = [str(c) for c in X.columns]
        columns = [np.asarray(X[c].values) for c in X.columns]
        return columns, names
    arr = np.asarray(X)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ValueError("X must be 2D.")
    return [arr[:, j] for j in range(arr.shape[1])], [f"X{j}" for j in range(arr.shape[1])]


def _to_float(col: np.ndarray) -> Optional[np.ndarray]:
    try:
        return col.astype(float)
    except (TypeError, ValueError):
        return None


@dataclass
class Dataset:
    """Read-only training data consumed by the tree builders.

    Categorical columns of ``X`` hold level codes ``0..n_levels-1`` stored as
    floats, class labels are encoded as ``0..n_classes-1``.
    """

    X: np.ndarray
    y: np.ndarray
    attribute_types: List[AttributeType]
    n_levels: np.ndarray
    classes: np.ndarray
    categories: List[Optional[np.ndarray]] = field(default_factory=list)
    feature_names: List[str] = field(default_factory=list)

    @property
    def n_samples(self) -> int:
        return int(self.X.shape[0])

    @property
    def n_attributes(self) -> int:
        return int(self.X.shape[1])

    @property
    def n_classes(self) -> int:
        return int(len(self.classes))

    def is_numerical(self, attribute: int) -> bool:
        return self.attribute_types[attribute] is AttributeType.NUMERICAL

    @classmethod
    def from_arrays(
        cls,
        X,
        y,
        attribute_types: Optional[Sequence] = None,
        feature_names: Optional[List[str]] = None,
    ) -> "Dataset":
        columns, names = _split_columns(X)
        y_raw = np.asarray(y.values if hasattr(y, "values") else y).reshape(-1)

        n_samples = len(y_raw)
        if n_samples == 0:
            raise ValueError("Dataset must contain at least one sample.")
        if columns and len(columns[0]) != n_samples:
            raise ValueError(f"Shape mismatch: X has {len(columns[0])} samples, y has {n_samples}")
        if not columns:
            raise ValueError("Dataset must contain at least one attribute.")
        if attribute_types is not None and len(attribute_types) != len(columns):
            raise ValueError(
                f"Expected {len(columns)} attribute types, got {len(attribute_types)}"
            )
        if feature_names is not None:
            if len(feature_names) != len(columns):
                raise ValueError("feature_names must name every column of X.")
            names = list(feature_names)

        X_arr = np.empty((n_samples, len(columns)), dtype=float)
        types: List[AttributeType] = []
        n_levels = np.zeros(len(columns), dtype=np.int64)
        categories: List[Optional[np.ndarray]] = []

        for j, col in enumerate(columns):
            as_float = _to_float(col)
            if attribute_types is not None:
                kind = _as_attribute_type(attribute_types[j])
            else:
                kind = AttributeType.NUMERICAL if as_float is not None else AttributeType.CATEGORICAL

            if kind is AttributeType.NUMERICAL:
                if as_float is None:
                    raise ValueError(f"Column {names[j]} is not numerical.")
                if np.any(np.isnan(as_float)) or np.any(np.isinf(as_float)):
                    raise ValueError(f"Column {names[j]} contains NaN or Inf")
                X_arr[:, j] = as_float
                categories.append(None)
            else:
                levels, codes = np.unique(col, return_inverse=True)
                X_arr[:, j] = codes
                n_levels[j] = len(levels)
                categories.append(levels)
            types.append(kind)

        classes, y_encoded = np.unique(y_raw, return_inverse=True)

        return cls(
            X=np.ascontiguousarray(X_arr),
            y=y_encoded.astype(np.int64),
            attribute_types=types,
            n_levels=n_levels,
            classes=classes,
            categories=categories,
            feature_names=names,
        )

    def encode(self, X) -> np.ndarray:
        """Encode new rows with the categories seen in the training data."""
        columns, _ = _split_columns(X)
        if len(columns) != self.n_attributes:
            raise ValueError(f"X must have {self.n_attributes} columns, got {len(columns)}")
        out = np.empty((len(columns[0]), self.n_attributes), dtype=float)
        for j, col in enumerate(columns):
            levels = self.categories[j]
            if levels is None:
                out[:, j] = col.astype(float)
                continue
            pos = np.searchsorted(levels, col)
            pos = np.clip(pos, 0, len(levels) - 1)
            known = levels[pos] == col
            out[:, j] = np.where(known, pos, -1)
        return out
