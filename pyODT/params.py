from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .dataset import Dataset


@dataclass
class Params:
    """Problem data and run settings shared by every algorithm of a run.

    Parameters
    ----------
    dataset : Dataset
        Training samples.
    max_depth : int
        Maximum tree depth (root depth = 0).
    max_time : float
        Wall-clock budget in seconds for the multi-start and genetic loops.
    seed : Optional[int]
        Seed of the single random generator used by the whole run.
    """

    dataset: Dataset
    max_depth: int = 4
    max_time: float = math.inf
    seed: Optional[int] = 0
    rng: np.random.Generator = field(init=False, repr=False)
    start_time: float = field(init=False, repr=False)
    end_time: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if int(self.max_depth) < 0:
            raise ValueError("max_depth must be >= 0")
        if self.max_time is None:
            self.max_time = math.inf
        if self.max_time <= 0:
            raise ValueError("max_time must be positive")
        self.max_depth = int(self.max_depth)
        self.rng = np.random.default_rng(self.seed)
        self.start_time = time.perf_counter()

    @property
    def tree_capacity(self) -> int:
        return 2 ** (self.max_depth + 1) - 1

    def start_clock(self) -> None:
        self.start_time = time.perf_counter()
        self.end_time = None

    def stop_clock(self) -> float:
        self.end_time = time.perf_counter()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    def time_exceeded(self) -> bool:
        return self.elapsed >= self.max_time
