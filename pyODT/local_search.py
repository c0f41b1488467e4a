from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .greedy import GreedyInducer, InductionMode
from .params import Params
from .solution import Solution

logger = logging.getLogger(__name__)

NEIGHBORHOODS = ("swap", "replace")


class LocalSearch:
    """Steepest-ascent hill climbing over attribute-assignment representations.

    Parameters
    ----------
    params : Params
        Shared run parameters (dataset, depth, clock, random generator).
    neighborhood : {"swap", "replace"}
        ``"swap"`` exchanges each node's attribute with its parent's,
        ``"replace"`` substitutes each node's attribute with every other one.
    """

    def __init__(self, params: Params, neighborhood: str = "swap"):
        if neighborhood not in NEIGHBORHOODS:
            raise ValueError(f"neighborhood must be one of {NEIGHBORHOODS}, got {neighborhood!r}")
        self.params = params
        self.neighborhood = neighborhood
        self.history_: List[float] = []

    def _neighbors(self, solution: Solution) -> List[np.ndarray]:
        if self.neighborhood == "replace":
            return solution.replace_neighbors()
        return solution.swap_neighbors()

    def decode(self, representation) -> Solution:
        """Build and score the tree described by a representation."""
        solution = Solution(self.params)
        solution.set_representation(representation)
        return GreedyInducer(self.params, solution).run(InductionMode.ATTRIBUTE_LIST)

    def improve(self, initial_solution: Solution) -> Solution:
        """Return a local optimum at least as accurate as ``initial_solution``."""
        best = initial_solution
        self.history_ = [best.accuracy]

        while True:
            best_neighbor: Optional[Solution] = None
            best_accuracy = best.accuracy
            for representation in self._neighbors(best):
                candidate = self.decode(representation)
                if candidate.accuracy > best_accuracy:
                    best_accuracy = candidate.accuracy
                    best_neighbor = candidate

            if best_neighbor is None:
                break
            best = best_neighbor
            self.history_.append(best.accuracy)
            logger.debug("Local search improved to accuracy=%.6f", best.accuracy)

        return best

    def run_multistart(self, num_trials: int) -> Optional[Solution]:
        """Improve random greedy solutions until ``num_trials`` or the time budget runs out.

        Returns None only if the time budget was already spent before the first trial.
        """
        best: Optional[Solution] = None
        best_accuracy = -1.0

        for trial in range(num_trials):
            if self.params.time_exceeded():
                logger.info("Time budget reached after %d multi-start trials", trial)
                break
            solution = Solution(self.params)
            GreedyInducer(self.params, solution).run(InductionMode.RANDOM_ATTRIBUTE)
            improved = self.improve(solution)

            if improved.accuracy > best_accuracy:
                best_accuracy = improved.accuracy
                best = improved
                logger.debug("Trial %d: new best accuracy=%.6f", trial, best_accuracy)

        return best
