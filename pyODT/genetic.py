from __future__ import annotations

import logging
import math
from typing import List, Tuple

import numpy as np

from .greedy import GreedyInducer, InductionMode
from .local_search import LocalSearch
from .params import Params
from .solution import SENTINEL, Solution

logger = logging.getLogger(__name__)


def _by_accuracy(population: List[Solution]) -> None:
    population.sort(key=lambda s: s.accuracy, reverse=True)


class GeneticAlgorithm:
    """Evolves tree representations with subtree crossover and elitist survival.

    Every offspring is decoded by the greedy inducer in attribute-list mode and
    refined by local search. No mutation operator is applied.
    """

    def __init__(self, params: Params, neighborhood: str = "swap"):
        self.params = params
        self.local_search = LocalSearch(params, neighborhood=neighborhood)
        self.history_: List[float] = []

    def initialize_population(self, population_size: int) -> List[Solution]:
        population = []
        for _ in range(population_size):
            solution = Solution(self.params)
            GreedyInducer(self.params, solution).run(InductionMode.RANDOM_ATTRIBUTE)
            population.append(solution)
        return population

    def select_parents(self, population: List[Solution], selection_fraction: float) -> List[Solution]:
        """Sort the population and return its best individuals, shuffled, in even number."""
        _by_accuracy(population)
        n_parents = int(math.floor(selection_fraction * len(population)))
        if n_parents % 2 != 0:
            n_parents -= 1
        parents = population[:n_parents]
        self.params.rng.shuffle(parents)
        return parents

    @staticmethod
    def swap_candidates(rep1: np.ndarray, rep2: np.ndarray) -> List[int]:
        """Non-root slots (the last one excluded) where both parents split."""
        return [
            i for i in range(1, len(rep1) - 1)
            if rep1[i] != SENTINEL and rep2[i] != SENTINEL
        ]

    @staticmethod
    def recombine(rep1: np.ndarray, rep2: np.ndarray, swap_node: int) -> Tuple[np.ndarray, np.ndarray]:
        """Exchange the whole subtree rooted at ``swap_node`` between two representations."""
        child1 = np.array(rep1, copy=True)
        child2 = np.array(rep2, copy=True)
        size = len(child1)
        stack = [swap_node]
        while stack:
            k = stack.pop()
            child1[k], child2[k] = child2[k], child1[k]
            if 2 * k + 1 < size:
                stack.append(2 * k + 1)
                stack.append(2 * k + 2)
        return child1, child2

    def generate_offspring(self, parents: List[Solution]) -> List[Solution]:
        offspring: List[Solution] = []
        half = len(parents) // 2
        for i in range(half):
            parent1, parent2 = parents[i], parents[i + half]
            candidates = self.swap_candidates(parent1.representation, parent2.representation)
            if not candidates:
                logger.debug("Parents %d/%d share no swappable node", i, i + half)
                continue
            swap_node = candidates[int(self.params.rng.integers(len(candidates)))]

            for child_rep in self.recombine(parent1.representation, parent2.representation, swap_node):
                child = self.local_search.improve(self.local_search.decode(child_rep))
                if np.array_equal(child.representation, parent1.representation):
                    continue
                if np.array_equal(child.representation, parent2.representation):
                    continue
                offspring.append(child)
        return offspring

    def run(self, max_generations: int, population_size: int, selection_fraction: float) -> Solution:
        """Return the most accurate solution observed over all generations."""
        if population_size < 1:
            raise ValueError("population_size must be >= 1")
        if not 0.0 <= selection_fraction <= 1.0:
            raise ValueError("selection_fraction must be in [0, 1]")

        population = self.initialize_population(population_size)
        best: Solution = max(population, key=lambda s: s.accuracy)
        self.history_ = []

        for generation in range(max_generations):
            if self.params.time_exceeded():
                logger.info("Time budget reached after %d generations", generation)
                break

            parents = self.select_parents(population, selection_fraction)
            offspring = self.generate_offspring(parents)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Generation %d parents:\n%s", generation, self.format_population(parents))
                logger.debug("Generation %d offspring:\n%s", generation, self.format_population(offspring))

            population.extend(offspring)
            _by_accuracy(population)
            if population[0].accuracy > best.accuracy:
                best = population[0]
            del population[population_size:]

            self.history_.append(best.accuracy)
            logger.info(
                "Generation %d: %d offspring, best accuracy=%.6f",
                generation, len(offspring), best.accuracy,
            )

        return best

    @staticmethod
    def format_population(population: List[Solution]) -> str:
        return "\n".join(
            f"Accuracy of Solution {i}: {s.accuracy}\t{s.format_representation()}"
            for i, s in enumerate(population)
        )
