from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .dataset import Dataset
from .export import export_results
from .genetic import GeneticAlgorithm
from .greedy import GreedyInducer, InductionMode
from .local_search import LocalSearch
from .params import Params
from .solution import Solution

logger = logging.getLogger(__name__)

METHODS = ("greedy", "local_search", "multistart", "genetic")


def _to_builtin(value):
    return value.item() if hasattr(value, "item") else value


class ODTClassifier:
    """Near-optimal fixed-depth classification tree.

    Parameters
    ----------
    method : {"greedy", "local_search", "multistart", "genetic"}
        ``"greedy"`` builds the entropy CART tree; ``"local_search"`` refines it
        by hill climbing; ``"multistart"`` hill-climbs from random greedy trees;
        ``"genetic"`` evolves a population of such trees.
    max_depth : int
        Maximum depth of the tree (root depth = 0).
    max_time : Optional[float]
        Wall-clock budget in seconds for the multi-start and genetic loops.
    random_state : Optional[int]
        Seed of the random generator shared by the whole run.
    num_trials : int
        Number of multi-start trials.
    max_generations : int
        Number of genetic generations.
    population_size : int
        Genetic population size.
    selection_fraction : float
        Fraction of the population selected as parents each generation.
    neighborhood : {"swap", "replace"}
        Local search neighborhood.
    """

    def __init__(
        self,
        method: str = "genetic",
        max_depth: int = 4,
        max_time: Optional[float] = None,
        random_state: Optional[int] = 0,
        num_trials: int = 100,
        max_generations: int = 10,
        population_size: int = 100,
        selection_fraction: float = 0.4,
        neighborhood: str = "swap",
    ) -> None:
        if method not in METHODS:
            raise ValueError(f"method must be one of {METHODS}, got {method!r}")
        self.method = method
        self.max_depth = max_depth
        self.max_time = max_time
        self.random_state = random_state
        self.num_trials = num_trials
        self.max_generations = max_generations
        self.population_size = population_size
        self.selection_fraction = selection_fraction
        self.neighborhood = neighborhood

        self.params_: Optional[Params] = None
        self.solution_: Optional[Solution] = None
        self.greedy_solution_: Optional[Solution] = None
        self.history_: List[float] = []

    def fit(
        self,
        X,
        y,
        attribute_types: Optional[Sequence] = None,
        feature_names: Optional[List[str]] = None,
    ) -> "ODTClassifier":
        dataset = Dataset.from_arrays(X, y, attribute_types=attribute_types, feature_names=feature_names)
        params = Params(dataset, max_depth=self.max_depth, max_time=self.max_time, seed=self.random_state)
        self.params_ = params
        self.history_ = []

        params.start_clock()
        greedy = Solution(params)
        GreedyInducer(params, greedy).run(InductionMode.EXHAUSTIVE)
        self.greedy_solution_ = greedy
        logger.info("Greedy solution accuracy=%.6f %s", greedy.accuracy, greedy.format_representation())

        if self.method == "greedy":
            best = greedy
        elif self.method == "local_search":
            search = LocalSearch(params, neighborhood=self.neighborhood)
            best = search.improve(greedy)
            self.history_ = list(search.history_)
        elif self.method == "multistart":
            best = LocalSearch(params, neighborhood=self.neighborhood).run_multistart(self.num_trials)
            # random restarts may all land below the exhaustive tree
            if best is None or greedy.accuracy > best.accuracy:
                best = greedy
        else:
            ga = GeneticAlgorithm(params, neighborhood=self.neighborhood)
            best = ga.run(self.max_generations, self.population_size, self.selection_fraction)
            self.history_ = list(ga.history_)
        params.stop_clock()

        self.solution_ = best
        logger.info(
            "%s finished in %.3fs: accuracy=%.6f %s",
            self.method, params.elapsed, best.accuracy, best.format_representation(),
        )
        return self

    def _check_fitted(self) -> Solution:
        if self.solution_ is None or self.params_ is None:
            raise RuntimeError("Model is not fitted.")
        return self.solution_

    def predict(self, X) -> np.ndarray:
        solution = self._check_fitted()
        dataset = self.params_.dataset
        codes = solution.predict(dataset.encode(X))
        return dataset.classes[codes]

    def score(self, X, y) -> float:
        y_arr = np.asarray(y.values if hasattr(y, "values") else y).reshape(-1)
        return float(np.mean(self.predict(X) == y_arr))

    @property
    def accuracy_(self) -> float:
        return self._check_fitted().accuracy

    @property
    def representation_(self) -> np.ndarray:
        return self._check_fitted().representation.copy()

    def summary(self) -> str:
        if self.solution_ is None:
            return "ODTClassifier(not fitted)"
        solution = self.solution_
        return (
            f"ODTClassifier(method={self.method}, max_depth={self.max_depth}, "
            f"random_state={self.random_state})\n"
            f"Training accuracy: {solution.accuracy:.6f} "
            f"({solution.n_misclassified}/{self.params_.dataset.n_samples} misclassified)\n"
            f"Representation: {solution.format_representation()}\n"
            f"Elapsed: {self.params_.elapsed:.3f}s"
        )

    def print_tree(self) -> None:
        if self.solution_ is None:
            print("Model not fitted")
            return
        self.solution_.print_tree()

    def export(self, path: str, results_log: Optional[str] = None) -> bool:
        """Write the fitted solution metrics to ``path``.

        >>> model = ODTClassifier(method="local_search", max_depth=3).fit(X, y)
        >>> model.export("solution.txt", results_log="results.txt")
        True
        """
        solution = self._check_fitted()
        return export_results(solution, path, self.params_.elapsed, results_log=results_log)

    def to_dict(self) -> Dict[str, Any]:
        solution = self._check_fitted()
        dataset = self.params_.dataset

        def node_to_dict(k: int) -> Dict[str, Any]:
            node = solution.tree[k]
            d: Dict[str, Any] = {
                "node": k,
                "n_samples": node.n_samples,
                "class_counts": node.class_counts.tolist(),
                "entropy": float(node.entropy),
            }
            if not node.is_internal:
                d["is_leaf"] = True
                d["prediction"] = _to_builtin(dataset.classes[node.majority_class])
                return d
            att = node.split_attribute
            d["is_leaf"] = False
            d["split_attribute"] = att
            d["split_feature_name"] = dataset.feature_names[att]
            d["numerical"] = dataset.is_numerical(att)
            if dataset.is_numerical(att):
                d["split_value"] = node.split_value
            else:
                d["split_value"] = _to_builtin(dataset.categories[att][int(node.split_value)])
            d["left"] = node_to_dict(solution.tree.left(k))
            d["right"] = node_to_dict(solution.tree.right(k))
            return d

        return {
            "params": self.get_params(),
            "accuracy": solution.accuracy,
            "n_misclassified": solution.n_misclassified,
            "representation": solution.representation.tolist(),
            "tree": node_to_dict(0),
            "history": list(self.history_),
        }

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        return {
            "method": self.method,
            "max_depth": self.max_depth,
            "max_time": self.max_time,
            "random_state": self.random_state,
            "num_trials": self.num_trials,
            "max_generations": self.max_generations,
            "population_size": self.population_size,
            "selection_fraction": self.selection_fraction,
            "neighborhood": self.neighborhood,
        }

    def set_params(self, **params) -> "ODTClassifier":
        for key, value in params.items():
            if key not in self.get_params():
                raise ValueError(f"Unknown parameter {key}")
            if key == "method" and value not in METHODS:
                raise ValueError(f"method must be one of {METHODS}, got {value!r}")
            setattr(self, key, value)
        return self
