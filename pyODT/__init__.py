"""pyODT: near-optimal fixed-depth classification trees.

Greedy entropy-based tree induction combined with steepest-ascent local search
and a genetic algorithm over attribute-assignment representations of complete
binary trees.
"""

from .dataset import AttributeType, Dataset
from .export import export_results
from .genetic import GeneticAlgorithm
from .greedy import GreedyInducer, InductionMode
from .local_search import LocalSearch
from .odt import ODTClassifier
from .params import Params
from .solution import SENTINEL, Solution

__all__ = [
    "AttributeType",
    "Dataset",
    "GeneticAlgorithm",
    "GreedyInducer",
    "InductionMode",
    "LocalSearch",
    "ODTClassifier",
    "Params",
    "SENTINEL",
    "Solution",
    "export_results",
]
