from __future__ import annotations

import logging
from typing import Optional

from .metrics import accuracy
from .solution import Solution

logger = logging.getLogger(__name__)


def format_results(solution: Solution, elapsed: float) -> str:
    n_samples = solution.params.dataset.n_samples
    misclassified = solution.n_misclassified
    return (
        f"TIME(s): {elapsed:g}\n"
        f"NB_SAMPLES: {n_samples}\n"
        f"NB_MISCLASSIFIED: {misclassified}\n"
        f"ACCURACY: {accuracy(n_samples, misclassified):g}\n"
    )


def format_summary_row(solution: Solution, elapsed: float, name: str) -> str:
    n_samples = solution.params.dataset.n_samples
    misclassified = solution.n_misclassified
    return f"{name}\t{elapsed:g}\t{n_samples}\t{misclassified}\t{accuracy(n_samples, misclassified):g}\n"


def export_results(
    solution: Solution,
    path: str,
    elapsed: float,
    results_log: Optional[str] = None,
) -> bool:
    """Write the final metrics of a solution and append a row to a shared results log.

    The accuracy of the solution is checked against its tree first; a mismatch
    is fatal. Files that cannot be opened only produce a warning. Returns True
    when everything requested was written.
    """
    solution.check_accuracy()
    written = True

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(format_results(solution, elapsed))
    except OSError as exc:
        logger.warning("Impossible to open solution file %s: %s", path, exc)
        written = False

    if results_log is not None:
        try:
            with open(results_log, "a", encoding="utf-8") as f:
                f.write(format_summary_row(solution, elapsed, path))
        except OSError as exc:
            logger.warning("Impossible to open results log %s: %s", results_log, exc)
            written = False

    return written
