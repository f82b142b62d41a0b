"""
cgp_evolution/fitness.py - Fitness helpers (lower is better)
"""
import math
from typing import Callable, Sequence

import numpy as np

from .genome import Genome


def mean_squared_error(inputs: Sequence[Sequence[float]],
                       targets: Sequence[Sequence[float]]) -> Callable[[Genome], float]:
    """Build an evaluator scoring a genome by its mean squared error on samples.

    inputs holds one input vector per sample and targets the expected output
    vector for the same sample. Programs producing non-finite outputs score
    +inf.
    """
    inputs = np.asarray(inputs, dtype=float)
    targets = np.asarray(targets, dtype=float)
    if inputs.ndim != 2 or targets.ndim != 2 or len(inputs) != len(targets):
        raise ValueError("inputs and targets must be 2-D with one row per sample")

    def evaluate(genome: Genome) -> float:
        outputs = np.array([genome.execute(row) for row in inputs])
        if not np.all(np.isfinite(outputs)):
            return math.inf
        return float(np.mean((outputs - targets) ** 2))

    return evaluate
