import math
import random

import numpy as np
import pytest

from cgp_evolution import Genome, Node, mean_squared_error
from cgp_evolution import functions


def test_arithmetic():
    args = np.array([0.5, 6.0, 3.0])
    assert functions.add(args) == 9.0
    assert functions.sub(args) == 3.0
    assert functions.mul(args) == 18.0
    assert functions.div(args) == 2.0
    assert functions.const(args) == 0.5
    assert functions.first(args) == 6.0
    assert functions.second(args) == 3.0
    assert functions.sin(np.array([0.0, 0.0])) == 0.0
    assert functions.cos(np.array([0.0, 0.0])) == 1.0


def test_protected_division():
    assert functions.div(np.array([0.0, 4.0, 0.0])) == 4.0


def test_results_are_clipped():
    assert functions.mul(np.array([0.0, 1e6, 1e6])) == functions.LIMIT
    assert functions.sub(np.array([0.0, -1e6, 1e6])) == -functions.LIMIT


def test_missing_operands_read_as_zero():
    assert functions.add(np.array([1.0])) == 0.0
    assert functions.second(np.array([1.0, 2.0])) == 0.0


def test_uniform_constant():
    generate = functions.uniform_constant(2.0, 3.0)
    rng = random.Random(0)
    values = [generate(rng) for _ in range(100)]
    assert all(2.0 <= v <= 3.0 for v in values)
    assert functions.zero_constant(rng) == 0.0


def test_mean_squared_error(make_config):
    config = make_config(num_inputs=1, num_outputs=1, num_nodes=1, max_arity=2,
                         functions=[functions.mul])
    square = Genome(config, [Node(0, 0.0, (0, 0))], [1])
    evaluate = mean_squared_error([[1.0], [2.0], [3.0]], [[1.0], [4.0], [10.0]])
    assert evaluate(square) == pytest.approx(1.0 / 3.0)


def test_mean_squared_error_non_finite(make_config):
    config = make_config(num_inputs=1, num_outputs=1, num_nodes=1, max_arity=1,
                         functions=[lambda args: math.inf])
    genome = Genome(config, [Node(0, 0.0, (0,))], [1])
    evaluate = mean_squared_error([[1.0]], [[1.0]])
    assert evaluate(genome) == math.inf


def test_mean_squared_error_shapes():
    with pytest.raises(ValueError):
        mean_squared_error([1.0, 2.0], [[1.0], [2.0]])
    with pytest.raises(ValueError):
        mean_squared_error([[1.0]], [[1.0], [2.0]])
