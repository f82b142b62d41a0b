import random

import pytest

from cgp_evolution import CGPConfig
from cgp_evolution.functions import PASS_THROUGH_FUNCTIONS, uniform_constant, zero_constant


def reverse_evaluator(genome):
    """Counts the outputs that differ from the reversed inputs"""
    outputs = genome.execute([1, 2, 3])
    return float(sum(o != e for o, e in zip(outputs, [3, 2, 1])))


@pytest.fixture
def make_config():
    """Factory for a small valid config; keyword arguments override fields."""
    def factory(**overrides):
        options = dict(
            population_size=5,
            num_nodes=10,
            mutation_rate=0.01,
            num_inputs=3,
            num_outputs=3,
            max_arity=2,
            functions=PASS_THROUGH_FUNCTIONS,
            constant_generator=zero_constant,
            evaluator=reverse_evaluator,
            rng=random.Random(42),
        )
        options.update(overrides)
        return CGPConfig(**options)
    return factory


@pytest.fixture
def make_varied_config(make_config):
    """Like make_config, with three functions and continuous constants."""
    def factory(**overrides):
        options = dict(
            functions=PASS_THROUGH_FUNCTIONS + (lambda args: args[0],),
            constant_generator=uniform_constant(-5.0, 5.0),
        )
        options.update(overrides)
        return make_config(**options)
    return factory
