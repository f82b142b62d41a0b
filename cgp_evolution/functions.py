"""
cgp_evolution/functions.py - Ready-made node functions and constant generators

Every node function receives the vector [constant, a, b, ...] and returns a
single number. Missing operands read as 0 so the functions work with any
max_arity.
"""
import random
from typing import Callable, Sequence

import numpy as np

LIMIT = 1000.0


def _operand(args: Sequence[float], i: int) -> float:
    return args[i] if len(args) > i else 0.0


def _clip(value: float) -> float:
    # Clip to prevent overflow
    return float(np.clip(value, -LIMIT, LIMIT))


def add(args):
    return _clip(_operand(args, 1) + _operand(args, 2))


def sub(args):
    return _clip(_operand(args, 1) - _operand(args, 2))


def mul(args):
    return _clip(_operand(args, 1) * _operand(args, 2))


def div(args):
    """Protected division: a near-zero divisor returns the dividend"""
    divisor = _operand(args, 2)
    if abs(divisor) < 1e-10:
        return _clip(_operand(args, 1))
    return _clip(_operand(args, 1) / divisor)


def sin(args):
    return float(np.sin(np.clip(_operand(args, 1), -100, 100)))


def cos(args):
    return float(np.cos(np.clip(_operand(args, 1), -100, 100)))


def const(args):
    return _operand(args, 0)


def first(args):
    """Pass through the first connection"""
    return _operand(args, 1)


def second(args):
    """Pass through the second connection"""
    return _operand(args, 2)


ARITHMETIC_FUNCTIONS = (add, sub, mul, div, sin, cos, const, first)
PASS_THROUGH_FUNCTIONS = (first, second)


def uniform_constant(low: float = -1.0, high: float = 1.0) -> Callable[[random.Random], float]:
    """Constant generator drawing uniformly from [low, high]"""
    def generate(rng: random.Random) -> float:
        return rng.uniform(low, high)
    return generate


def zero_constant(rng: random.Random) -> float:
    return 0.0
