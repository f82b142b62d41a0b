"""
cgp_evolution/config.py - Run configuration and its validation
"""
import numbers
import random
import time
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from .errors import ConfigurationError

# A node function receives [constant, input_1, ..., input_max_arity]
NodeFunction = Callable[[Sequence[float]], float]
ConstantGenerator = Callable[[random.Random], float]


@dataclass
class CGPConfig:
    """Options of a CGP run, checked once when the object is created"""

    population_size: int
    num_nodes: int
    mutation_rate: float
    num_inputs: int
    num_outputs: int
    max_arity: int
    functions: Sequence[NodeFunction]
    constant_generator: ConstantGenerator
    evaluator: Callable[..., float]
    rng: Optional[random.Random] = None
    max_workers: Optional[int] = None

    # Filled in by __post_init__
    num_addresses: int = field(init=False, repr=False)

    def __post_init__(self):
        self._validate()

        for name in ('population_size', 'num_nodes', 'num_inputs', 'num_outputs', 'max_arity'):
            setattr(self, name, int(getattr(self, name)))
        self.mutation_rate = float(self.mutation_rate)
        if self.max_workers is not None:
            self.max_workers = int(self.max_workers)
        self.functions = tuple(self.functions)
        if self.rng is None:
            self.rng = random.Random(time.time_ns())
        self.num_addresses = self.num_inputs + self.num_nodes

    def _validate(self) -> None:
        _require_int('population_size', self.population_size, minimum=2)
        _require_int('num_nodes', self.num_nodes, minimum=0)
        _require_int('num_inputs', self.num_inputs, minimum=0)
        _require_int('num_outputs', self.num_outputs, minimum=1)
        _require_int('max_arity', self.max_arity, minimum=0)

        if isinstance(self.mutation_rate, bool) or not isinstance(self.mutation_rate, numbers.Real):
            raise ConfigurationError(f"mutation_rate must be a number, got {self.mutation_rate!r}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigurationError(f"mutation_rate must be between 0 and 1, got {self.mutation_rate}")

        if not isinstance(self.functions, SequenceABC) or isinstance(self.functions, str):
            raise ConfigurationError(f"functions must be a sequence of node functions, got {self.functions!r}")
        if len(self.functions) == 0:
            raise ConfigurationError("functions must contain at least one node function")
        for i, function in enumerate(self.functions):
            if not callable(function):
                raise ConfigurationError(f"functions[{i}] is not callable: {function!r}")

        if not callable(self.constant_generator):
            raise ConfigurationError("constant_generator must be callable")
        if not callable(self.evaluator):
            raise ConfigurationError("evaluator must be callable")

        if self.rng is not None and not isinstance(self.rng, random.Random):
            raise ConfigurationError(f"rng must be a random.Random instance, got {type(self.rng).__name__}")
        if self.max_workers is not None:
            _require_int('max_workers', self.max_workers, minimum=1)

        # Outputs and connections must have somewhere to point
        if self.num_inputs + self.num_nodes == 0:
            raise ConfigurationError("at least one input or node is required for outputs to connect to")
        if self.num_inputs == 0 and self.num_nodes > 0 and self.max_arity > 0:
            raise ConfigurationError("nodes with connections need at least one input to connect to")

    @property
    def num_offspring(self) -> int:
        return self.population_size - 1


def _require_int(name: str, value, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")
