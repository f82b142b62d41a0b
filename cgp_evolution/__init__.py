"""
cgp_evolution - Cartesian Genetic Programming with a (1+lambda) evolution strategy

Programs are fixed-size directed acyclic graphs of function nodes. Offspring
that compute the same function as their parent reuse its fitness instead of
being evaluated again.
"""

__version__ = "0.1.0"

from .errors import CGPError, ConfigurationError, ExecutionError
from .config import CGPConfig
from .genome import Genome, Node
from .population import Population, GenerationResult
from .fitness import mean_squared_error
from . import functions

__all__ = [
    'CGPError', 'ConfigurationError', 'ExecutionError',
    'CGPConfig',
    'Genome', 'Node',
    'Population', 'GenerationResult',
    'mean_squared_error',
    'functions'
]
