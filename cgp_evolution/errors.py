"""
cgp_evolution/errors.py - Error types raised by the evolution core
"""


class CGPError(Exception):
    """Base error."""
    pass


class ConfigurationError(CGPError, ValueError):
    """A configuration precondition was violated at construction time."""
    pass


class ExecutionError(CGPError, ValueError):
    """A genome was executed with the wrong number of inputs."""
    pass
