"""
Error taxonomy for the packing engine.

Geometry and configuration errors are raised immediately and never retried.
Stochastic non-convergence is absorbed by the retry loop and surfaced once
as ConvergenceFailure.
"""

from typing import Any, Optional


class PackingError(Exception):
    """Base class for every error raised by the packing engine"""
    pass


class ConstraintError(PackingError):
    """Raised when a shape or manifest value violates a geometric invariant"""

    def __init__(self, parameter: Optional[str], reason: str):
        self.parameter = parameter
        self.reason = reason
        if parameter is None:
            super().__init__(reason)
        else:
            super().__init__(f"Invalid parameter '{parameter}': {reason}")


class MissingParameterError(PackingError):
    """Raised when a required shape parameter is absent"""

    def __init__(self, shape_kind: str, parameter: str):
        self.shape_kind = shape_kind
        self.parameter = parameter
        super().__init__(f"Missing or null parameter for the domain '{shape_kind}': {parameter}")


class ConfigurationError(PackingError):
    """Raised when a YAML configuration or GA option is invalid"""
    pass


class SamplingExhaustionError(PackingError):
    """Raised when rejection sampling cannot find a point inside the shape"""

    def __init__(self, shape: Any, radius: float, attempts: int):
        self.shape = shape
        self.radius = radius
        self.attempts = attempts
        super().__init__(
            f"Could not sample a point inside {shape} for an item of radius {radius} "
            f"after {attempts} attempts"
        )


class ConvergenceFailure(PackingError):
    """
    Raised when every retry attempt ended with an infeasible candidate.

    Attributes:
        best_fitness: Best (infeasible) fitness seen across all attempts
        elapsed_time: Cumulative wall-clock seconds spent on all attempts
        attempts: Number of attempts actually run
        best_candidate: Best infeasible candidate, for diagnostics
    """

    def __init__(self,
                 best_fitness: float,
                 elapsed_time: float,
                 attempts: int,
                 best_candidate: Any = None,
                 message: Optional[str] = None):
        self.best_fitness = best_fitness
        self.elapsed_time = elapsed_time
        self.attempts = attempts
        self.best_candidate = best_candidate
        if message is None:
            message = (
                f"Convergence failed after {attempts} attempts ({elapsed_time:.2f}s). "
                f"Best invalid fitness found: {best_fitness:.6f}"
            )
        super().__init__(message)


class EvolutionTimeout(ConvergenceFailure):
    """Raised when the cumulative time budget ran out before a feasible candidate was found"""

    def __init__(self,
                 best_fitness: float,
                 elapsed_time: float,
                 attempts: int,
                 time_budget: float,
                 best_candidate: Any = None):
        self.time_budget = time_budget
        super().__init__(
            best_fitness,
            elapsed_time,
            attempts,
            best_candidate,
            message=(
                f"Evolution timed out after {elapsed_time:.2f}s (limit: {time_budget:.2f}s) "
                f"and {attempts} attempts. Best invalid fitness found: {best_fitness:.6f}"
            ),
        )
