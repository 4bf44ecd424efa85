"""
GA Engine for Circle Packing

Genetic algorithm over real-valued item coordinates that places circular
items with clearance radii inside a 2D domain.

Modules:
- data_models: Core data structures (Gene, Candidate, GAConfig, results)
- sampler: Rejection sampling of positions inside a shape
- fitness: Containment and separation penalties
- selection: Elitism and tournament selection
- crossover: Uniform gene-wise crossover
- mutation: Cooling displacement mutation
- orchestration: Evolution loop and retry policy
- logging_utils: Logging setup for applications
- cli: Command-line runner driven by a YAML configuration
"""

__version__ = "1.0.0"
__author__ = "Garden Planning Team"

from .data_models import Candidate, GAConfig, Gene, OptimizationResult, RetryState, RunResult
from .fitness import evaluate, is_feasible, score
from .orchestration import run_attempt, run_evolution, run_optimization

__all__ = [
    "Candidate",
    "GAConfig",
    "Gene",
    "OptimizationResult",
    "RetryState",
    "RunResult",
    "evaluate",
    "is_feasible",
    "score",
    "run_attempt",
    "run_evolution",
    "run_optimization",
]
