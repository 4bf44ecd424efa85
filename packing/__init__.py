"""
Circle Packing - Domain Layer

Domain shapes, the item manifest and the error taxonomy shared by the
genetic packing engine.
"""

__version__ = "1.0.0"
__author__ = "Garden Planning Team"

# Export main classes for easy importing
from .exceptions import (
    PackingError,
    ConstraintError,
    MissingParameterError,
    ConfigurationError,
    SamplingExhaustionError,
    ConvergenceFailure,
    EvolutionTimeout
)

from .shapes import (
    ShapeKind,
    BoundingBox,
    Shape,
    Circle,
    Square,
    Rectangle,
    Ellipse,
    RightTriangle,
    Frame,
    Annulus,
    build_shape
)

from .manifest import Manifest, ManifestEntry

__all__ = [
    'PackingError',
    'ConstraintError',
    'MissingParameterError',
    'ConfigurationError',
    'SamplingExhaustionError',
    'ConvergenceFailure',
    'EvolutionTimeout',
    'ShapeKind',
    'BoundingBox',
    'Shape',
    'Circle',
    'Square',
    'Rectangle',
    'Ellipse',
    'RightTriangle',
    'Frame',
    'Annulus',
    'build_shape',
    'Manifest',
    'ManifestEntry'
]
