"""
Domain Geometry

Seven immutable 2D domain shapes sharing one contract: a containment
predicate and an axis-aligned bounding box. Shapes are centred on the
origin, except the right triangle whose right angle sits at the origin
with its legs along the positive axes.

Containment treats the region as closed: points on a boundary are inside.
Ring-like shapes (Frame, Annulus) exclude only the open interior of their
hole, which makes the admissible region non-convex.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, List, Mapping, NamedTuple, Tuple, Union

from .exceptions import ConstraintError, MissingParameterError


class ShapeKind(Enum):
    """Supported domain shapes"""
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    SQUARE = "square"
    ELLIPSE = "ellipse"
    RIGHT_TRIANGLE = "right-triangle"
    FRAME = "frame"
    ANNULUS = "annulus"

    @property
    def required_parameters(self) -> List[str]:
        """Parameter names expected by build_shape for this kind"""
        return list(_REQUIRED_PARAMETERS[self])

    @property
    def display_name(self) -> str:
        return self.value.replace("-", " ").upper()

    @classmethod
    def parse(cls, value: Union["ShapeKind", str]) -> "ShapeKind":
        """Resolve a ShapeKind from an enum member or a case-insensitive name"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ConstraintError("kind", f"unsupported shape kind: {value!r}")
        normalized = value.strip().lower().replace("_", "-").replace(" ", "-")
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(kind.value for kind in cls)
            raise ConstraintError("kind", f"unsupported shape kind '{value}' (expected one of: {valid})")


_REQUIRED_PARAMETERS: Dict[ShapeKind, Tuple[str, ...]] = {
    ShapeKind.CIRCLE: ("radius",),
    ShapeKind.RECTANGLE: ("width", "height"),
    ShapeKind.SQUARE: ("side",),
    ShapeKind.ELLIPSE: ("semi-width", "semi-height"),
    ShapeKind.RIGHT_TRIANGLE: ("base", "height"),
    ShapeKind.FRAME: ("innerWidth", "innerHeight", "outerWidth", "outerHeight"),
    ShapeKind.ANNULUS: ("innerRadius", "outerRadius"),
}


class BoundingBox(NamedTuple):
    """Axis-aligned rectangle given by its lower-left corner and size"""
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ConstraintError(name, "must be a finite number.")
    if value <= 0:
        raise ConstraintError(name, "must be strictly positive (> 0).")


class Shape:
    """Common contract of every domain shape"""
    kind: ClassVar[ShapeKind]

    def contains(self, x: float, y: float) -> bool:
        raise NotImplementedError

    def bounding_box(self) -> BoundingBox:
        raise NotImplementedError

    def area(self) -> float:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class Circle(Shape):
    radius: float

    kind: ClassVar[ShapeKind] = ShapeKind.CIRCLE

    def __post_init__(self):
        _require_positive("radius", self.radius)

    def contains(self, x: float, y: float) -> bool:
        return x * x + y * y <= self.radius * self.radius

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.radius, -self.radius, 2 * self.radius, 2 * self.radius)

    def area(self) -> float:
        return math.pi * self.radius * self.radius

    def describe(self) -> str:
        return f"Circle {{ radius = {self.radius:.2f} }}"


@dataclass(frozen=True)
class Square(Shape):
    side: float

    kind: ClassVar[ShapeKind] = ShapeKind.SQUARE

    def __post_init__(self):
        _require_positive("side", self.side)

    def contains(self, x: float, y: float) -> bool:
        half = self.side / 2.0
        return abs(x) <= half and abs(y) <= half

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.side / 2.0, -self.side / 2.0, self.side, self.side)

    def area(self) -> float:
        return self.side * self.side

    def describe(self) -> str:
        return f"Square {{ side = {self.side:.2f} }}"


@dataclass(frozen=True)
class Rectangle(Shape):
    width: float
    height: float

    kind: ClassVar[ShapeKind] = ShapeKind.RECTANGLE

    def __post_init__(self):
        _require_positive("width", self.width)
        _require_positive("height", self.height)

    def contains(self, x: float, y: float) -> bool:
        return abs(x) <= self.width / 2.0 and abs(y) <= self.height / 2.0

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.width / 2.0, -self.height / 2.0, self.width, self.height)

    def area(self) -> float:
        return self.width * self.height

    def describe(self) -> str:
        return f"Rectangle {{ width = {self.width:.2f}, height = {self.height:.2f} }}"


@dataclass(frozen=True)
class Ellipse(Shape):
    semi_width: float
    semi_height: float

    kind: ClassVar[ShapeKind] = ShapeKind.ELLIPSE

    def __post_init__(self):
        _require_positive("semi-width", self.semi_width)
        _require_positive("semi-height", self.semi_height)

    def contains(self, x: float, y: float) -> bool:
        # x²/a² + y²/b² <= 1, multiplied through by a²b² to avoid divisions
        a_sq = self.semi_width * self.semi_width
        b_sq = self.semi_height * self.semi_height
        return x * x * b_sq + y * y * a_sq <= a_sq * b_sq

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.semi_width, -self.semi_height,
                           2 * self.semi_width, 2 * self.semi_height)

    def area(self) -> float:
        return math.pi * self.semi_width * self.semi_height

    def describe(self) -> str:
        return f"Ellipse {{ semi-width = {self.semi_width:.2f}, semi-height = {self.semi_height:.2f} }}"


@dataclass(frozen=True)
class RightTriangle(Shape):
    """Right triangle with legs along +x (base) and +y (height)"""
    base: float
    height: float

    kind: ClassVar[ShapeKind] = ShapeKind.RIGHT_TRIANGLE

    def __post_init__(self):
        _require_positive("base", self.base)
        _require_positive("height", self.height)

    def contains(self, x: float, y: float) -> bool:
        if x < 0 or y < 0:
            return False
        # y <= h - (h/b) x, rearranged as b*y + h*x <= b*h
        return self.base * y + self.height * x <= self.base * self.height

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(0.0, 0.0, self.base, self.height)

    def area(self) -> float:
        return self.base * self.height / 2.0

    def describe(self) -> str:
        return f"Right Triangle {{ base = {self.base:.2f}, height = {self.height:.2f} }}"


@dataclass(frozen=True)
class Frame(Shape):
    """Rectangular ring: outer rectangle minus a centred inner rectangle"""
    inner_width: float
    inner_height: float
    outer_width: float
    outer_height: float

    kind: ClassVar[ShapeKind] = ShapeKind.FRAME

    def __post_init__(self):
        _require_positive("innerWidth", self.inner_width)
        _require_positive("innerHeight", self.inner_height)
        _require_positive("outerWidth", self.outer_width)
        _require_positive("outerHeight", self.outer_height)
        if self.inner_width >= self.outer_width or self.inner_height >= self.outer_height:
            raise ConstraintError(
                None,
                f"Invalid topology: inner dimensions ({self.inner_width:.2f}x{self.inner_height:.2f}) "
                f"must be strictly smaller than outer dimensions "
                f"({self.outer_width:.2f}x{self.outer_height:.2f})."
            )

    def contains(self, x: float, y: float) -> bool:
        abs_x = abs(x)
        abs_y = abs(y)
        if abs_x > self.outer_width / 2.0 or abs_y > self.outer_height / 2.0:
            return False
        in_hole = abs_x < self.inner_width / 2.0 and abs_y < self.inner_height / 2.0
        return not in_hole

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.outer_width / 2.0, -self.outer_height / 2.0,
                           self.outer_width, self.outer_height)

    def area(self) -> float:
        return self.outer_width * self.outer_height - self.inner_width * self.inner_height

    def describe(self) -> str:
        return (
            f"Frame {{ inner = {self.inner_width:.2f}x{self.inner_height:.2f}, "
            f"outer = {self.outer_width:.2f}x{self.outer_height:.2f} }}"
        )


@dataclass(frozen=True)
class Annulus(Shape):
    """Circular ring between two concentric circles"""
    inner_radius: float
    outer_radius: float

    kind: ClassVar[ShapeKind] = ShapeKind.ANNULUS

    def __post_init__(self):
        _require_positive("innerRadius", self.inner_radius)
        _require_positive("outerRadius", self.outer_radius)
        if self.inner_radius >= self.outer_radius:
            raise ConstraintError(
                None,
                f"Invalid topology: inner radius ({self.inner_radius:.2f}) must be strictly "
                f"smaller than outer radius ({self.outer_radius:.2f})."
            )

    def contains(self, x: float, y: float) -> bool:
        dist_sq = x * x + y * y
        return self.inner_radius * self.inner_radius <= dist_sq <= self.outer_radius * self.outer_radius

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.outer_radius, -self.outer_radius,
                           2 * self.outer_radius, 2 * self.outer_radius)

    def area(self) -> float:
        return math.pi * (self.outer_radius ** 2 - self.inner_radius ** 2)

    def describe(self) -> str:
        return f"Annulus {{ inner radius = {self.inner_radius:.2f}, outer radius = {self.outer_radius:.2f} }}"


_SHAPE_CLASSES: Dict[ShapeKind, type] = {
    ShapeKind.CIRCLE: Circle,
    ShapeKind.RECTANGLE: Rectangle,
    ShapeKind.SQUARE: Square,
    ShapeKind.ELLIPSE: Ellipse,
    ShapeKind.RIGHT_TRIANGLE: RightTriangle,
    ShapeKind.FRAME: Frame,
    ShapeKind.ANNULUS: Annulus,
}


def _coerce_length(name: str, value) -> float:
    if isinstance(value, bool):
        raise ConstraintError(name, f"expected a number, got {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConstraintError(name, f"expected a number, got {value!r}.")


def build_shape(shape_kind: Union[ShapeKind, str], parameters: Mapping[str, float]) -> Shape:
    """
    Validate parameters for a shape kind and construct the shape.

    Args:
        shape_kind: ShapeKind member or its name (e.g. "annulus", "right-triangle")
        parameters: Mapping of parameter name to length

    Returns:
        Immutable Shape instance

    Raises:
        MissingParameterError: If a required parameter is absent or None
        ConstraintError: If a value is non-positive, non-numeric or topologically inverted
    """
    kind = ShapeKind.parse(shape_kind)
    values = []
    for key in _REQUIRED_PARAMETERS[kind]:
        if key not in parameters or parameters[key] is None:
            raise MissingParameterError(kind.display_name, key)
        value = _coerce_length(key, parameters[key])
        _require_positive(key, value)
        values.append(value)
    return _SHAPE_CLASSES[kind](*values)
