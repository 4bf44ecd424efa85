"""
Tests for domain shapes and the shape factory.
"""

import math
import unittest

from packing.exceptions import ConstraintError, MissingParameterError
from packing.shapes import (
    Annulus,
    BoundingBox,
    Circle,
    Ellipse,
    Frame,
    Rectangle,
    RightTriangle,
    ShapeKind,
    Square,
    build_shape,
)


class TestContainment(unittest.TestCase):
    """Test containment predicates of every shape."""

    def test_circle(self):
        circle = Circle(10)
        self.assertTrue(circle.contains(0, 0))
        self.assertTrue(circle.contains(10, 0))  # boundary is inside
        self.assertFalse(circle.contains(7.1, 7.1))

    def test_square_and_rectangle(self):
        square = Square(4)
        self.assertTrue(square.contains(2, -2))
        self.assertFalse(square.contains(2.01, 0))

        rect = Rectangle(6, 2)
        self.assertTrue(rect.contains(2.9, 0.9))
        self.assertFalse(rect.contains(0, 1.5))

    def test_ellipse(self):
        ellipse = Ellipse(4, 2)
        self.assertTrue(ellipse.contains(4, 0))
        self.assertTrue(ellipse.contains(0, 2))
        self.assertFalse(ellipse.contains(3, 1.5))

    def test_right_triangle(self):
        triangle = RightTriangle(4, 3)
        self.assertTrue(triangle.contains(0, 0))
        self.assertTrue(triangle.contains(1, 1))
        self.assertTrue(triangle.contains(4, 0))
        self.assertFalse(triangle.contains(-0.1, 1))
        self.assertFalse(triangle.contains(3, 2))

    def test_annulus(self):
        annulus = Annulus(2, 5)
        self.assertTrue(annulus.contains(0, 3))
        self.assertFalse(annulus.contains(0, 1))
        self.assertFalse(annulus.contains(0, 6))
        # both rims belong to the ring
        self.assertTrue(annulus.contains(2, 0))
        self.assertTrue(annulus.contains(0, -5))

    def test_frame(self):
        frame = Frame(2, 2, 10, 10)
        self.assertFalse(frame.contains(0, 0))
        self.assertTrue(frame.contains(4, 4))
        self.assertFalse(frame.contains(6, 6))
        # the hole's edge belongs to the frame
        self.assertTrue(frame.contains(1, 0))


class TestBoundingBox(unittest.TestCase):
    """Test bounding boxes are minimal and centred correctly."""

    def test_centered_shapes(self):
        self.assertEqual(Circle(3).bounding_box(), BoundingBox(-3, -3, 6, 6))
        self.assertEqual(Rectangle(8, 2).bounding_box(), BoundingBox(-4, -1, 8, 2))
        self.assertEqual(Ellipse(5, 2).bounding_box(), BoundingBox(-5, -2, 10, 4))
        self.assertEqual(Annulus(1, 4).bounding_box(), BoundingBox(-4, -4, 8, 8))
        self.assertEqual(Frame(1, 1, 6, 4).bounding_box(), BoundingBox(-3, -2, 6, 4))

    def test_right_triangle_box(self):
        box = RightTriangle(5, 2).bounding_box()
        self.assertEqual(box, BoundingBox(0, 0, 5, 2))
        self.assertEqual(box.max_x, 5)
        self.assertEqual(box.area, 10)

    def test_areas(self):
        self.assertAlmostEqual(Circle(1).area(), math.pi)
        self.assertAlmostEqual(RightTriangle(4, 3).area(), 6.0)
        self.assertAlmostEqual(Frame(2, 2, 10, 10).area(), 96.0)
        self.assertAlmostEqual(Annulus(1, 2).area(), 3 * math.pi)


class TestConstraints(unittest.TestCase):
    """Test construction-time validation."""

    def test_non_positive_parameters(self):
        with self.assertRaises(ConstraintError):
            Circle(0)
        with self.assertRaises(ConstraintError):
            Rectangle(-1, 2)
        with self.assertRaises(ConstraintError):
            Ellipse(2, float('nan'))

    def test_inverted_annulus(self):
        with self.assertRaises(ConstraintError):
            Annulus(5, 2)
        with self.assertRaises(ConstraintError):
            Annulus(3, 3)

    def test_inverted_frame(self):
        with self.assertRaises(ConstraintError):
            Frame(10, 2, 10, 10)
        with self.assertRaises(ConstraintError):
            Frame(2, 12, 10, 10)

    def test_shapes_are_immutable(self):
        circle = Circle(2)
        with self.assertRaises(Exception):
            circle.radius = 3


class TestBuildShape(unittest.TestCase):
    """Test the parameter-map factory."""

    def test_builds_every_kind(self):
        parameters = {
            ShapeKind.CIRCLE: {"radius": 3},
            ShapeKind.RECTANGLE: {"width": 4, "height": 2},
            ShapeKind.SQUARE: {"side": 5},
            ShapeKind.ELLIPSE: {"semi-width": 3, "semi-height": 1},
            ShapeKind.RIGHT_TRIANGLE: {"base": 3, "height": 4},
            ShapeKind.FRAME: {"innerWidth": 1, "innerHeight": 1, "outerWidth": 4, "outerHeight": 3},
            ShapeKind.ANNULUS: {"innerRadius": 1, "outerRadius": 2},
        }
        for kind, params in parameters.items():
            shape = build_shape(kind, params)
            self.assertEqual(shape.kind, kind)

    def test_string_kinds(self):
        self.assertIsInstance(build_shape("Right_Triangle", {"base": 1, "height": 1}), RightTriangle)
        self.assertIsInstance(build_shape("ANNULUS", {"innerRadius": 1, "outerRadius": 2}), Annulus)

    def test_missing_parameter(self):
        with self.assertRaises(MissingParameterError) as ctx:
            build_shape("frame", {"innerWidth": 1, "innerHeight": 1, "outerWidth": 4})
        self.assertEqual(ctx.exception.parameter, "outerHeight")

        with self.assertRaises(MissingParameterError):
            build_shape("circle", {"radius": None})

    def test_invalid_values(self):
        with self.assertRaises(ConstraintError):
            build_shape("circle", {"radius": -2})
        with self.assertRaises(ConstraintError):
            build_shape("circle", {"radius": "wide"})
        with self.assertRaises(ConstraintError):
            build_shape("annulus", {"innerRadius": 5, "outerRadius": 2})

    def test_unknown_kind(self):
        with self.assertRaises(ConstraintError):
            build_shape("hexagon", {"side": 2})


if __name__ == '__main__':
    unittest.main()
