"""Unit tests for homogeneous points and vectors.

Tests cover:
- point/vector construction and classification
- Uniform arithmetic over all four components
- Magnitude, normalization, dot, cross and reflection
- Rejection of points by vector-only operations
"""

import math

import numpy as np
import pytest

from src.caster.core.vector import (
    EPSILON,
    NotAVectorError,
    Tuple4,
    cross,
    dot,
    point,
    vector,
)


class TestConstruction:
    """Tests for building tuples."""

    def test_point_has_w_one(self):
        p = point(4.3, -4.2, 3.1)
        assert p.w == 1.0
        assert p.is_point()
        assert not p.is_vector()

    def test_vector_has_w_zero(self):
        v = vector(4.3, -4.2, 3.1)
        assert v.w == 0.0
        assert v.is_vector()
        assert not v.is_point()

    def test_components_are_single_precision(self):
        assert vector(0.1, 0.2, 0.3).to_numpy().dtype == np.float32

    def test_from_array_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            Tuple4.from_array([1.0, 2.0, 3.0])

    def test_indexing_and_iteration(self):
        p = point(1, 2, 3)
        assert p[2] == 3.0
        assert list(p) == [1.0, 2.0, 3.0, 1.0]
        assert len(p) == 4


class TestArithmetic:
    """Tests for component-wise arithmetic."""

    def test_point_plus_vector_is_point(self):
        result = point(3, -2, 5) + vector(-2, 3, 1)
        assert result == point(1, 1, 6)

    def test_point_minus_point_is_vector(self):
        result = point(3, 2, 1) - point(5, 6, 7)
        assert result == vector(-2, -4, -6)

    def test_point_minus_vector_is_point(self):
        assert point(3, 2, 1) - vector(5, 6, 7) == point(-2, -4, -6)

    def test_negation(self):
        assert -Tuple4(1, -2, 3, -4) == Tuple4(-1, 2, -3, 4)

    def test_scalar_multiplication_and_division(self):
        a = Tuple4(1, -2, 3, -4)
        assert a * 3.5 == Tuple4(3.5, -7, 10.5, -14)
        assert 0.5 * a == Tuple4(0.5, -1, 1.5, -2)
        assert a / 2 == Tuple4(0.5, -1, 1.5, -2)

    def test_equality_is_tolerance_based(self):
        assert vector(1, 2, 3) == vector(1 + EPSILON / 2, 2, 3)
        assert vector(1, 2, 3) != vector(1.001, 2, 3)


class TestVectorOperations:
    """Tests for magnitude, normalize, dot, cross and reflect."""

    @pytest.mark.parametrize(
        "v, expected",
        [
            (vector(1, 0, 0), 1.0),
            (vector(0, 0, 1), 1.0),
            (vector(1, 2, 3), math.sqrt(14)),
            (vector(-1, -2, -3), math.sqrt(14)),
        ],
    )
    def test_magnitude(self, v, expected):
        assert float(v.magnitude()) == pytest.approx(expected, abs=1e-6)

    def test_normalize(self):
        v = vector(1, 2, 3)
        s = math.sqrt(14)
        assert v.normalize().isclose(vector(1 / s, 2 / s, 3 / s), abs_tol=1e-6)

    @pytest.mark.parametrize(
        "v",
        [vector(4, 0, 0), vector(1, 2, 3), vector(-0.3, 17.0, 2.5), vector(1e-3, 0, 0)],
    )
    def test_normalized_vector_has_unit_length(self, v):
        assert float(v.normalize().magnitude()) == pytest.approx(1.0, abs=1e-6)

    def test_dot(self):
        assert dot(vector(1, 2, 3), vector(2, 3, 4)) == pytest.approx(20.0)

    def test_cross(self):
        a = vector(1, 2, 3)
        b = vector(2, 3, 4)
        assert cross(a, b) == vector(-1, 2, -1)
        assert cross(b, a) == vector(1, -2, 1)

    def test_reflect_at_45_degrees(self):
        v = vector(1, -1, 0)
        assert v.reflect(vector(0, 1, 0)) == vector(1, 1, 0)

    def test_reflect_off_slanted_surface(self):
        v = vector(0, -1, 0)
        n = vector(math.sqrt(2) / 2, math.sqrt(2) / 2, 0)
        assert v.reflect(n).isclose(vector(1, 0, 0), abs_tol=1e-6)


class TestNotAVector:
    """Vector-only operations reject points."""

    def test_magnitude_of_point(self):
        with pytest.raises(NotAVectorError):
            point(1, 2, 3).magnitude()

    def test_normalize_point(self):
        with pytest.raises(NotAVectorError):
            point(1, 2, 3).normalize()

    def test_dot_with_point(self):
        with pytest.raises(NotAVectorError):
            dot(vector(1, 0, 0), point(1, 0, 0))

    def test_cross_with_point(self):
        with pytest.raises(NotAVectorError):
            cross(point(1, 0, 0), vector(0, 1, 0))

    def test_error_is_a_value_error(self):
        assert issubclass(NotAVectorError, ValueError)
