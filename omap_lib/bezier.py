# -*- coding: utf-8 -*-
"""Approximation of polylines by straight and cubic Bezier segments.

Implements Philip J. Schneider's least-squares fitter ("An Algorithm for
Automatically Fitting Digitized Curves", Graphics Gems, 1990):

- chord-length parameterization,
- least-squares placement of the two control points along fixed end
  tangents,
- Newton-Raphson reparameterization,
- recursive split at the point of maximum error.

Runs of points that all lie within the error of their chord become a single
straight segment instead of a cubic.
"""

from __future__ import annotations

from collections.abc import Iterator
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from omap_lib.constants import BEZIER_MAX_ITERATIONS
from omap_lib.constants import EPSILON
from omap_lib.objects import Coordinate


class BezierSegment(NamedTuple):
    """A straight (no handles) or cubic Bezier segment."""

    start: Coordinate
    handle1: Coordinate | None
    handle2: Coordinate | None
    end: Coordinate

    @property
    def is_bezier(self) -> bool:
        return self.handle1 is not None and self.handle2 is not None

    @classmethod
    def straight(cls, start: np.ndarray, end: np.ndarray) -> BezierSegment:
        return cls(_point(start), None, None, _point(end))

    @classmethod
    def cubic(cls, control_points: np.ndarray) -> BezierSegment:
        p0, p1, p2, p3 = control_points
        return cls(_point(p0), _point(p1), _point(p2), _point(p3))


class BezierString:
    """Continuous sequence of segments, each starting where the last ended."""

    def __init__(self, segments: list[BezierSegment]):
        self.segments = segments

    @classmethod
    def from_polyline(
        cls, coords: Sequence[Coordinate], max_error: float
    ) -> BezierString:
        """Fit a polyline.

        Args:
            coords: Polyline vertices (at least one)
            max_error: Maximum distance between a vertex and the curve

        Returns:
            BezierString running from the first to the last vertex

        Raises:
            ValueError: If ``coords`` is empty or ``max_error`` is negative
        """
        if max_error < 0:
            raise ValueError(f"Maximum error must be positive, got {max_error}")
        if len(coords) == 0:
            raise ValueError("Cannot fit an empty polyline")

        pts = np.asarray([(c[0], c[1]) for c in coords], dtype=float)

        # drop repeated vertices
        keep = np.ones(len(pts), dtype=bool)
        keep[1:] = np.any(np.diff(pts, axis=0) != 0.0, axis=1)
        pts = pts[keep]

        if len(pts) < 2:
            first = np.asarray(coords[0][:2], dtype=float)
            last = np.asarray(coords[-1][:2], dtype=float)
            return cls([BezierSegment.straight(first, last)])

        left_tangent = _unit(pts[1] - pts[0])
        right_tangent = _unit(pts[-2] - pts[-1])
        if len(pts) > 3 and np.array_equal(pts[0], pts[-1]):
            # smooth seam for closed rings
            seam = _unit(pts[1] - pts[-2])
            if np.any(seam):
                left_tangent, right_tangent = seam, -seam

        return cls(_fit(pts, left_tangent, right_tangent, max_error))

    @property
    def num_points(self) -> int:
        """Number of coordinates needed to write the string."""
        return sum(3 if s.is_bezier else 1 for s in self.segments) + 1

    def __iter__(self) -> Iterator[BezierSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


def _point(p: np.ndarray) -> Coordinate:
    return (float(p[0]), float(p[1]))


def _unit(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm < EPSILON:
        return np.zeros(2)
    return v / norm


def _fit(
    pts: np.ndarray,
    left_tangent: np.ndarray,
    right_tangent: np.ndarray,
    max_error: float,
) -> list[BezierSegment]:
    if len(pts) == 2 or _max_chord_distance(pts) <= max_error:
        return [BezierSegment.straight(pts[0], pts[-1])]

    max_squared = max_error * max_error
    u = _chord_length_parameterize(pts)
    bezier = _generate_bezier(pts, u, left_tangent, right_tangent)
    error, split = _max_error(pts, bezier, u)
    if error <= max_squared:
        return [BezierSegment.cubic(bezier)]

    # close enough to try improving the parameterization first
    if error <= 4.0 * max_squared:
        for _ in range(BEZIER_MAX_ITERATIONS):
            u = _reparameterize(pts, bezier, u)
            bezier = _generate_bezier(pts, u, left_tangent, right_tangent)
            error, split = _max_error(pts, bezier, u)
            if error <= max_squared:
                return [BezierSegment.cubic(bezier)]

    split = min(max(split, 1), len(pts) - 2)
    center = _center_tangent(pts, split)
    return _fit(pts[: split + 1], left_tangent, -center, max_error) + _fit(
        pts[split:], center, right_tangent, max_error
    )


def _max_chord_distance(pts: np.ndarray) -> float:
    """Largest distance of a vertex to the segment first -> last vertex."""
    start, end = pts[0], pts[-1]
    chord = end - start
    length_squared = float(chord @ chord)
    if length_squared < EPSILON:
        return float(np.max(np.linalg.norm(pts - start, axis=1)))
    t = np.clip(((pts - start) @ chord) / length_squared, 0.0, 1.0)
    projected = start + np.outer(t, chord)
    return float(np.max(np.linalg.norm(pts - projected, axis=1)))


def _chord_length_parameterize(pts: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(np.diff(pts, axis=0), axis=1)
    u = np.concatenate(([0.0], np.cumsum(lengths)))
    return u / u[-1]


def _basis(u: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    v = 1.0 - u
    return v**3, 3.0 * v**2 * u, 3.0 * v * u**2, u**3


def _evaluate(bezier: np.ndarray, u: np.ndarray) -> np.ndarray:
    b0, b1, b2, b3 = _basis(u)
    return (
        np.outer(b0, bezier[0])
        + np.outer(b1, bezier[1])
        + np.outer(b2, bezier[2])
        + np.outer(b3, bezier[3])
    )


def _generate_bezier(
    pts: np.ndarray,
    u: np.ndarray,
    left_tangent: np.ndarray,
    right_tangent: np.ndarray,
) -> np.ndarray:
    """Least-squares control points for fixed end points and tangents."""
    first, last = pts[0], pts[-1]
    b0, b1, b2, b3 = _basis(u)

    a1 = np.outer(b1, left_tangent)
    a2 = np.outer(b2, right_tangent)
    rest = pts - (np.outer(b0 + b1, first) + np.outer(b2 + b3, last))

    c00 = float(np.sum(a1 * a1))
    c01 = float(np.sum(a1 * a2))
    c11 = float(np.sum(a2 * a2))
    x0 = float(np.sum(a1 * rest))
    x1 = float(np.sum(a2 * rest))

    chord = float(np.linalg.norm(last - first))
    determinant = c00 * c11 - c01 * c01
    if abs(determinant) > EPSILON:
        alpha_l = (x0 * c11 - x1 * c01) / determinant
        alpha_r = (c00 * x1 - c01 * x0) / determinant
    else:
        alpha_l = alpha_r = chord / 3.0

    # Wu/Barsky heuristic for degenerate or reversed handles
    if alpha_l < EPSILON * chord or alpha_r < EPSILON * chord:
        alpha_l = alpha_r = chord / 3.0

    return np.array(
        [
            first,
            first + left_tangent * alpha_l,
            last + right_tangent * alpha_r,
            last,
        ]
    )


def _max_error(
    pts: np.ndarray, bezier: np.ndarray, u: np.ndarray
) -> tuple[float, int]:
    """Largest squared distance and the index where it occurs."""
    squared = np.sum((_evaluate(bezier, u) - pts) ** 2, axis=1)
    split = int(np.argmax(squared))
    return float(squared[split]), split


def _reparameterize(pts: np.ndarray, bezier: np.ndarray, u: np.ndarray) -> np.ndarray:
    """One Newton-Raphson step towards the closest curve parameter."""
    first_derivative = 3.0 * np.diff(bezier, axis=0)
    second_derivative = 2.0 * np.diff(first_derivative, axis=0)

    v = 1.0 - u
    q = _evaluate(bezier, u)
    q1 = (
        np.outer(v**2, first_derivative[0])
        + np.outer(2.0 * v * u, first_derivative[1])
        + np.outer(u**2, first_derivative[2])
    )
    q2 = np.outer(v, second_derivative[0]) + np.outer(u, second_derivative[1])

    diff = q - pts
    numerator = np.sum(diff * q1, axis=1)
    denominator = np.sum(q1 * q1 + diff * q2, axis=1)

    safe = np.abs(denominator) > EPSILON
    step = np.divide(numerator, denominator, out=np.zeros_like(u), where=safe)
    return np.clip(u - step, 0.0, 1.0)


def _center_tangent(pts: np.ndarray, i: int) -> np.ndarray:
    """Unit tangent at vertex ``i`` pointing forward along the polyline."""
    tangent = _unit(_unit(pts[i] - pts[i - 1]) + _unit(pts[i + 1] - pts[i]))
    if not np.any(tangent):
        return _unit(pts[i] - pts[i - 1])
    return tangent
