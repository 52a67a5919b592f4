"""Glyph outlines and iteration over the curves of their contours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Union

TAG_ON_CURVE = 0x01
TAG_BEZIER3 = 0x02


@dataclass(frozen=True)
class Vector:
    """A point in outline coordinates."""

    x: int
    y: int


@dataclass(frozen=True)
class Line:
    """A straight segment ending at ``to``."""

    to: Vector


@dataclass(frozen=True)
class Bezier2:
    """A quadratic Bézier segment with one control point."""

    control: Vector
    to: Vector


@dataclass(frozen=True)
class Bezier3:
    """A cubic Bézier segment with two control points."""

    control1: Vector
    control2: Vector
    to: Vector


Curve = Union[Line, Bezier2, Bezier3]


def _half_sum(a: int, b: int) -> int:
    """Average of two integers, truncated toward zero."""
    total = a + b
    half = abs(total) // 2
    return half if total >= 0 else -half


class CurveIterator:
    """Iterates the curves of one contour.

    A contour implicitly repeats its first point at the end, so the last
    curve closes the contour.
    """

    def __init__(
        self, points: Sequence[Vector], tags: Sequence[int], start: int, end: int
    ) -> None:
        self._points = points
        self._tags = tags
        self._first = start
        self._idx = 0
        self._length = end - start + 1

    def start(self) -> Vector:
        """Return the first point of the contour."""
        return self._points[self._first]

    def _pt(self, offset: int) -> Vector:
        position = self._idx + offset
        if position < self._length:
            return self._points[self._first + position]
        return self._points[self._first]

    def _tag(self, offset: int) -> int:
        position = self._idx + offset
        if position < self._length:
            return self._tags[self._first + position]
        return self._tags[self._first]

    def __iter__(self) -> CurveIterator:
        return self

    def __next__(self) -> Curve:
        if self._idx >= self._length:
            raise StopIteration
        tag1 = self._tag(1)
        curve: Curve
        if tag1 & TAG_ON_CURVE:
            shift, curve = 1, Line(self._pt(1))
        elif tag1 & TAG_BEZIER3:
            shift, curve = 3, Bezier3(self._pt(1), self._pt(2), self._pt(3))
        elif self._tag(2) & TAG_ON_CURVE:
            shift, curve = 2, Bezier2(self._pt(1), self._pt(2))
        else:
            # Two off-curve points in a row imply an on-curve point halfway.
            control, following = self._pt(1), self._pt(2)
            midpoint = Vector(
                _half_sum(control.x, following.x), _half_sum(control.y, following.y)
            )
            shift, curve = 1, Bezier2(control, midpoint)
        self._idx += shift
        return curve


class Outline:
    """A scalable glyph: points, their tags, and the end index of each contour."""

    def __init__(
        self,
        points: Sequence[Vector],
        tags: Sequence[int],
        contours: Sequence[int],
    ) -> None:
        points = tuple(points)
        tags = tuple(tags)
        contours = tuple(contours)
        if len(points) != len(tags):
            raise ValueError("an outline needs exactly one tag per point")
        previous = -1
        for end in contours:
            if not previous < end < len(points):
                raise ValueError(f"invalid contour end index {end}")
            previous = end
        self.points = points
        self.tags = tags
        self.contours = contours

    def contours_iter(self) -> Iterator[CurveIterator]:
        """Yield a curve iterator for each contour in order."""
        start = 0
        for end in self.contours:
            yield CurveIterator(self.points, self.tags, start, end)
            start = end + 1