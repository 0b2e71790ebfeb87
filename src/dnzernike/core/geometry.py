from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


_EPS = float(np.finfo(np.float64).eps)


class GeometryError(ValueError):
    pass


@dataclass(frozen=True)
class Circle:
    """Circle in pixel coordinates (x = column, y = row)."""

    center: tuple[float, float]
    radius: float

    def __post_init__(self) -> None:
        if len(self.center) != 2:
            raise GeometryError("circle center must be (x, y)")
        cx, cy = float(self.center[0]), float(self.center[1])
        r = float(self.radius)
        if not (math.isfinite(cx) and math.isfinite(cy) and math.isfinite(r)):
            raise GeometryError("circle center and radius must be finite")
        if r <= 0.0:
            raise GeometryError(f"circle radius must be > 0, got {r}")
        object.__setattr__(self, "center", (cx, cy))
        object.__setattr__(self, "radius", r)

    @property
    def x(self) -> float:
        return self.center[0]

    @property
    def y(self) -> float:
        return self.center[1]

    def scaled(self, factor: float) -> "Circle":
        return Circle(center=self.center, radius=self.radius * float(factor))


def equivalent_circle(mask: np.ndarray, scale: float = 1.0) -> Circle:
    """
    Circle with the same area as a region mask, centered on its centroid.

    The radius is multiplied by `scale`, e.g. 1.5 gives an outer circle that
    keeps most of a cell inside the normalization disk.
    """
    mask = np.asarray(mask, dtype=bool)
    if mask.ndim != 2:
        raise GeometryError("mask must be 2D")
    rows, cols = np.nonzero(mask)
    if rows.size == 0:
        raise GeometryError("cannot derive a circle from an empty mask")
    radius = math.sqrt(rows.size / math.pi)
    return Circle(center=(float(cols.mean()), float(rows.mean())), radius=scale * radius)


class DualCircleNormalizer:
    """
    Map points to unit-disk polar coordinates (rho, theta) using two circles.

    Inside the inner circle rho runs linearly from 0 to `inner_budget`; between
    the inner circle and the outer circle (measured along the ray from the
    inner center) it runs linearly from `inner_budget` to 1. Points beyond the
    outer circle are excluded. theta is the polar angle about the inner center
    and is never altered.

    Notation, with everything relative to the inner center:

      (dx, dy)  offset of the outer center
      R(theta)  distance to the outer perimeter along theta, the forward root of
                R^2 + b R + c = 0, b = -2 cos(theta) dx - 2 sin(theta) dy,
                c = dx^2 + dy^2 - r_outer^2
    """

    def __init__(self, inner: Circle, outer: Circle, inner_budget: float) -> None:
        inner_budget = float(inner_budget)
        if not (0.0 < inner_budget < 1.0):
            raise GeometryError(f"inner_budget must satisfy 0 < inner_budget < 1, got {inner_budget}")
        self.inner = inner
        self.outer = outer
        self.inner_budget = inner_budget
        self.dx = outer.x - inner.x
        self.dy = outer.y - inner.y
        self.c = self.dx * self.dx + self.dy * self.dy - outer.radius * outer.radius

    def outer_distance(self, theta: float) -> float:
        """Distance R(theta) from the inner center to the outer perimeter, clamped to >= inner radius."""
        b = -2.0 * math.cos(theta) * self.dx - 2.0 * math.sin(theta) * self.dy
        disc = b * b - 4.0 * self.c
        if disc >= 0.0:
            R = (-b + math.sqrt(disc)) / 2.0
        else:
            # Ray misses the outer circle; nothing beyond the inner circle is kept.
            R = self.inner.radius
        return max(self.inner.radius, R)

    def normalize(self, x: float, y: float) -> tuple[float, float] | None:
        """Return (rho, theta) for one point, or None when it lies outside the outer circle."""
        dx2 = float(x) - self.inner.x
        dy2 = float(y) - self.inner.y
        r = math.hypot(dx2, dy2)
        if not math.isfinite(r):
            return None
        theta = math.atan2(dy2, dx2)
        r1 = self.inner.radius
        if r <= r1:
            return self.inner_budget * (r / r1), theta
        R = self.outer_distance(theta)
        if r > R:
            return None
        span = R - r1
        if span < _EPS:
            return self.inner_budget, theta
        rho = self.inner_budget + (1.0 - self.inner_budget) * ((r - r1) / span)
        return rho, theta

    def normalize_many(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Vectorized `normalize`.

        Returns (rho, theta, mask); rho is NaN where mask is False.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.shape != y.shape:
            raise ValueError("x and y must have the same shape")
        dx2 = x - self.inner.x
        dy2 = y - self.inner.y
        r = np.hypot(dx2, dy2)
        theta = np.arctan2(dy2, dx2)
        r1 = self.inner.radius

        b = -2.0 * np.cos(theta) * self.dx - 2.0 * np.sin(theta) * self.dy
        disc = b * b - 4.0 * self.c
        hit = disc >= 0.0
        R = np.full_like(r, r1)
        R[hit] = (-b[hit] + np.sqrt(disc[hit])) / 2.0
        R = np.maximum(r1, R)

        inside = r <= r1
        between = ~inside & (r <= R)
        mask = inside | between

        rho = np.full_like(r, np.nan)
        rho[inside] = self.inner_budget * (r[inside] / r1)
        span = R[between] - r1
        safe = span >= _EPS
        frac = np.zeros_like(span)
        frac[safe] = (r[between][safe] - r1) / span[safe]
        rho[between] = self.inner_budget + (1.0 - self.inner_budget) * frac
        return rho, theta, mask
