from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def check_pair(n: int, m: int) -> None:
    """
    Reject (order, repetition) pairs that have no Zernike radial polynomial.

    Legal pairs satisfy n >= 0, |m| <= n and n-|m| even.
    """
    if n < 0:
        raise ValueError("order must be >= 0")
    if abs(m) > n:
        raise ValueError("repetition must satisfy |m| <= n")
    if (n - abs(m)) % 2 != 0:
        raise ValueError(f"order-|repetition| must be even, got order={n} repetition={m}")


def zernike_pairs(order_min: int, order_max: int) -> list[tuple[int, int]]:
    """
    Legal (order, repetition) pairs for orders in [order_min, order_max].

    Ordering: increasing order, then increasing repetition (0..order).
    """
    if order_min < 0 or order_max < order_min:
        raise ValueError("order range must satisfy 0 <= order_min <= order_max")
    pairs: list[tuple[int, int]] = []
    for n in range(order_min, order_max + 1):
        for m in range(0, n + 1):
            if (n - m) % 2 != 0:
                continue
            pairs.append((n, m))
    return pairs


@dataclass(frozen=True)
class BinomialTable:
    """
    Pascal's triangle as float64: d[n, k] = C(n, k) for 0 <= k <= n <= max_order.

    Built row by row with C(n, k) = C(n-1, k) * n / (n-k), so no factorial is
    ever formed. The backing array is read-only once built.
    """

    max_order: int
    d: np.ndarray = field(repr=False)

    @classmethod
    def build(cls, max_order: int) -> "BinomialTable":
        if max_order < 0:
            raise ValueError("max_order must be >= 0")
        d = np.zeros((max_order + 1, max_order + 1), dtype=np.float64)
        for n in range(max_order + 1):
            for k in range(n + 1):
                if k == 0 or k == n:
                    d[n, k] = 1.0
                    continue
                # Entries are integers; rounding keeps them exact (and symmetric) below 2**53.
                d[n, k] = np.rint((float(n) / (n - k)) * d[n - 1, k])
        d.setflags(write=False)
        return cls(max_order=max_order, d=d)

    def get(self, n: int, k: int) -> float:
        if not (0 <= k <= n <= self.max_order):
            raise IndexError(f"C({n},{k}) is outside a table built for max_order={self.max_order}")
        return float(self.d[n, k])


@dataclass(frozen=True)
class RadialPolynomial:
    """
    Zernike radial polynomial R_n^m(r) stored sparsely:

      R_n^m(r) = sum_s (-1)^s C(n-s, s) C(n-2s, (n-|m|)/2 - s) r^{n-2s},  s = 0..(n-|m|)/2

    `terms` holds (exponent, coefficient) in decreasing exponent order; zero
    coefficients are never stored.
    """

    n: int
    m: int
    terms: tuple[tuple[int, int], ...]

    @classmethod
    def build(cls, n: int, m: int, table: BinomialTable) -> "RadialPolynomial":
        check_pair(n, m)
        if table.max_order < n:
            raise ValueError(f"binomial table (max_order={table.max_order}) too small for order {n}")
        half = (n - abs(m)) // 2
        terms: list[tuple[int, int]] = []
        for s in range(half + 1):
            fac1 = table.get(n - s, s)
            fac2 = table.get(n - 2 * s, half - s)
            coeff = int(round(fac1 * fac2))
            if s % 2 == 1:
                coeff = -coeff
            if coeff != 0:
                terms.append((n - 2 * s, coeff))
        return cls(n=n, m=m, terms=tuple(terms))

    @property
    def coefficients(self) -> dict[int, int]:
        return dict(self.terms)

    def evaluate(self, r):
        """Evaluate at a scalar radius or elementwise over an array of radii."""
        if np.ndim(r) == 0:
            r = float(r)
            out = 0.0
            for p, c in self.terms:
                out += c * r**p
            return out
        r = np.asarray(r, dtype=np.float64)
        out = np.zeros_like(r)
        for p, c in self.terms:
            out += c * (r**p)
        return out
