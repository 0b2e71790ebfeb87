from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Iterable

import numpy as np

from dnzernike.core.geometry import DualCircleNormalizer
from dnzernike.core.samples import RegionSamples, as_region_samples
from dnzernike.core.zernike import BinomialTable, RadialPolynomial, check_pair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComplexValue:
    real: float
    imag: float

    @property
    def magnitude(self) -> float:
        return math.hypot(self.real, self.imag)

    @property
    def phase(self) -> float:
        return math.atan2(self.imag, self.real)


class ComplexAccumulator:
    """Running (real, imag) sum of complex moment terms."""

    def __init__(self) -> None:
        self.real = 0.0
        self.imag = 0.0

    def add(self, term: ComplexValue | tuple[float, float]) -> None:
        if isinstance(term, ComplexValue):
            re, im = term.real, term.imag
        else:
            re, im = term
        self.real += float(re)
        self.imag += float(im)

    def finalize(self, n: int, count: int) -> ComplexValue:
        """
        Scale by (n + 1) / count.

        count == 0 means every sample was excluded: the result is NaN, not an error.
        """
        if count <= 0:
            return ComplexValue(real=math.nan, imag=math.nan)
        scale = (n + 1) / count
        return ComplexValue(real=self.real * scale, imag=self.imag * scale)


@dataclass(frozen=True)
class ZernikeMoment:
    n: int
    m: int
    polynomial: RadialPolynomial
    value: ComplexValue
    count: int

    @property
    def magnitude(self) -> float:
        return self.value.magnitude

    @property
    def phase(self) -> float:
        return self.value.phase


@dataclass(frozen=True)
class NormalizedSamples:
    """Samples that survived the dual-circle filter and have non-negative values."""

    rho: np.ndarray
    theta: np.ndarray
    values: np.ndarray

    @property
    def count(self) -> int:
        return int(self.values.shape[0])


def normalize_samples(normalizer: DualCircleNormalizer, samples: RegionSamples) -> NormalizedSamples:
    rho, theta, mask = normalizer.normalize_many(samples.x, samples.y)
    # Negative (or NaN) values are masked-out pixels.
    keep = mask & (samples.values >= 0.0)
    return NormalizedSamples(rho=rho[keep], theta=theta[keep], values=samples.values[keep])


def accumulate_moment(
    n: int,
    m: int,
    accepted: NormalizedSamples,
    table: BinomialTable,
) -> ZernikeMoment:
    """
    Moment of order n, repetition m over already-normalized samples:

      Z_nm = (n + 1) / N * sum_i v_i R_n^m(rho_i) exp(-1j m theta_i)
    """
    polynomial = RadialPolynomial.build(n, m, table)
    acc = ComplexAccumulator()
    if accepted.count > 0:
        w = accepted.values * polynomial.evaluate(accepted.rho)
        acc.add((np.sum(w * np.cos(m * accepted.theta)), -np.sum(w * np.sin(m * accepted.theta))))
    value = acc.finalize(n, accepted.count)
    if accepted.count == 0:
        logger.debug("No samples inside the outer circle for order=%d repetition=%d", n, m)
    return ZernikeMoment(n=n, m=m, polynomial=polynomial, value=value, count=accepted.count)


def compute_moment(
    order: int,
    repetition: int,
    normalizer: DualCircleNormalizer,
    samples: RegionSamples | Iterable[tuple[tuple[float, float], float]],
    table: BinomialTable | None = None,
) -> ZernikeMoment:
    """
    Compute one double-normalized Zernike moment over a region.

    `table` may be shared between calls; a fresh one sized to `order` is built
    otherwise. Illegal (order, repetition) pairs raise ValueError.
    """
    check_pair(order, repetition)
    if table is None:
        table = BinomialTable.build(order)
    region = as_region_samples(samples)
    return accumulate_moment(order, repetition, normalize_samples(normalizer, region), table)
