from __future__ import annotations

import logging
from typing import Iterable

from dnzernike.config import ConfigValidationError, MomentSetConfig
from dnzernike.core.geometry import Circle, DualCircleNormalizer
from dnzernike.core.moment import accumulate_moment, normalize_samples
from dnzernike.core.samples import RegionSamples, as_region_samples
from dnzernike.core.zernike import BinomialTable, zernike_pairs

logger = logging.getLogger(__name__)

Samples = RegionSamples | Iterable[tuple[tuple[float, float], float]]


def magnitude_name(prefix: str, order: int, repetition: int) -> str:
    return f"{prefix}Mag_Order_{order}_Rep_{repetition}"


def phase_name(prefix: str, order: int, repetition: int) -> str:
    return f"{prefix}Phase_Order_{order}_Rep_{repetition}"


def feature_names(config: MomentSetConfig) -> list[str]:
    """Names emitted by `compute_moment_set`, in emission order (magnitude then phase per pair)."""
    names: list[str] = []
    for n, m in zernike_pairs(config.order_min, config.order_max):
        names.append(magnitude_name(config.prefix, n, m))
        names.append(phase_name(config.prefix, n, m))
    return names


def compute_moment_set(
    config: MomentSetConfig,
    inner: Circle,
    outer: Circle,
    samples: Samples,
) -> dict[str, float]:
    """
    Magnitude and phase of every legal (order, repetition) moment in the configured range.

    One binomial table (sized to order_max) and one normalization pass are
    shared by all pairs. Regions with no accepted sample give NaN values.
    """
    normalizer = DualCircleNormalizer(inner, outer, config.inner_budget)
    table = BinomialTable.build(config.order_max)
    accepted = normalize_samples(normalizer, as_region_samples(samples))
    if accepted.count == 0:
        logger.debug("Region fully excluded by the dual-circle filter; moments are NaN")

    out: dict[str, float] = {}
    for n, m in zernike_pairs(config.order_min, config.order_max):
        moment = accumulate_moment(n, m, accepted, table)
        out[magnitude_name(config.prefix, n, m)] = moment.magnitude
        out[phase_name(config.prefix, n, m)] = moment.phase
    logger.debug("Computed %d moments over %d accepted samples", len(out) // 2, accepted.count)
    return out


class DoubleNormalizedZernikeFeatureSet:
    """
    Zernike features with radius normalized by an inner and an outer circle.

    The circles need not be concentric. Inside the inner circle the normalized
    radius spans [0, inner_budget]; between the circles it spans
    [inner_budget, 1]; samples beyond the outer circle are ignored.
    """

    def __init__(self, config: MomentSetConfig, inner: Circle | None = None, outer: Circle | None = None) -> None:
        self.config = config
        self.inner = inner
        self.outer = outer

    def set_enclosing_circles(self, inner: Circle, outer: Circle) -> None:
        self.inner = inner
        self.outer = outer

    def feature_names(self) -> list[str]:
        return feature_names(self.config)

    def calculate(self, samples: Samples) -> dict[str, float]:
        if self.inner is None or self.outer is None:
            raise ConfigValidationError("inner and outer circles must be set before calculate()")
        return compute_moment_set(self.config, self.inner, self.outer, samples)
