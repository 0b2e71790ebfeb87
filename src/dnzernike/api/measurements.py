from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from dnzernike.api.feature_set import DoubleNormalizedZernikeFeatureSet
from dnzernike.config import MomentSetConfig
from dnzernike.core.geometry import Circle, equivalent_circle
from dnzernike.core.samples import region_samples_by_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionMeasurement:
    label: int
    inner: Circle
    outer: Circle
    features: dict[str, float]


def measure_regions(
    image: np.ndarray,
    labels: np.ndarray,
    config: MomentSetConfig,
    *,
    circles: tuple[Circle, Circle] | None = None,
    inner_scale: float = 0.5,
    outer_scale: float = 1.5,
) -> list[RegionMeasurement]:
    """
    Compute the moment set once per labelled region.

    With `circles=None`, each region gets circles centered on its centroid with
    radii `inner_scale` and `outer_scale` times its equivalent (same-area)
    radius. Otherwise the given (inner, outer) pair is used for every region.
    """
    if inner_scale <= 0 or outer_scale <= 0:
        raise ValueError("inner_scale and outer_scale must be > 0")
    image = np.asarray(image)
    labels = np.asarray(labels)
    feature_set = DoubleNormalizedZernikeFeatureSet(config)
    rows: list[RegionMeasurement] = []
    for label, samples in region_samples_by_label(image, labels):
        if circles is None:
            base = equivalent_circle(labels == label)
            inner, outer = base.scaled(inner_scale), base.scaled(outer_scale)
        else:
            inner, outer = circles
        feature_set.set_enclosing_circles(inner, outer)
        features = feature_set.calculate(samples)
        rows.append(RegionMeasurement(label=label, inner=inner, outer=outer, features=features))
        logger.debug("Region %d: %d samples, inner=%s outer=%s", label, len(samples), inner, outer)
    logger.info("Measured %d regions (%d features each)", len(rows), len(feature_set.feature_names()))
    return rows


def _json_value(v: float) -> float | None:
    return None if not math.isfinite(v) else float(v)


def write_measurements_jsonl(path: Path, rows: list[RegionMeasurement]) -> Path:
    """
    One JSON object per (region, measurement): {"label", "measurement", "value"}.

    Non-finite values are written as null.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    for row in rows:
        for name, value in row.features.items():
            lines.append(json.dumps({"label": row.label, "measurement": name, "value": _json_value(value)}))
    path.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    return path


def read_measurements_jsonl(path: Path) -> dict[int, dict[str, float]]:
    """Inverse of `write_measurements_jsonl` (null values come back as NaN)."""
    out: dict[int, dict[str, float]] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line:
            continue
        rec: dict[str, Any] = json.loads(line)
        value = rec["value"]
        out.setdefault(int(rec["label"]), {})[str(rec["measurement"])] = math.nan if value is None else float(value)
    return out
