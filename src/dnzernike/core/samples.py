from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

import numpy as np


@dataclass(frozen=True)
class RegionSamples:
    """
    One region of an image as parallel arrays: positions (x, y) and sample values.

    Iterating yields ((x, y), value) pairs; the object can be swept any number
    of times.
    """

    x: np.ndarray  # (N,)
    y: np.ndarray  # (N,)
    values: np.ndarray  # (N,)

    def __post_init__(self) -> None:
        x = np.array(self.x, dtype=np.float64).reshape(-1)
        y = np.array(self.y, dtype=np.float64).reshape(-1)
        v = np.array(self.values, dtype=np.float64).reshape(-1)
        if not (x.shape == y.shape == v.shape):
            raise ValueError("x, y and values must have the same length")
        for a in (x, y, v):
            a.setflags(write=False)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)
        object.__setattr__(self, "values", v)

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __iter__(self) -> Iterator[tuple[tuple[float, float], float]]:
        for xi, yi, vi in zip(self.x.tolist(), self.y.tolist(), self.values.tolist()):
            yield (xi, yi), vi


def as_region_samples(samples: RegionSamples | Iterable[tuple[tuple[float, float], float]]) -> RegionSamples:
    """Accept a RegionSamples or any iterable of ((x, y), value) pairs."""
    if isinstance(samples, RegionSamples):
        return samples
    xs: list[float] = []
    ys: list[float] = []
    vs: list[float] = []
    for pos, value in samples:
        if len(pos) != 2:
            raise ValueError("sample positions must be (x, y)")
        xs.append(float(pos[0]))
        ys.append(float(pos[1]))
        vs.append(float(value))
    return RegionSamples(x=np.asarray(xs), y=np.asarray(ys), values=np.asarray(vs))


def samples_from_image(
    image: np.ndarray,
    mask: np.ndarray | None = None,
    bbox: tuple[int, int, int, int] | None = None,
) -> RegionSamples:
    """
    Pixels of a 2D image as samples (x = column, y = row, pixel centers on integers).

    `mask` restricts to a boolean region of the same shape. `bbox` = (x, y, w, h)
    crops before sampling (clipped to the image); positions stay in full-image
    pixel coordinates. Samples are ordered row-major.
    """
    image = np.asarray(image)
    if image.ndim != 2:
        raise ValueError("image must be 2D (grayscale)")
    h, w = image.shape
    keep = np.ones((h, w), dtype=bool)
    if mask is not None:
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != image.shape:
            raise ValueError("mask must have the same shape as image")
        keep &= mask
    if bbox is not None:
        bx, by, bw, bh = (int(v) for v in bbox)
        if bw <= 0 or bh <= 0:
            raise ValueError("bbox w/h must be > 0")
        crop = np.zeros((h, w), dtype=bool)
        crop[max(by, 0) : max(by + bh, 0), max(bx, 0) : max(bx + bw, 0)] = True
        keep &= crop
    rows, cols = np.nonzero(keep)
    values = image[rows, cols].astype(np.float64)
    return RegionSamples(x=cols.astype(np.float64), y=rows.astype(np.float64), values=values)


def region_bbox(mask: np.ndarray) -> tuple[int, int, int, int]:
    """Tight (x, y, w, h) box around a boolean mask."""
    rows, cols = np.nonzero(np.asarray(mask, dtype=bool))
    if rows.size == 0:
        raise ValueError("empty mask has no bounding box")
    x0, y0 = int(cols.min()), int(rows.min())
    return x0, y0, int(cols.max()) - x0 + 1, int(rows.max()) - y0 + 1


def region_samples_by_label(image: np.ndarray, labels: np.ndarray) -> Iterator[tuple[int, RegionSamples]]:
    """Yield (label, samples) for every nonzero label, ascending."""
    image = np.asarray(image)
    labels = np.asarray(labels)
    if labels.shape != image.shape:
        raise ValueError("labels must have the same shape as image")
    for label in np.unique(labels):
        if label == 0:
            continue
        mask = labels == label
        yield int(label), samples_from_image(image, mask=mask, bbox=region_bbox(mask))
