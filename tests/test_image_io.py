from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from dnzernike.core.image_io import load_gray, load_labels


def _write_gray(path: Path, arr: np.ndarray) -> None:
    img = Image.fromarray(arr.astype(np.uint8))
    if path.suffix.lower() == ".webp":
        img.save(path, lossless=True)
    else:
        img.save(path)


def test_load_gray_png_and_webp(tmp_path: Path) -> None:
    arr = (np.arange(64, dtype=np.uint8).reshape(8, 8) * 4) % 255

    p_png = tmp_path / "a.png"
    p_webp = tmp_path / "a.webp"
    _write_gray(p_png, arr)
    _write_gray(p_webp, arr)

    a = load_gray(p_png)
    b = load_gray(p_webp)

    assert a.shape == (8, 8)
    assert b.shape == (8, 8)
    assert a.dtype == np.float64
    assert b.dtype == np.float64
    assert np.array_equal(a, arr.astype(np.float64))


def test_load_gray_keeps_16_bit_range(tmp_path: Path) -> None:
    arr = (np.arange(48, dtype=np.uint16).reshape(6, 8) * 1000).astype(np.uint16)
    p = tmp_path / "deep.png"
    Image.fromarray(arr).save(p)
    img = load_gray(p)
    assert img.shape == (6, 8)
    assert img.max() == 47000.0


def test_load_labels(tmp_path: Path) -> None:
    labels = np.zeros((10, 12), dtype=np.uint8)
    labels[1:4, 1:4] = 1
    labels[6:9, 5:11] = 7
    p = tmp_path / "labels.png"
    _write_gray(p, labels)
    out = load_labels(p)
    assert out.dtype == np.int64
    assert np.array_equal(out, labels.astype(np.int64))


def test_load_labels_rejects_color_label_map(tmp_path: Path) -> None:
    rgb = np.zeros((6, 6, 3), dtype=np.uint8)
    rgb[0:3, 0:3] = (255, 0, 0)
    rgb[3:6, 3:6] = (0, 0, 255)
    p = tmp_path / "labels_rgb.png"
    Image.fromarray(rgb).save(p)
    with pytest.raises(ValueError, match="single-channel"):
        load_labels(p)
