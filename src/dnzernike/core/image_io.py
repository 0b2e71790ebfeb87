from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def _read_cv2(path: Path, flags_name: str) -> np.ndarray | None:
    try:
        import cv2  # type: ignore

        img = cv2.imread(str(path), cv2.IMREAD_ANYDEPTH | getattr(cv2, flags_name))
        if img is not None and img.ndim == 2:
            return img
    except Exception:
        # Fall back to Pillow.
        pass
    return None


def _read_pil(path: Path, gray: bool) -> np.ndarray:
    with Image.open(path) as im:
        if im.mode in ("I;16", "I;16B", "I;16L", "I", "F"):
            return np.asarray(im)
        if gray and im.mode != "L":
            im = im.convert("L")
        return np.asarray(im)


def load_gray(path: str | Path) -> np.ndarray:
    """
    Load an image as a 2D float64 intensity array.

    Primary backend is OpenCV (if installed), Pillow is the fallback. Bit depth
    is preserved (8-bit stays 0..255, 16-bit stays 0..65535); color images are
    converted to luminance.
    """
    p = Path(path)
    img = _read_cv2(p, "IMREAD_GRAYSCALE")
    if img is None:
        img = _read_pil(p, gray=True)
    return np.asarray(img, dtype=np.float64)


def load_labels(path: str | Path) -> np.ndarray:
    """
    Load a label image (0 = background, each positive integer one region).

    Only single-channel images (gray, 16-bit, palette indices) are accepted;
    color label maps raise ValueError instead of being converted to luminance.
    """
    p = Path(path)
    img = _read_cv2(p, "IMREAD_UNCHANGED")
    if img is None:
        img = _read_pil(p, gray=False)
    img = np.asarray(img)
    if img.ndim != 2:
        raise ValueError(f"label image must be single-channel: {p}")
    return img.astype(np.int64)
