from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
from PIL import Image

from dnzernike.api.measurements import read_measurements_jsonl
from dnzernike.cli.main import main


def _write_scene(root: Path) -> tuple[Path, Path]:
    yy, xx = np.mgrid[0:32, 0:48]
    img = np.clip(40 + 3 * xx + 2 * yy, 0, 255).astype(np.uint8)
    labels = np.zeros((32, 48), dtype=np.uint8)
    labels[np.hypot(xx - 12, yy - 15) <= 7] = 1
    labels[np.hypot(xx - 34, yy - 16) <= 5] = 3
    image_path = root / "image.png"
    labels_path = root / "labels.png"
    Image.fromarray(img).save(image_path)
    Image.fromarray(labels).save(labels_path)
    return image_path, labels_path


def test_features_command_lists_names(capsys) -> None:
    assert main(["features", "--order-min", "2", "--order-max", "3"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "DNZernikeMag_Order_2_Rep_0"
    assert lines[-1] == "DNZernikePhase_Order_3_Rep_3"
    assert len(lines) == 8


def test_measure_command_with_labels(tmp_path: Path) -> None:
    image_path, labels_path = _write_scene(tmp_path)
    out = tmp_path / "out.jsonl"
    rc = main(
        [
            "measure",
            str(image_path),
            "--labels",
            str(labels_path),
            "--order-min",
            "1",
            "--order-max",
            "4",
            "--inner-budget",
            "0.3333",
            "--out",
            str(out),
        ]
    )
    assert rc == 0
    rows = read_measurements_jsonl(out)
    assert sorted(rows) == [1, 3]
    assert len(rows[1]) == 2 * 8
    assert all(math.isfinite(v) for v in rows[3].values())


def test_measure_command_with_config_file(tmp_path: Path) -> None:
    image_path, _labels_path = _write_scene(tmp_path)
    cfg = {
        "schema_version": "dnzernike.config.v0",
        "orders": {"min": 2, "max": 2},
        "inner_budget": 0.5,
        "prefix": "Img",
        "inner_circle": {"center": [24.0, 16.0], "radius": 5.0},
        "outer_circle": {"center": [23.0, 16.0], "radius": 20.0},
    }
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps(cfg), encoding="utf-8")
    out = tmp_path / "whole.jsonl"
    assert main(["measure", str(image_path), "--config", str(cfg_path), "--out", str(out)]) == 0
    rows = read_measurements_jsonl(out)
    assert list(rows) == [1]
    assert set(rows[1]) == {"ImgMag_Order_2_Rep_0", "ImgPhase_Order_2_Rep_0", "ImgMag_Order_2_Rep_2", "ImgPhase_Order_2_Rep_2"}


def test_measure_command_reports_invalid_config(tmp_path: Path, capsys) -> None:
    image_path, _labels_path = _write_scene(tmp_path)
    out = tmp_path / "bad.jsonl"
    rc = main(["measure", str(image_path), "--order-min", "2", "--order-max", "4", "--out", str(out)])
    assert rc == 2
    assert "inner-budget" in capsys.readouterr().err
    assert not out.exists()

    rc = main(
        [
            "measure",
            str(image_path),
            "--order-min",
            "4",
            "--order-max",
            "2",
            "--inner-budget",
            "0.5",
            "--out",
            str(out),
        ]
    )
    assert rc == 2


def test_features_command_with_config_needs_no_budget(tmp_path: Path, capsys) -> None:
    cfg_path = tmp_path / "names.json"
    cfg_path.write_text(
        json.dumps({"schema_version": "dnzernike.config.v0", "orders": {"min": 1, "max": 2}, "prefix": "P"}),
        encoding="utf-8",
    )
    assert main(["features", "--config", str(cfg_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["PMag_Order_1_Rep_1", "PPhase_Order_1_Rep_1", "PMag_Order_2_Rep_0", "PPhase_Order_2_Rep_0", "PMag_Order_2_Rep_2", "PPhase_Order_2_Rep_2"]


def test_measure_command_reports_missing_image(tmp_path: Path, capsys) -> None:
    out = tmp_path / "none.jsonl"
    rc = main(
        [
            "measure",
            str(tmp_path / "missing.png"),
            "--order-min",
            "1",
            "--order-max",
            "2",
            "--inner-budget",
            "0.5",
            "--out",
            str(out),
        ]
    )
    assert rc == 2
    assert capsys.readouterr().err.startswith("error: ")
    assert not out.exists()
