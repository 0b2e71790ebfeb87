from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from dnzernike.api.feature_set import feature_names
from dnzernike.api.measurements import measure_regions, write_measurements_jsonl
from dnzernike.config import (
    DEFAULT_PREFIX,
    NAMES_ONLY_BUDGET,
    ConfigValidationError,
    MomentSetConfig,
    load_config_data,
    parse_circles,
    parse_moment_set_config,
)
from dnzernike.core.geometry import Circle
from dnzernike.core.image_io import load_gray, load_labels

logger = logging.getLogger(__name__)


def _parse_circle_arg(text: str) -> Circle:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("circle must be X,Y,R")
    try:
        x, y, r = (float(p) for p in parts)
        return Circle(center=(x, y), radius=r)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _add_order_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--order-min", type=int, default=None, help="Minimum Zernike order (>= 1).")
    p.add_argument("--order-max", type=int, default=None, help="Maximum Zernike order (>= order-min).")
    p.add_argument("--prefix", type=str, default=None, help=f"Feature name prefix (default {DEFAULT_PREFIX}).")


def _config_from_args(args: argparse.Namespace, *, need_budget: bool) -> tuple[MomentSetConfig, tuple[Circle, Circle] | None]:
    config_path: Path | None = getattr(args, "config", None)
    if config_path is not None:
        data = load_config_data(config_path)
        return parse_moment_set_config(data, require_budget=need_budget), parse_circles(data)

    if args.order_min is None or args.order_max is None:
        raise ConfigValidationError("--order-min and --order-max are required without --config")
    budget = getattr(args, "inner_budget", None)
    if need_budget and budget is None:
        raise ConfigValidationError("--inner-budget is required without --config")
    config = MomentSetConfig(
        order_min=args.order_min,
        order_max=args.order_max,
        inner_budget=NAMES_ONLY_BUDGET if budget is None else budget,
        prefix=DEFAULT_PREFIX if args.prefix is None else args.prefix,
    )
    return config, None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="dnzernike")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    sub = parser.add_subparsers(dest="cmd", required=True)

    feat = sub.add_parser("features", help="List the feature names produced for an order range.")
    _add_order_args(feat)
    feat.add_argument("--config", type=Path, default=None, help="JSON config (dnzernike.config.v0).")

    meas = sub.add_parser(
        "measure",
        help="Compute double-normalized Zernike features for each labelled region of an image.",
    )
    meas.add_argument("image", type=Path)
    meas.add_argument("--labels", type=Path, default=None, help="Label image (0 = background). Default: whole image.")
    meas.add_argument("--config", type=Path, default=None, help="JSON config (dnzernike.config.v0).")
    _add_order_args(meas)
    meas.add_argument("--inner-budget", type=float, default=None, help="Normalized radius at the inner perimeter (0..1).")
    meas.add_argument("--inner-circle", type=_parse_circle_arg, default=None, help="Fixed inner circle X,Y,R.")
    meas.add_argument("--outer-circle", type=_parse_circle_arg, default=None, help="Fixed outer circle X,Y,R.")
    meas.add_argument("--inner-scale", type=float, default=0.5, help="Inner radius / equivalent radius of the region.")
    meas.add_argument("--outer-scale", type=float, default=1.5, help="Outer radius / equivalent radius of the region.")
    meas.add_argument("--out", type=Path, required=True, help="Output JSONL path.")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        if args.cmd == "features":
            config, _ = _config_from_args(args, need_budget=False)
            for name in feature_names(config):
                print(name)
            return 0

        if args.cmd == "measure":
            config, circles = _config_from_args(args, need_budget=True)
            if (args.inner_circle is None) != (args.outer_circle is None):
                raise ConfigValidationError("--inner-circle and --outer-circle must be given together")
            if args.inner_circle is not None:
                circles = (args.inner_circle, args.outer_circle)

            image = load_gray(args.image)
            if args.labels is not None:
                labels = load_labels(args.labels)
            else:
                labels = np.ones(image.shape, dtype=np.int64)
            logger.info("Loaded %s (%dx%d)", args.image, image.shape[1], image.shape[0])

            rows = measure_regions(
                image,
                labels,
                config,
                circles=circles,
                inner_scale=args.inner_scale,
                outer_scale=args.outer_scale,
            )
            write_measurements_jsonl(args.out, rows)
            print(f"Wrote {args.out}")
            return 0
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    raise AssertionError(f"Unhandled cmd: {args.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
