from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dnzernike.core.geometry import Circle, GeometryError


SCHEMA_VERSION = "dnzernike.config.v0"
DEFAULT_PREFIX = "DNZernike"
# Feature names do not depend on the budget.
NAMES_ONLY_BUDGET = 0.5


class ConfigValidationError(ValueError):
    pass


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigValidationError(msg)


@dataclass(frozen=True)
class MomentSetConfig:
    """
    Parameters of one double-normalized Zernike feature set.

    `inner_budget` is the normalized radius assigned to the inner circle's
    perimeter. It has no default: 0.5 and 1/3 are both in use.
    """

    order_min: int
    order_max: int
    inner_budget: float
    prefix: str = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        _require(isinstance(self.order_min, int) and isinstance(self.order_max, int), "orders must be integers")
        _require(self.order_min >= 1, "orders.min must be >= 1")
        _require(self.order_max >= 1, "orders.max must be >= 1")
        _require(self.order_min <= self.order_max, "orders.min must be <= orders.max")
        budget = float(self.inner_budget)
        _require(0.0 < budget < 1.0, "inner_budget must satisfy 0 < inner_budget < 1")
        _require(isinstance(self.prefix, str), "prefix must be a string")
        object.__setattr__(self, "inner_budget", budget)


def _parse_circle(data: Any, name: str) -> Circle:
    _require(isinstance(data, dict), f"{name} must be an object with center and radius")
    center = data.get("center")
    _require(isinstance(center, (list, tuple)) and len(center) == 2, f"{name}.center must be [x,y]")
    radius = data.get("radius")
    _require(radius is not None, f"{name}.radius is required")
    try:
        return Circle(center=(float(center[0]), float(center[1])), radius=float(radius))
    except GeometryError as exc:
        raise ConfigValidationError(f"{name}: {exc}") from exc


def parse_circles(data: dict[str, Any]) -> tuple[Circle, Circle] | None:
    """Return (inner, outer) when both circles are present, None when neither is."""
    inner = data.get("inner_circle")
    outer = data.get("outer_circle")
    if inner is None and outer is None:
        return None
    _require(inner is not None and outer is not None, "inner_circle and outer_circle must be given together")
    return _parse_circle(inner, "inner_circle"), _parse_circle(outer, "outer_circle")


def parse_moment_set_config(data: dict[str, Any], *, require_budget: bool = True) -> MomentSetConfig:
    """
    Build a `MomentSetConfig` from a decoded JSON object.

    With `require_budget=False` a missing `inner_budget` is replaced by
    `NAMES_ONLY_BUDGET`; only use that for listing feature names.
    """
    schema_version = data.get("schema_version")
    _require(schema_version == SCHEMA_VERSION, f"schema_version must be {SCHEMA_VERSION}")

    orders = data.get("orders", {})
    _require(isinstance(orders, dict), "orders must be an object {min,max}")
    omin = orders.get("min")
    omax = orders.get("max")
    _require(omin is not None and omax is not None, "orders.min and orders.max are required")

    budget = data.get("inner_budget")
    if budget is None and not require_budget:
        budget = NAMES_ONLY_BUDGET
    _require(budget is not None, "inner_budget is required")

    prefix = data.get("prefix", DEFAULT_PREFIX)

    return MomentSetConfig(order_min=int(omin), order_max=int(omax), inner_budget=float(budget), prefix=str(prefix))


def load_config_data(path: Path) -> dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    _require(isinstance(data, dict), "config file must contain a JSON object")
    return data


def load_moment_set_config(path: Path) -> MomentSetConfig:
    return parse_moment_set_config(load_config_data(path))
