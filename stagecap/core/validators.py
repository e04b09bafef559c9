# -*- coding: utf-8 -*-
from __future__ import annotations

import math
from typing import Iterable

from stagecap.core.errors import ConfigurationError, EntityValidationError


def invalid(where: str, msg: str):
    raise EntityValidationError(f"[{where}] {msg}")


def require_positive_int(value, field: str, where: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        invalid(where, f"{field} must be a positive integer, got {value!r}")


def require_non_empty(value, field: str, where: str) -> None:
    if not isinstance(value, str) or not value.strip():
        invalid(where, f"{field} cannot be empty")


def require_non_negative(value: float, field: str, where: str) -> None:
    if value is None or math.isnan(value) or value < 0:
        invalid(where, f"{field} must be non-negative, got {value!r}")


def require_fraction(value: float, field: str, where: str) -> None:
    if value is None or math.isnan(value) or not 0.0 <= value <= 1.0:
        invalid(where, f"{field} must be within [0, 1], got {value!r}")


def require_not_above(value: float, ceiling: float, field: str, ceiling_field: str, where: str) -> None:
    if value > ceiling:
        invalid(where, f"{field} ({value}) > {ceiling_field} ({ceiling})")


def ensure_names_unique(names: Iterable, where: str) -> None:
    seen = set()
    for n in names:
        if n in seen:
            raise ConfigurationError(f"[{where}] duplicated name: {n}")
        seen.add(n)


def ensure_zones_known(zone_by_asset: dict, zone_ids: Iterable[int], where: str) -> None:
    """Every asset must sit in one of the declared zones."""
    known = set(zone_ids)
    unknown = sorted(a for a, z in zone_by_asset.items() if z not in known)
    if unknown:
        shown = unknown[:10]
        more = " ..." if len(unknown) > 10 else ""
        raise ConfigurationError(f"[{where}] assets in unknown zones: {shown}{more}")
