"""Typed records for the zonal network: zones and transmission corridors."""

from __future__ import annotations

from dataclasses import dataclass

from stagecap.core.validators import (
    invalid,
    require_non_empty,
    require_non_negative,
    require_positive_int,
)


@dataclass(frozen=True)
class Zone:
    """A balancing zone (one nodal balance per stage and time step)."""

    id: int
    name: str

    def __post_init__(self):
        require_positive_int(self.id, "id", "Zone")
        require_non_empty(self.name, "name", f"Zone:{self.id}")


@dataclass(frozen=True)
class TransmissionLine:
    """Corridor between two zones.

    ``thermal_limit_mw`` is the largest capacity that can ever be built on
    the corridor; ``initial_capacity_mw`` is what exists before stage 1.
    Flow is directed ``from_zone_id -> to_zone_id`` when positive.
    """

    id: str
    from_zone_id: int
    to_zone_id: int
    reactance_pu: float
    thermal_limit_mw: float
    investment_cost_usd_per_mw_year: float = 0.0
    initial_capacity_mw: float = 0.0
    length_km: float = 0.0  # informative only

    def __post_init__(self):
        require_non_empty(self.id, "id", "TransmissionLine")
        where = f"TransmissionLine:{self.id}"
        require_positive_int(self.from_zone_id, "from_zone_id", where)
        require_positive_int(self.to_zone_id, "to_zone_id", where)
        if self.from_zone_id == self.to_zone_id:
            invalid(where, f"from_zone_id and to_zone_id cannot be the same ({self.from_zone_id})")
        if not self.reactance_pu > 0:
            invalid(where, f"reactance_pu must be positive, got {self.reactance_pu!r}")
        require_non_negative(self.thermal_limit_mw, "thermal_limit_mw", where)
        require_non_negative(self.length_km, "length_km", where)
        require_non_negative(self.investment_cost_usd_per_mw_year, "investment_cost_usd_per_mw_year", where)
        require_non_negative(self.initial_capacity_mw, "initial_capacity_mw", where)
