"""Cargadores de demanda por etapa y zona."""

from .demand_loader import load_stage_demand, load_stage_zone_data

__all__ = ["load_stage_demand", "load_stage_zone_data"]
