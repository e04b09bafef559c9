"""Cargadores de centrales térmicas."""

from .thermal_loader import load_thermal_plants

__all__ = ["load_thermal_plants"]
