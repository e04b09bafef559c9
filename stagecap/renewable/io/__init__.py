"""Cargadores de centrales renovables y perfiles de disponibilidad."""

from .renewable_loader import load_availability_profiles, load_renewable_plants

__all__ = ["load_renewable_plants", "load_availability_profiles"]
