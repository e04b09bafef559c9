"""Punto de acceso a los cargadores de la red de transporte."""

from .zone_loader import load_zones
from .line_loader import load_transmission_lines

__all__ = ["load_zones", "load_transmission_lines"]
