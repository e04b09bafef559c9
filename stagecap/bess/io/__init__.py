"""Utilidades de entrada/salida para unidades de almacenamiento.

Se expone un único punto de acceso, :func:`load_storage_units`, que
transforma el CSV de definición de unidades en registros listos para el
resto del pipeline.
"""

from .ess_loader import load_storage_units

__all__ = ["load_storage_units"]
