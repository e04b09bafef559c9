"""Built optimisation problem together with the sets and tables it came from."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import pyomo.environ as pyo

from stagecap.core.params import ModelParams
from stagecap.core.sets import ModelSets

CAPACITY_FAMILIES = (
    "CapNew", "CapTotal", "CapRetire",
    "TxCapNew", "TxCapTotal", "TxCapRetire",
    "StoCapEnergyNew", "StoCapEnergyTotal", "StoCapEnergyRetire",
    "StoCapChargeNew", "StoCapChargeTotal", "StoCapChargeRetire",
    "StoCapDischargeNew", "StoCapDischargeTotal", "StoCapDischargeRetire",
)
OPERATION_FAMILIES = (
    "DispatchThermal", "DispatchRenewable", "CurtailRenewable",
    "StoCharge", "StoDischarge", "StoLevel", "Flow",
)


@dataclass
class ProblemInstance:
    model: pyo.ConcreteModel
    sets: ModelSets
    params: ModelParams

    @property
    def has_operations(self) -> bool:
        return self.sets.has_operations

    def variables(self) -> Dict[str, pyo.Var]:
        """Decision variable families by name; time-indexed ones only when T is non-empty."""
        names = CAPACITY_FAMILIES + (OPERATION_FAMILIES if self.has_operations else ())
        return {name: self.model.component(name) for name in names}

    def value(self, family: str, *index) -> float:
        """Solved value of one variable entry; 0.0 when the solver left it unset."""
        v = self.model.component(family)[index].value
        return 0.0 if v is None else float(v)
