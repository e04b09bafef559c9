# -*- coding: utf-8 -*-
"""Assembly of the multi-stage capacity expansion LP.

Order of construction: sets -> parameter tables -> capacity blocks ->
operational blocks (only with time steps) -> nodal balance -> objective.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import pyomo.environ as pyo

from stagecap.bess.core.types import StorageUnit
from stagecap.bess.modeling.ess_pyomo import attach_ess_to_model
from stagecap.core.capacity import attach_capacity_block
from stagecap.core.model_bundle import ProblemInstance
from stagecap.core.params import derive_params
from stagecap.core.sets import build_sets
from stagecap.core.types import MissingDataPolicy, ProjectParameters, StageZoneData
from stagecap.modeling.objective import attach_objective
from stagecap.network.modeling.transport import attach_transport_to_model
from stagecap.renewable.core.types import RenewablePlant
from stagecap.renewable.modeling.renewable_pyomo import attach_renewable_to_model
from stagecap.thermal.core.types import ThermalPlant
from stagecap.thermal.modeling.thermal_pyomo import attach_thermal_to_model

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOptions:
    missing_data_policy: MissingDataPolicy = MissingDataPolicy.ZERO_FILL
    # hourly ramp limits on thermal dispatch inside each stage
    ramp_limits: bool = False


def build_model(
    params: ProjectParameters,
    thermal: Sequence[ThermalPlant],
    renewable: Sequence[RenewablePlant],
    storage: Sequence[StorageUnit],
    stage_zone_data: StageZoneData,
    *,
    options: Optional[BuildOptions] = None,
) -> ProblemInstance:
    """Build the Pyomo model for the given system.

    Raises ``ConfigurationError`` on structural problems (no stage-zone data,
    unknown zones, duplicated names) before any variable is declared.
    """
    options = options or BuildOptions()
    sets = build_sets(params, thermal, renewable, storage, stage_zone_data)
    tables = derive_params(
        params, sets, thermal, renewable, storage, stage_zone_data, options.missing_data_policy
    )

    m = pyo.ConcreteModel(name="stagecap")

    # Sets
    m.S = pyo.Set(initialize=sets.stages, ordered=True)
    m.Z = pyo.Set(initialize=sets.zones, ordered=True)
    m.TH = pyo.Set(initialize=sets.thermal, ordered=True)
    m.RE = pyo.Set(initialize=sets.renewable, ordered=True)
    m.G = pyo.Set(initialize=sets.generation, ordered=True)
    m.ST = pyo.Set(initialize=sets.storage, ordered=True)
    m.L = pyo.Set(initialize=sets.lines, ordered=True)

    ops = sets.has_operations
    if ops:
        m.T = pyo.Set(initialize=sets.steps, ordered=True)
    else:
        log.warning("No time steps: building an investment-only model.")

    # Capacidad de generación (térmica + renovable comparten el bloque)
    attach_capacity_block(m, "Cap", m.G, tables.generation)
    attach_ess_to_model(m, tables, operations=ops)

    oper_terms = ()
    injections = ()
    if ops:
        th = attach_thermal_to_model(m, tables, ramp_limits=options.ramp_limits)
        re = attach_renewable_to_model(m, tables)
        oper_terms = (th["cost_th_oper_stage"], re["cost_re_oper_stage"], m.cost_sto_oper_stage)
        injections = (
            lambda m, z, s, t: m.gen_th_by_zone[z, s, t],
            lambda m, z, s, t: m.gen_re_by_zone[z, s, t],
            lambda m, z, s, t: m.net_sto_by_zone[z, s, t],
        )
    attach_transport_to_model(m, tables, injection_terms=injections, operations=ops)

    attach_objective(m, tables, oper_stage_terms=oper_terms)

    log.info(
        "model built: %d variables, %d constraints",
        m.nvariables(), m.nconstraints(),
    )
    return ProblemInstance(model=m, sets=sets, params=tables)
