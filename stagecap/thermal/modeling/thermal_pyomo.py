# -*- coding: utf-8 -*-
from __future__ import annotations

from pyomo.environ import Any, Constraint, Expression, NonNegativeReals, Param, Var

from stagecap.core.params import ModelParams


def attach_thermal_to_model(m, params: ModelParams, ramp_limits: bool = False):
    """Thermal dispatch over ``m.TH x m.S x m.T`` bounded by the installed capacity.

    Expects ``m.CapTotal`` (generation capacity block) and the sets
    ``m.TH``, ``m.Z``, ``m.S``, ``m.T``.
    """
    # ------------- Parámetros por unidad -------------
    m.th_zone = Param(m.TH, initialize=lambda m, i: params.zone_of[i], within=Any)
    m.th_vomc = Param(m.TH, initialize=lambda m, i: params.thermal_vom[i], within=NonNegativeReals)
    m.th_fuel_cost = Param(m.TH, initialize=lambda m, i: params.thermal_fuel_cost[i], within=NonNegativeReals)
    m.th_ru = Param(m.TH, initialize=lambda m, i: params.thermal_ramp_up[i], within=NonNegativeReals)
    m.th_rd = Param(m.TH, initialize=lambda m, i: params.thermal_ramp_down[i], within=NonNegativeReals)

    # ------------- Variables -------------
    m.DispatchThermal = Var(m.TH, m.S, m.T, within=NonNegativeReals)  # MW

    # ------------- Restricciones -------------
    def _cap_hi(m, i, s, t):
        return m.DispatchThermal[i, s, t] <= m.CapTotal[i, s]
    m.ThermalDispatchLimit = Constraint(m.TH, m.S, m.T, rule=_cap_hi)

    if ramp_limits:
        t0 = m.T.first()

        def _ramp_up(m, i, s, t):
            if t == t0:
                return Constraint.Skip
            return m.DispatchThermal[i, s, t] - m.DispatchThermal[i, s, t - 1] <= m.th_ru[i]
        m.ThermalRampUp = Constraint(m.TH, m.S, m.T, rule=_ramp_up)

        def _ramp_dn(m, i, s, t):
            if t == t0:
                return Constraint.Skip
            return m.DispatchThermal[i, s, t - 1] - m.DispatchThermal[i, s, t] <= m.th_rd[i]
        m.ThermalRampDown = Constraint(m.TH, m.S, m.T, rule=_ramp_dn)

    # ------------- Inyección por zona -------------
    def _gen_th_zone(m, z, s, t):
        return sum(m.DispatchThermal[i, s, t] for i in m.TH if m.th_zone[i] == z)
    m.gen_th_by_zone = Expression(m.Z, m.S, m.T, rule=_gen_th_zone)

    # ------------- Costos (año representativo, sin descontar) -------------
    def _cost_stage(m, s):
        return sum(
            (m.th_vomc[i] + m.th_fuel_cost[i]) * m.DispatchThermal[i, s, t]
            for i in m.TH for t in m.T
        )
    m.cost_th_oper_stage = Expression(m.S, rule=_cost_stage)

    return {
        "gen_th_by_zone": m.gen_th_by_zone,
        "cost_th_oper_stage": m.cost_th_oper_stage,
        "DispatchThermal": m.DispatchThermal,
    }
