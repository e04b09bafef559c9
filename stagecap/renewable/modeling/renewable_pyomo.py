# -*- coding: utf-8 -*-
from __future__ import annotations

from pyomo.environ import Any, Constraint, Expression, NonNegativeReals, Param, Reals, Var

from stagecap.core.params import ModelParams


def attach_renewable_to_model(m, params: ModelParams):
    # ------------------------------
    # Parámetros
    # ------------------------------
    m.re_zone = Param(m.RE, initialize=lambda m, i: params.zone_of[i], within=Any)
    m.re_vomc = Param(m.RE, initialize=lambda m, i: params.renewable_vom[i], within=NonNegativeReals)

    # availability is a fraction of installed capacity, not range checked
    def _af_init(m, i, s, t):
        return params.availability.get((i, s, t), 0.0)
    m.re_af = Param(m.RE, m.S, m.T, initialize=_af_init, within=Reals)

    # ------------------------------
    # Variables
    # ------------------------------
    m.DispatchRenewable = Var(m.RE, m.S, m.T, within=NonNegativeReals)
    m.CurtailRenewable = Var(m.RE, m.S, m.T, within=NonNegativeReals)

    # ------------------------------
    # Restricciones
    # ------------------------------
    # every available MW is either dispatched or curtailed
    def _balance(m, i, s, t):
        return (
            m.DispatchRenewable[i, s, t] + m.CurtailRenewable[i, s, t]
            == m.CapTotal[i, s] * m.re_af[i, s, t]
        )
    m.RenewableBalance = Constraint(m.RE, m.S, m.T, rule=_balance)

    # ------------------------------
    # Inyección por zona
    # ------------------------------
    def _gen_re_zone(m, z, s, t):
        return sum(m.DispatchRenewable[i, s, t] for i in m.RE if m.re_zone[i] == z)
    m.gen_re_by_zone = Expression(m.Z, m.S, m.T, rule=_gen_re_zone)

    # ------------------------------
    # Costos
    # ------------------------------
    def _cost_stage(m, s):
        return sum(m.re_vomc[i] * m.DispatchRenewable[i, s, t] for i in m.RE for t in m.T)
    m.cost_re_oper_stage = Expression(m.S, rule=_cost_stage)

    return {
        "gen_re_by_zone": m.gen_re_by_zone,
        "cost_re_oper_stage": m.cost_re_oper_stage,
    }
