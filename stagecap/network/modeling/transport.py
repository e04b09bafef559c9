# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Callable, Tuple

import pyomo.environ as pyo

from stagecap.core.capacity import attach_capacity_block
from stagecap.core.params import ModelParams

InjectionTerm = Callable[[pyo.ConcreteModel, int, int, int], object]
# firma: (m, zone, stage, t) -> expresión Pyomo (MW) inyectada en la zona.


def attach_transport_to_model(
    m,
    params: ModelParams,
    *,
    injection_terms: Tuple[InjectionTerm, ...] = tuple(),
    operations: bool = True,
):
    """
    Transport (pipe-flow) network between zones.

    Line capacity is expandable like any other asset (``TxCap`` block). Flows
    are free in sign and bounded by the installed line capacity; reactance is
    carried as a parameter only, no angle constraints are written.

    With ``operations`` the nodal balance is written for every (zone, stage,
    t): injections from ``injection_terms`` plus net imports equal demand.
    There is no load-shedding slack.
    """
    block = attach_capacity_block(m, "TxCap", m.L, params.lines)
    out = {"TxCapNew": block["New"]}
    if not operations:
        return out

    # Parámetros de líneas
    m.line_from = pyo.Param(m.L, initialize={k: params.line_from[k] for k in m.L}, within=pyo.Any)
    m.line_to = pyo.Param(m.L, initialize={k: params.line_to[k] for k in m.L}, within=pyo.Any)
    m.line_x = pyo.Param(m.L, initialize={k: params.line_reactance[k] for k in m.L}, within=pyo.PositiveReals)

    # Demanda D[z,s,t] (MW)
    def _D_init(m, z, s, t):
        return params.demand.get((z, s, t), 0.0)
    m.Demand = pyo.Param(m.Z, m.S, m.T, initialize=_D_init, within=pyo.Reals)

    # Variables
    m.Flow = pyo.Var(m.L, m.S, m.T, within=pyo.Reals)  # MW, positivo from -> to

    # Límites de flujo
    def _flow_up(m, l, s, t):
        return m.Flow[l, s, t] <= m.TxCapTotal[l, s]

    def _flow_dn(m, l, s, t):
        return m.Flow[l, s, t] >= -m.TxCapTotal[l, s]
    m.FlowUpper = pyo.Constraint(m.L, m.S, m.T, rule=_flow_up)
    m.FlowLower = pyo.Constraint(m.L, m.S, m.T, rule=_flow_dn)

    # Suma de inyecciones por zona (a través de callbacks)
    def _inj_sum(m, z, s, t):
        if not injection_terms:
            return 0.0
        return sum(term(m, z, s, t) for term in injection_terms)
    m.injection_by_zone = pyo.Expression(m.Z, m.S, m.T, rule=_inj_sum)

    def _import_sum(m, z, s, t):
        inbound = sum(m.Flow[l, s, t] for l in m.L if m.line_to[l] == z)
        outbound = sum(m.Flow[l, s, t] for l in m.L if m.line_from[l] == z)
        return inbound - outbound
    m.net_import_by_zone = pyo.Expression(m.Z, m.S, m.T, rule=_import_sum)

    # Balance nodal: inyección + importación neta == demanda
    def _balance(m, z, s, t):
        return m.injection_by_zone[z, s, t] + m.net_import_by_zone[z, s, t] == m.Demand[z, s, t]
    m.NodalBalance = pyo.Constraint(m.Z, m.S, m.T, rule=_balance)

    out.update({
        "Flow": m.Flow,
        "NodalBalance": m.NodalBalance,
    })
    return out
