# -*- coding: utf-8 -*-
from __future__ import annotations

import pyomo.environ as pyo

from stagecap.core.params import ModelParams


def attach_objective(m, params: ModelParams, *, oper_stage_terms=()):
    """Discounted investment plus operations.

    ``oper_stage_terms`` are per-stage Expressions of the representative-year
    operating cost (one per technology); they are scaled to a year, repeated
    over the stage with the annuity factor and discounted to the first stage.
    """
    m.df = pyo.Param(m.S, initialize=lambda m, s: params.discount[s], within=pyo.NonNegativeReals)
    m.pvf = pyo.Param(m.S, initialize=lambda m, s: params.annuity[s], within=pyo.NonNegativeReals)

    inv_gen = params.generation.inv_cost
    inv_tx = params.lines.inv_cost
    inv_energy = params.sto_energy.inv_cost
    # same per-MW cost on both power blocks
    inv_power = params.sto_charge.inv_cost

    def _cost_inv_rule(m):
        return sum(
            m.df[s] * (
                sum(inv_gen[i] * m.CapNew[i, s] for i in m.G)
                + sum(inv_tx[l] * m.TxCapNew[l, s] for l in m.L)
                + sum(
                    inv_energy[i] * m.StoCapEnergyNew[i, s]
                    + inv_power[i] * (m.StoCapChargeNew[i, s] + m.StoCapDischargeNew[i, s])
                    for i in m.ST
                )
            )
            for s in m.S
        )
    m.cost_inv = pyo.Expression(rule=_cost_inv_rule)

    if oper_stage_terms:
        scale = params.annual_scale

        def _cost_oper_rule(m):
            return sum(
                m.df[s] * m.pvf[s] * scale * sum(term[s] for term in oper_stage_terms)
                for s in m.S
            )
        m.cost_oper = pyo.Expression(rule=_cost_oper_rule)
    else:
        m.cost_oper = pyo.Expression(expr=0.0)

    m.TotalCost = pyo.Objective(expr=m.cost_inv + m.cost_oper, sense=pyo.minimize)
    return {"cost_inv": m.cost_inv, "cost_oper": m.cost_oper, "TotalCost": m.TotalCost}
