# -*- coding: utf-8 -*-
from __future__ import annotations

from pyomo.environ import Any, Constraint, Expression, NonNegativeReals, Param, Var

from stagecap.core.capacity import attach_capacity_block
from stagecap.core.params import ModelParams


def attach_ess_to_model(m, params: ModelParams, *, operations: bool = True):
    """
    Storage units as three capacity blocks (energy, charge power, discharge
    power) plus, when ``operations`` is set, the hourly charge/discharge/level
    variables over ``m.ST x m.S x m.T``.

    Requires on the model:
      - m.ST, m.S, m.Z and, for operations, m.T
    """
    # ---------------- Capacidad ----------------
    energy = attach_capacity_block(m, "StoCapEnergy", m.ST, params.sto_energy)
    charge = attach_capacity_block(m, "StoCapCharge", m.ST, params.sto_charge)
    discharge = attach_capacity_block(m, "StoCapDischarge", m.ST, params.sto_discharge)
    out = {
        "StoCapEnergyNew": energy["New"],
        "StoCapChargeNew": charge["New"],
        "StoCapDischargeNew": discharge["New"],
    }
    if not operations:
        return out

    # ---------------- Parámetros ----------------
    m.sto_zone = Param(m.ST, initialize=lambda m, i: params.zone_of[i], within=Any)
    m.sto_effc = Param(m.ST, initialize=lambda m, i: params.sto_eff_charge[i], within=NonNegativeReals)
    m.sto_effd = Param(m.ST, initialize=lambda m, i: params.sto_eff_discharge[i], within=NonNegativeReals)
    m.sto_soc_min = Param(m.ST, initialize=lambda m, i: params.sto_soc_min[i], within=NonNegativeReals)
    m.sto_soc_max = Param(m.ST, initialize=lambda m, i: params.sto_soc_max[i], within=NonNegativeReals)
    m.sto_vomc = Param(m.ST, initialize=lambda m, i: params.sto_vom_charge[i], within=NonNegativeReals)
    m.sto_vomd = Param(m.ST, initialize=lambda m, i: params.sto_vom_discharge[i], within=NonNegativeReals)

    # ---------------- Variables ----------------
    m.StoCharge = Var(m.ST, m.S, m.T, within=NonNegativeReals)  # MW
    m.StoDischarge = Var(m.ST, m.S, m.T, within=NonNegativeReals)  # MW
    m.StoLevel = Var(m.ST, m.S, m.T, within=NonNegativeReals)  # MWh

    # ---------------- Límites potencia ----------------
    def _ch_hi(m, i, s, t):
        return m.StoCharge[i, s, t] <= m.StoCapChargeTotal[i, s]
    m.StorageChargeLimit = Constraint(m.ST, m.S, m.T, rule=_ch_hi)

    def _dis_hi(m, i, s, t):
        return m.StoDischarge[i, s, t] <= m.StoCapDischargeTotal[i, s]
    m.StorageDischargeLimit = Constraint(m.ST, m.S, m.T, rule=_dis_hi)

    # ---------------- Nivel de energía ----------------
    def _soc_lo(m, i, s, t):
        return m.StoLevel[i, s, t] >= m.StoCapEnergyTotal[i, s] * m.sto_soc_min[i]
    m.StorageLevelMin = Constraint(m.ST, m.S, m.T, rule=_soc_lo)

    def _soc_hi(m, i, s, t):
        return m.StoLevel[i, s, t] <= m.StoCapEnergyTotal[i, s] * m.sto_soc_max[i]
    m.StorageLevelMax = Constraint(m.ST, m.S, m.T, rule=_soc_hi)

    # cyclic within a stage: the first step follows the last one
    t_first, t_last = m.T.first(), m.T.last()

    def _soc_balance(m, i, s, t):
        t_prev = t_last if t == t_first else t - 1
        return m.StoLevel[i, s, t] == (
            m.StoLevel[i, s, t_prev]
            + m.StoCharge[i, s, t] * m.sto_effc[i]
            - m.StoDischarge[i, s, t] / m.sto_effd[i]
        )
    m.StorageBalance = Constraint(m.ST, m.S, m.T, rule=_soc_balance)

    # ---------------- Inyección neta por zona ----------------
    def _inj_zone(m, z, s, t):
        return sum(
            m.StoDischarge[i, s, t] - m.StoCharge[i, s, t]
            for i in m.ST if m.sto_zone[i] == z
        )
    m.net_sto_by_zone = Expression(m.Z, m.S, m.T, rule=_inj_zone)

    # ---------------- Costos VOM ----------------
    def _cost_stage(m, s):
        return sum(
            m.sto_vomc[i] * m.StoCharge[i, s, t] + m.sto_vomd[i] * m.StoDischarge[i, s, t]
            for i in m.ST for t in m.T
        )
    m.cost_sto_oper_stage = Expression(m.S, rule=_cost_stage)

    out.update({
        "net_sto_by_zone": m.net_sto_by_zone,
        "cost_sto_oper_stage": m.cost_sto_oper_stage,
    })
    return out
