# -*- coding: utf-8 -*-
"""Stage-to-stage capacity bookkeeping shared by every expandable asset family.

For an asset ``i`` and stage ``s`` (predecessor of the first stage is the
existing capacity):

    Total[i,s]  == Total[i,s-1] + New[i,s] - Retire[i,s]
    Retire[i,s] <= Total[i,s-1]
    Total[i,s]  <= ceiling[i]
"""

from __future__ import annotations

from typing import Dict

from pyomo.environ import Constraint, NonNegativeReals, Param, Var

from stagecap.core.params import CapacityBlockParams


def attach_capacity_block(m, prefix: str, assets, block: CapacityBlockParams) -> Dict[str, Var]:
    """Declare ``<prefix>New/Total/Retire`` over ``assets x m.S`` plus their constraints.

    ``assets`` is a Pyomo Set already attached to ``m``; ``m.S`` must exist.
    Returns the three variables keyed by suffix.
    """
    first = m.S.first() if len(m.S) else None

    init = Param(assets, initialize=lambda m, i: block.initial[i], within=NonNegativeReals)
    ceil = Param(assets, initialize=lambda m, i: block.ceiling[i], within=NonNegativeReals)
    new = Var(assets, m.S, within=NonNegativeReals)
    total = Var(assets, m.S, within=NonNegativeReals)
    retire = Var(assets, m.S, within=NonNegativeReals)
    m.add_component(f"{prefix}Initial", init)
    m.add_component(f"{prefix}Max", ceil)
    m.add_component(f"{prefix}New", new)
    m.add_component(f"{prefix}Total", total)
    m.add_component(f"{prefix}Retire", retire)

    def _previous(i, s):
        return init[i] if s == first else total[i, s - 1]

    def _evolution(m, i, s):
        return total[i, s] == _previous(i, s) + new[i, s] - retire[i, s]

    def _retire_limit(m, i, s):
        return retire[i, s] <= _previous(i, s)

    def _ceiling(m, i, s):
        return total[i, s] <= ceil[i]

    m.add_component(f"{prefix}Evolution", Constraint(assets, m.S, rule=_evolution))
    m.add_component(f"{prefix}RetireLimit", Constraint(assets, m.S, rule=_retire_limit))
    m.add_component(f"{prefix}Ceiling", Constraint(assets, m.S, rule=_ceiling))

    return {"New": new, "Total": total, "Retire": retire}
