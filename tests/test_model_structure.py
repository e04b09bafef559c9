import pyomo.environ as pyo
import pytest
from pyomo.common.collections import ComponentSet
from pyomo.core.expr.visitor import identify_variables

from stagecap.core.errors import ConfigurationError
from stagecap.core.model_bundle import CAPACITY_FAMILIES, OPERATION_FAMILIES
from stagecap.modeling.builder import BuildOptions, build_model

from conftest import make_demand, make_params, make_renewable, make_storage, make_thermal


def _vars_in(con):
    return ComponentSet(identify_variables(con.body))


def _zero_all(m):
    for v in m.component_data_objects(pyo.Var):
        v.set_value(0.0)


def test_single_plant_counts():
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): [50.0]}))
    m = inst.model
    # CapNew/CapTotal/CapRetire + DispatchThermal
    assert m.nvariables() == 4
    # evolution, retire limit, ceiling, dispatch limit, nodal balance
    assert m.nconstraints() == 5
    assert inst.has_operations
    assert set(inst.variables()) == set(CAPACITY_FAMILIES + OPERATION_FAMILIES)
    assert m.TotalCost.sense == pyo.minimize


def test_sets_are_exposed_on_the_instance():
    inst = build_model(
        make_params(num_stages=2),
        [make_thermal("B"), make_thermal("A")],
        [],
        [],
        make_demand({(1, 1): [1.0, 2.0], (2, 1): [1.0, 2.0]}),
    )
    assert inst.sets.thermal == ("A", "B")
    assert inst.sets.steps == (1, 2)
    assert len(inst.model.DispatchThermal) == 2 * 2 * 2


def test_zero_time_steps_builds_investment_only_model():
    inst = build_model(
        make_params(),
        [make_thermal()],
        [make_renewable()],
        [make_storage()],
        make_demand({(1, 1): []}),
    )
    m = inst.model
    assert not inst.has_operations
    for name in OPERATION_FAMILIES:
        assert m.find_component(name) is None
        assert name not in inst.variables()
    assert m.find_component("NodalBalance") is None
    assert m.find_component("StorageBalance") is None
    assert pyo.value(m.cost_oper) == 0.0
    # capacity blocks still exist
    assert len(m.CapEvolution) == 2
    assert len(m.StoCapEnergyEvolution) == 1


def test_empty_stage_zone_map_is_rejected():
    with pytest.raises(ConfigurationError, match="No stage-zone data"):
        build_model(make_params(), [make_thermal()], [], [], {})


def _satisfied(con, tol=1e-9):
    body = pyo.value(con.body)
    if con.has_lb() and body < pyo.value(con.lower) - tol:
        return False
    if con.has_ub() and body > pyo.value(con.upper) + tol:
        return False
    return True


def test_capacity_evolution_links_stages():
    inst = build_model(
        make_params(num_stages=2),
        [make_thermal(initial_capacity_mw=30.0)],
        [],
        [],
        make_demand({(1, 1): [1.0], (2, 1): [1.0]}),
    )
    m = inst.model
    _zero_all(m)
    assert m.CapTotal["Coal1", 1] in _vars_in(m.CapEvolution["Coal1", 2])

    # stage 1 starts from the existing 30 MW
    m.CapNew["Coal1", 1].set_value(5.0)
    m.CapTotal["Coal1", 1].set_value(35.0)
    assert _satisfied(m.CapEvolution["Coal1", 1])
    m.CapTotal["Coal1", 1].set_value(5.0)
    assert not _satisfied(m.CapEvolution["Coal1", 1])

    m.CapRetire["Coal1", 1].set_value(30.0)
    assert _satisfied(m.CapRetireLimit["Coal1", 1])
    m.CapRetire["Coal1", 1].set_value(31.0)
    assert not _satisfied(m.CapRetireLimit["Coal1", 1])

    m.CapTotal["Coal1", 2].set_value(101.0)
    assert not _satisfied(m.CapCeiling["Coal1", 2])


def test_storage_power_investment_charged_twice():
    st = make_storage(investment_cost_usd_per_mw_year_power=700.0, investment_cost_usd_per_mwh_year_energy=300.0)
    m = build_model(make_params(), [], [], [st], make_demand({(1, 1): [0.0]})).model
    _zero_all(m)

    m.StoCapChargeNew["Bat1", 1].set_value(1.0)
    assert pyo.value(m.cost_inv) == pytest.approx(700.0)
    m.StoCapDischargeNew["Bat1", 1].set_value(1.0)
    assert pyo.value(m.cost_inv) == pytest.approx(1400.0)
    m.StoCapEnergyNew["Bat1", 1].set_value(1.0)
    assert pyo.value(m.cost_inv) == pytest.approx(1700.0)


def test_investment_is_discounted_by_stage():
    m = build_model(
        make_params(num_stages=2, years=2, rate=0.1),
        [make_thermal(investment_cost_usd_per_mw_year=1000.0)],
        [],
        [],
        make_demand({(1, 1): [0.0], (2, 1): [0.0]}),
    ).model
    _zero_all(m)
    m.CapNew["Coal1", 2].set_value(1.0)
    assert pyo.value(m.cost_inv) == pytest.approx(1000.0 / 1.1 ** 2)


def test_operations_scaled_to_year_and_annuity():
    th = make_thermal(variable_om_cost_usd_per_mwh=4.0, fuel_cost_usd_per_mmbtu=2.0, heat_rate_mmbtu_per_mwh=3.0)
    m = build_model(make_params(years=3, rate=0.0), [th], [], [], make_demand({(1, 1): [0.0, 0.0]})).model
    _zero_all(m)
    m.DispatchThermal["Coal1", 1, 1].set_value(1.0)
    # (4 + 6) $/MWh * 1 MW * 8760/2 h * 3 undiscounted years
    assert pyo.value(m.cost_oper) == pytest.approx(10.0 * 4380.0 * 3)


def test_storage_balance_is_cyclic_within_stage():
    m = build_model(make_params(), [], [], [make_storage()], make_demand({(1, 1): [0.0, 0.0, 0.0]})).model
    first = m.StorageBalance["Bat1", 1, 1]
    assert m.StoLevel["Bat1", 1, 3] in _vars_in(first)
    assert m.StoLevel["Bat1", 1, 1] in _vars_in(m.StorageBalance["Bat1", 1, 2])


def test_nodal_balance_includes_flows_and_storage(two_zones, north_south_line):
    params = make_params(zones=two_zones, lines=[north_south_line])
    m = build_model(
        params,
        [make_thermal(zone=1)],
        [make_renewable(zone=2, profiles={(1, 1): [1.0]})],
        [make_storage(zone=2)],
        make_demand({(1, 1): [10.0], (1, 2): [20.0]}),
    ).model
    north = _vars_in(m.NodalBalance[1, 1, 1])
    south = _vars_in(m.NodalBalance[2, 1, 1])
    assert m.Flow["NS", 1, 1] in north and m.Flow["NS", 1, 1] in south
    assert m.DispatchThermal["Coal1", 1, 1] in north
    assert m.DispatchThermal["Coal1", 1, 1] not in south
    assert m.StoDischarge["Bat1", 1, 1] in south
    assert m.DispatchRenewable["Solar1", 1, 1] in south
    assert len(m.FlowUpper) == len(m.FlowLower) == 1


def test_zone_without_assets_still_gets_a_balance_row(two_zones, north_south_line):
    params = make_params(zones=two_zones, lines=[north_south_line])
    m = build_model(params, [make_thermal(zone=1)], [], [], make_demand({(1, 1): [10.0], (1, 2): [5.0]})).model
    assert (2, 1, 1) in m.NodalBalance
    _zero_all(m)
    m.Flow["NS", 1, 1].set_value(5.0)
    assert _satisfied(m.NodalBalance[2, 1, 1])
    m.Flow["NS", 1, 1].set_value(4.0)
    assert not _satisfied(m.NodalBalance[2, 1, 1])


def test_ramp_limits_are_optional():
    demand = make_demand({(1, 1): [1.0, 2.0, 3.0]})
    plain = build_model(make_params(), [make_thermal()], [], [], demand).model
    assert plain.find_component("ThermalRampUp") is None

    ramped = build_model(
        make_params(), [make_thermal()], [], [], demand, options=BuildOptions(ramp_limits=True)
    ).model
    assert len(ramped.ThermalRampUp) == 2
    assert len(ramped.ThermalRampDown) == 2
