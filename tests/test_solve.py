import pytest

from stagecap.core.errors import SolverUnavailableError
from stagecap.modeling.builder import build_model
import stagecap.modeling.solver as solver_mod
from stagecap.modeling.solver import solve_instance, solver_available

from conftest import make_demand, make_params, make_renewable, make_storage, make_thermal, requires_highs

TOL = 1e-6


def test_unknown_solver_is_reported():
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): [50.0]}))
    with pytest.raises(SolverUnavailableError):
        solve_instance(inst, solver_name="no_such_solver_for_stagecap")


class _BrokenSolver:
    def __init__(self, exc):
        self.exc = exc

    def available(self, exception_flag=True):
        raise self.exc


def test_unknown_solver_name_is_not_available():
    assert not solver_available("no_such_solver_for_stagecap")


def test_solver_runtime_failure_means_unavailable(monkeypatch):
    monkeypatch.setattr(solver_mod, "SolverFactory", lambda name: _BrokenSolver(RuntimeError("no license")))
    assert not solver_available("appsi_highs")


def test_unexpected_plugin_errors_propagate(monkeypatch):
    monkeypatch.setattr(solver_mod, "SolverFactory", lambda name: _BrokenSolver(KeyError("bad option")))
    with pytest.raises(KeyError):
        solver_available("appsi_highs")


@requires_highs
def test_single_plant_end_to_end():
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): [50.0]}))
    outcome = solve_instance(inst)

    assert outcome.solved
    assert outcome.status == "optimal"
    assert outcome.objective == pytest.approx(50 * 90000)
    assert inst.value("CapNew", "Coal1", 1) == pytest.approx(50.0)
    assert inst.value("CapTotal", "Coal1", 1) == pytest.approx(50.0)
    assert inst.value("DispatchThermal", "Coal1", 1, 1) == pytest.approx(50.0)


@requires_highs
def test_insufficient_capacity_is_a_status_not_an_error():
    inst = build_model(make_params(), [make_thermal(capacity=10.0)], [], [], make_demand({(1, 1): [50.0]}))
    outcome = solve_instance(inst, time_limit=60)

    assert not outcome.solved
    assert outcome.status in ("infeasible", "infeasibleOrUnbounded")
    assert outcome.objective is None


@requires_highs
def test_capacity_recursion_and_retirement_bound():
    thermal = [
        make_thermal("Coal1", capacity=200.0, initial_capacity_mw=80.0, investment_cost_usd_per_mw_year=1000.0),
        make_thermal("Gas1", capacity=200.0, initial_capacity_mw=0.0, investment_cost_usd_per_mw_year=500.0,
                     variable_om_cost_usd_per_mwh=1.0),
    ]
    inst = build_model(
        make_params(num_stages=3, years=5, rate=0.05),
        thermal,
        [],
        [],
        make_demand({(1, 1): [50.0], (2, 1): [120.0], (3, 1): [150.0]}),
    )
    outcome = solve_instance(inst)
    assert outcome.solved

    v = inst.value
    for p in inst.sets.generation:
        prev = inst.params.generation.initial[p]
        for s in inst.sets.stages:
            total = v("CapTotal", p, s)
            assert total == pytest.approx(prev + v("CapNew", p, s) - v("CapRetire", p, s), abs=TOL)
            assert v("CapRetire", p, s) <= prev + TOL
            assert total <= 200.0 + TOL
            prev = total
    for s, need in ((1, 50.0), (2, 120.0), (3, 150.0)):
        assert sum(v("CapTotal", p, s) for p in inst.sets.generation) >= need - TOL


@requires_highs
def test_renewable_conservation():
    solar = make_renewable("Solar1", capacity=100.0, initial_capacity_mw=100.0, profiles={(1, 1): [0.2, 0.9]})
    inst = build_model(
        make_params(),
        [make_thermal(variable_om_cost_usd_per_mwh=50.0)],
        [solar],
        [],
        make_demand({(1, 1): [30.0, 40.0]}),
    )
    assert solve_instance(inst).solved

    for t, af in ((1, 0.2), (2, 0.9)):
        dispatched = inst.value("DispatchRenewable", "Solar1", 1, t)
        curtailed = inst.value("CurtailRenewable", "Solar1", 1, t)
        cap = inst.value("CapTotal", "Solar1", 1)
        assert dispatched + curtailed == pytest.approx(cap * af, abs=TOL)
    # the second step has more sun than load
    assert inst.value("DispatchRenewable", "Solar1", 1, 2) == pytest.approx(40.0, abs=TOL)


@requires_highs
def test_storage_single_step_cycle():
    bat = make_storage(initial_storage_capacity_mwh=40.0, initial_charge_power_mw=10.0, initial_discharge_power_mw=10.0)
    inst = build_model(make_params(), [make_thermal()], [], [bat], make_demand({(1, 1): [20.0]}))
    assert solve_instance(inst).solved

    charge = inst.value("StoCharge", "Bat1", 1, 1)
    discharge = inst.value("StoDischarge", "Bat1", 1, 1)
    assert charge * 0.9 == pytest.approx(discharge / 0.9, abs=TOL)


@requires_highs
def test_storage_shifts_energy_between_steps():
    # cheap solar at noon, expensive thermal at night; existing storage moves the surplus
    solar = make_renewable("Solar1", capacity=100.0, initial_capacity_mw=100.0, profiles={(1, 1): [1.0, 0.0]})
    bat = make_storage(
        charge_efficiency=1.0, discharge_efficiency=1.0,
        initial_storage_capacity_mwh=40.0, initial_charge_power_mw=10.0, initial_discharge_power_mw=10.0,
    )
    inst = build_model(
        make_params(),
        [make_thermal(capacity=50.0, initial_capacity_mw=50.0, variable_om_cost_usd_per_mwh=100.0)],
        [solar],
        [bat],
        make_demand({(1, 1): [20.0, 20.0]}),
    )
    assert solve_instance(inst).solved
    assert inst.value("StoCharge", "Bat1", 1, 1) == pytest.approx(10.0, abs=TOL)
    assert inst.value("StoDischarge", "Bat1", 1, 2) == pytest.approx(10.0, abs=TOL)
    assert inst.value("DispatchThermal", "Coal1", 1, 2) == pytest.approx(10.0, abs=TOL)


@requires_highs
def test_nodal_balance_closure(two_zones, north_south_line):
    params = make_params(zones=two_zones, lines=[north_south_line])
    inst = build_model(
        params,
        [make_thermal(zone=1)],
        [],
        [],
        make_demand({(1, 1): [10.0, 15.0], (1, 2): [20.0, 25.0]}),
    )
    outcome = solve_instance(inst)
    assert outcome.solved

    v = inst.value
    for t in inst.sets.steps:
        flow = v("Flow", "NS", 1, t)
        north = v("DispatchThermal", "Coal1", 1, t) - flow
        south = flow
        assert north == pytest.approx(inst.params.demand[(1, 1, t)], abs=TOL)
        assert south == pytest.approx(inst.params.demand[(2, 1, t)], abs=TOL)
        # flow terms cancel across the network
        total_demand = inst.params.demand[(1, 1, t)] + inst.params.demand[(2, 1, t)]
        assert v("DispatchThermal", "Coal1", 1, t) == pytest.approx(total_demand, abs=TOL)
    assert inst.value("TxCapTotal", "NS", 1) == pytest.approx(25.0, abs=TOL)


@requires_highs
def test_operating_cost_is_annualised_and_discounted():
    th = make_thermal(initial_capacity_mw=100.0, variable_om_cost_usd_per_mwh=10.0)
    inst = build_model(
        make_params(num_stages=2, years=2, rate=0.1),
        [th],
        [],
        [],
        make_demand({(1, 1): [50.0, 50.0], (2, 1): [50.0, 50.0]}),
    )
    outcome = solve_instance(inst)
    pvf = 1 + 1 / 1.1
    per_stage = 10.0 * 50.0 * 2 * (8760.0 / 2)
    expected = per_stage * pvf * (1 + 1 / 1.1 ** 2)
    assert outcome.objective == pytest.approx(expected)


@requires_highs
def test_investment_only_model_solves():
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): []}))
    outcome = solve_instance(inst)
    assert outcome.solved
    assert outcome.objective == pytest.approx(0.0, abs=TOL)
