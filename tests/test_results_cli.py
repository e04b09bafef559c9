import json

import pytest

from stagecap.export.results import FRAME_COLUMNS, export_results, format_report, result_frames
from stagecap.main import main
from stagecap.modeling.builder import build_model
from stagecap.modeling.solver import solve_instance

from conftest import make_demand, make_params, make_thermal, requires_highs, write_csv


def _write_case(root, thermal_capacity=100.0):
    write_csv(root / "zones.csv", ["id", "name"], [(1, "North")])
    write_csv(
        root / "lines.csv",
        ["id", "from_zone_id", "to_zone_id", "reactance_pu", "thermal_limit_mw",
         "length_km", "investment_cost_usd_per_mw_year", "initial_capacity_mw"],
        [],
    )
    write_csv(
        root / "thermal.csv",
        ["name", "capacity_mw", "min_stable_level_mw", "ramp_up_mw_per_hr", "ramp_down_mw_per_hr",
         "startup_cost_usd", "shutdown_cost_usd", "variable_om_cost_usd_per_mwh", "fuel_cost_usd_per_mmbtu",
         "heat_rate_mmbtu_per_mwh", "investment_cost_usd_per_mw_year", "zone_id", "initial_capacity_mw"],
        [("Coal1", thermal_capacity, 0, 100, 100, 0, 0, 0, 0, 0, 90000, 1, 0)],
    )
    write_csv(
        root / "renewables.csv",
        ["name", "capacity_mw", "variable_om_cost_usd_per_mwh", "curtailment_cost_usd_per_mwh",
         "investment_cost_usd_per_mw_year", "zone_id", "initial_capacity_mw"],
        [],
    )
    write_csv(
        root / "storage.csv",
        ["name", "zone_id", "storage_capacity_mwh", "charge_power_mw", "discharge_power_mw",
         "charge_efficiency", "discharge_efficiency", "soc_min_fraction", "soc_max_fraction",
         "initial_storage_capacity_mwh", "initial_charge_power_mw", "initial_discharge_power_mw",
         "variable_om_cost_charge_usd_per_mwh", "variable_om_cost_discharge_usd_per_mwh",
         "investment_cost_usd_per_mw_year_power", "investment_cost_usd_per_mwh_year_energy"],
        [],
    )
    (root / "stage1").mkdir()
    write_csv(root / "stage1" / "demand_data.csv", ["North"], [(50,)])
    config = {
        "project_parameters": {"num_stages": 1, "years_per_stage": 1, "discount_rate": 0.0},
        "stage_data_paths": ["stage1"],
        "global_data_paths": {
            "zones": "zones.csv",
            "transmission_lines": "lines.csv",
            "thermal_plants": "thermal.csv",
            "renewable_plants_definitions": "renewables.csv",
            "storage_units": "storage.csv",
        },
    }
    path = root / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


def test_report_before_solving():
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): [50.0]}))
    assert "not solved" in format_report(inst, None)


def test_cli_no_solve(tmp_path, capsys):
    config = _write_case(tmp_path)
    assert main(["--config", str(config), "--no-solve", "--log-level", "WARNING"]) == 0
    assert "MODEL RESULTS" in capsys.readouterr().out


def test_cli_bad_config_exit_code(tmp_path):
    assert main(["--config", str(tmp_path / "missing.json")]) == 2


def test_cli_stage_count_mismatch(tmp_path):
    config = _write_case(tmp_path)
    raw = json.loads(config.read_text(encoding="utf-8"))
    raw["project_parameters"]["num_stages"] = 2
    config.write_text(json.dumps(raw), encoding="utf-8")
    assert main(["--config", str(config), "--no-solve"]) == 2


@requires_highs
def test_frames_and_report_after_solve(tmp_path):
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): [50.0]}))
    outcome = solve_instance(inst)
    frames = result_frames(inst)

    assert set(frames) == set(FRAME_COLUMNS)
    for name, df in frames.items():
        assert list(df.columns) == FRAME_COLUMNS[name]
    cap = frames["generation_capacity"]
    assert cap.loc[0, "plant"] == "Coal1"
    assert cap.loc[0, "total_mw"] == pytest.approx(50.0)
    assert frames["flows"].empty
    costs = frames["cost_summary"].set_index("component")["value_usd"]
    assert costs["total"] == pytest.approx(outcome.objective)

    report = format_report(inst, outcome)
    assert "Termination Status:" in report and "optimal" in report
    assert "Dispatch Summary (Thermal" in report

    written = export_results(inst, tmp_path / "out")
    assert sorted(p.name for p in written) == sorted(f"{n}.csv" for n in FRAME_COLUMNS)
    assert all(p.is_file() for p in written)


@requires_highs
def test_report_for_infeasible_run():
    inst = build_model(make_params(), [make_thermal(capacity=10.0)], [], [], make_demand({(1, 1): [50.0]}))
    report = format_report(inst, solve_instance(inst))
    assert "not available" in report


@requires_highs
def test_report_for_investment_only_run():
    inst = build_model(make_params(), [make_thermal()], [], [], make_demand({(1, 1): []}))
    report = format_report(inst, solve_instance(inst))
    assert "investment-only" in report


@requires_highs
def test_cli_end_to_end(tmp_path, capsys):
    config = _write_case(tmp_path)
    out_dir = tmp_path / "results"
    assert main(["--config", str(config), "--out-dir", str(out_dir)]) == 0
    assert "4,500,000.00" in capsys.readouterr().out
    assert (out_dir / "generation_capacity.csv").is_file()


@requires_highs
def test_cli_infeasible_exit_code(tmp_path):
    config = _write_case(tmp_path, thermal_capacity=10.0)
    assert main(["--config", str(config)]) == 1


def test_cli_empty_demand_file_exit_code(tmp_path):
    config = _write_case(tmp_path)
    (tmp_path / "stage1" / "demand_data.csv").write_text("", encoding="utf-8")
    assert main(["--config", str(config), "--no-solve"]) == 2
