# -*- coding: utf-8 -*-
"""Solved values as pandas frames, a text report and CSV export.

Frames are built from the index sets kept in the ``ProblemInstance``; the
model is only queried for values.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd
import pyomo.environ as pyo

from stagecap.core.model_bundle import ProblemInstance
from stagecap.modeling.solver import SolveOutcome

log = logging.getLogger(__name__)

FRAME_COLUMNS: Dict[str, List[str]] = {
    "generation_capacity": ["plant", "technology", "zone_id", "stage", "new_mw", "total_mw", "retired_mw"],
    "transmission_capacity": ["line", "from_zone_id", "to_zone_id", "stage", "new_mw", "total_mw", "retired_mw"],
    "storage_capacity": [
        "unit", "zone_id", "stage",
        "energy_new_mwh", "energy_total_mwh", "energy_retired_mwh",
        "charge_new_mw", "charge_total_mw", "charge_retired_mw",
        "discharge_new_mw", "discharge_total_mw", "discharge_retired_mw",
    ],
    "thermal_dispatch": ["plant", "stage", "t", "dispatch_mw"],
    "renewable_dispatch": ["plant", "stage", "t", "dispatch_mw", "curtailment_mw"],
    "storage_operation": ["unit", "stage", "t", "charge_mw", "discharge_mw", "level_mwh"],
    "flows": ["line", "stage", "t", "flow_mw"],
    "cost_summary": ["component", "value_usd"],
}


def _to_df(rows: Iterable[dict], columns: List[str]) -> pd.DataFrame:
    df = pd.DataFrame(list(rows))
    for c in columns:
        if c not in df.columns:
            df[c] = np.nan
    return df.loc[:, columns].reset_index(drop=True)


def _capacity_rows(inst: ProblemInstance) -> Iterator[dict]:
    sets, v = inst.sets, inst.value
    for p in sets.generation:
        tech = "thermal" if p in sets.thermal else "renewable"
        for s in sets.stages:
            yield {
                "plant": p, "technology": tech, "zone_id": inst.params.zone_of[p], "stage": s,
                "new_mw": v("CapNew", p, s), "total_mw": v("CapTotal", p, s), "retired_mw": v("CapRetire", p, s),
            }


def _line_rows(inst: ProblemInstance) -> Iterator[dict]:
    v = inst.value
    for l in inst.sets.lines:
        for s in inst.sets.stages:
            yield {
                "line": l, "from_zone_id": inst.params.line_from[l], "to_zone_id": inst.params.line_to[l],
                "stage": s, "new_mw": v("TxCapNew", l, s), "total_mw": v("TxCapTotal", l, s),
                "retired_mw": v("TxCapRetire", l, s),
            }


def _storage_rows(inst: ProblemInstance) -> Iterator[dict]:
    v = inst.value
    for u in inst.sets.storage:
        for s in inst.sets.stages:
            row = {"unit": u, "zone_id": inst.params.zone_of[u], "stage": s}
            for block, unit_label, prefix in (
                ("Energy", "mwh", "energy"), ("Charge", "mw", "charge"), ("Discharge", "mw", "discharge"),
            ):
                row[f"{prefix}_new_{unit_label}"] = v(f"StoCap{block}New", u, s)
                row[f"{prefix}_total_{unit_label}"] = v(f"StoCap{block}Total", u, s)
                row[f"{prefix}_retired_{unit_label}"] = v(f"StoCap{block}Retire", u, s)
            yield row


def _timed_rows(inst: ProblemInstance, assets, key: str, fields: Tuple[Tuple[str, str], ...]) -> Iterator[dict]:
    if not inst.has_operations:
        return
    for a in assets:
        for s in inst.sets.stages:
            for t in inst.sets.steps:
                row = {key: a, "stage": s, "t": t}
                for col, family in fields:
                    row[col] = inst.value(family, a, s, t)
                yield row


def cost_breakdown(inst: ProblemInstance) -> Dict[str, float]:
    m = inst.model
    inv = float(pyo.value(m.cost_inv))
    oper = float(pyo.value(m.cost_oper))
    return {"investment": inv, "operations": oper, "total": inv + oper}


def result_frames(inst: ProblemInstance) -> Dict[str, pd.DataFrame]:
    sets = inst.sets
    rows = {
        "generation_capacity": _capacity_rows(inst),
        "transmission_capacity": _line_rows(inst),
        "storage_capacity": _storage_rows(inst),
        "thermal_dispatch": _timed_rows(inst, sets.thermal, "plant", (("dispatch_mw", "DispatchThermal"),)),
        "renewable_dispatch": _timed_rows(
            inst, sets.renewable, "plant",
            (("dispatch_mw", "DispatchRenewable"), ("curtailment_mw", "CurtailRenewable")),
        ),
        "storage_operation": _timed_rows(
            inst, sets.storage, "unit",
            (("charge_mw", "StoCharge"), ("discharge_mw", "StoDischarge"), ("level_mwh", "StoLevel")),
        ),
        "flows": _timed_rows(inst, sets.lines, "line", (("flow_mw", "Flow"),)),
        "cost_summary": (
            {"component": k, "value_usd": val} for k, val in cost_breakdown(inst).items()
        ),
    }
    return {name: _to_df(r, FRAME_COLUMNS[name]) for name, r in rows.items()}


def _section(title: str) -> List[str]:
    return ["", f"--- {title} ---"]


def _table(df: pd.DataFrame, value_cols: List[str], key: str) -> List[str]:
    """One block per stage; rows where every value is ~0 are omitted."""
    lines: List[str] = []
    for s, chunk in df.groupby("stage", sort=True):
        lines.append(f"  Stage: {s}")
        shown = chunk[~np.isclose(chunk[value_cols].to_numpy(dtype=float), 0.0).all(axis=1)]
        if shown.empty:
            lines.append("    (all zero)")
            continue
        lines.append(shown[[key] + value_cols].to_string(index=False, float_format=lambda x: f"{x:,.2f}"))
    return lines


def _averages(df: pd.DataFrame, key: str, cols: List[str]) -> pd.DataFrame:
    return df.groupby([key, "stage"], as_index=False)[cols].mean()


def format_report(inst: ProblemInstance, outcome: Optional[SolveOutcome]) -> str:
    bar = "=" * 60
    lines = [bar, "MODEL RESULTS", bar]
    if outcome is None:
        lines += ["Model built, not solved.", bar]
        return "\n".join(lines)

    lines.append(f"{'Termination Status:':<25} {outcome.status}")
    if outcome.objective is None:
        lines.append("Objective Value: not available.")
        if outcome.status in ("infeasible", "infeasibleOrUnbounded", "unbounded"):
            lines.append("Model was infeasible or unbounded; check capacity ceilings against demand.")
        lines.append(bar)
        return "\n".join(lines)

    costs = cost_breakdown(inst)
    lines.append(f"{'Objective Value:':<25} {outcome.objective:,.2f}")
    lines.append(f"{'  Investment:':<25} {costs['investment']:,.2f}")
    lines.append(f"{'  Operations:':<25} {costs['operations']:,.2f}")

    frames = result_frames(inst)
    sets = inst.sets
    if sets.generation:
        lines += _section("Generation Capacities (MW)")
        lines += _table(frames["generation_capacity"], ["new_mw", "total_mw", "retired_mw"], "plant")
    if sets.lines:
        lines += _section("Transmission Capacities (MW)")
        lines += _table(frames["transmission_capacity"], ["new_mw", "total_mw", "retired_mw"], "line")
    if sets.storage:
        lines += _section("Storage Capacities")
        lines += _table(
            frames["storage_capacity"],
            ["energy_total_mwh", "charge_total_mw", "discharge_total_mw"],
            "unit",
        )

    if not inst.has_operations:
        lines += ["", "No time steps: investment-only model, no dispatch to report."]
        lines.append(bar)
        return "\n".join(lines)

    if sets.thermal:
        lines += _section("Dispatch Summary (Thermal, average MW)")
        avg = _averages(frames["thermal_dispatch"], "plant", ["dispatch_mw"])
        lines += _table(avg, ["dispatch_mw"], "plant")
    if sets.renewable:
        lines += _section("Dispatch Summary (Renewable, average MW)")
        avg = _averages(frames["renewable_dispatch"], "plant", ["dispatch_mw", "curtailment_mw"])
        lines += _table(avg, ["dispatch_mw", "curtailment_mw"], "plant")
    if sets.storage:
        lines += _section("Storage Operations Summary (average)")
        avg = _averages(frames["storage_operation"], "unit", ["charge_mw", "discharge_mw", "level_mwh"])
        lines += _table(avg, ["charge_mw", "discharge_mw", "level_mwh"], "unit")
    if sets.lines:
        lines += _section("Flow Summary (average MW)")
        avg = _averages(frames["flows"], "line", ["flow_mw"])
        lines += _table(avg, ["flow_mw"], "line")

    lines.append(bar)
    return "\n".join(lines)


def _safe_to_csv(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def export_results(inst: ProblemInstance, out_dir: Path) -> List[Path]:
    """Write every result frame to ``out_dir/<name>.csv``."""
    out_dir = Path(out_dir)
    written: List[Path] = []
    for name, df in result_frames(inst).items():
        path = out_dir / f"{name}.csv"
        _safe_to_csv(df, path)
        written.append(path)
    log.info("Wrote %d result files to %s", len(written), out_dir)
    return written
