# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pyomo.environ as pyo
from pyomo.common.errors import ApplicationError
from pyomo.opt import SolverFactory, TerminationCondition

from stagecap.core.errors import SolverUnavailableError
from stagecap.core.model_bundle import ProblemInstance

log = logging.getLogger(__name__)

DEFAULT_SOLVER = "appsi_highs"

_SOLVED = {
    TerminationCondition.optimal,
    TerminationCondition.globallyOptimal,
    TerminationCondition.locallyOptimal,
    TerminationCondition.feasible,
}


@dataclass(frozen=True)
class SolveOutcome:
    status: str  # termination condition as text, e.g. "optimal", "infeasible"
    termination: TerminationCondition
    objective: Optional[float]
    solved: bool


def solver_available(solver_name: str = DEFAULT_SOLVER) -> bool:
    try:
        return bool(SolverFactory(solver_name).available(exception_flag=False))
    except (ApplicationError, RuntimeError) as exc:
        log.debug("Solver %s not usable: %s", solver_name, exc)
        return False


def solve_instance(
    instance: ProblemInstance,
    solver_name: str = DEFAULT_SOLVER,
    time_limit: Optional[float] = None,
    tee: bool = False,
) -> SolveOutcome:
    """Hand the model to the solver and report how it ended.

    Infeasible or unbounded problems come back as a status; the solution is
    only loaded into the model when one exists.
    """
    if not solver_available(solver_name):
        raise SolverUnavailableError(f"Solver '{solver_name}' is not available.")
    opt = SolverFactory(solver_name)

    kwargs = {"tee": tee, "load_solutions": False}
    if time_limit is not None:
        kwargs["timelimit"] = time_limit
    log.info("Solving with %s (time limit: %s)", solver_name, time_limit)
    results = opt.solve(instance.model, **kwargs)

    term = results.solver.termination_condition
    has_solution = term in _SOLVED or (
        term == TerminationCondition.maxTimeLimit and len(results.solution) > 0
    )
    objective = None
    if has_solution:
        instance.model.solutions.load_from(results)
        objective = float(pyo.value(instance.model.TotalCost))
        log.info("Termination: %s, objective: %.6g", term, objective)
    else:
        log.warning("Termination: %s, no solution loaded.", term)

    return SolveOutcome(
        status=str(term.value),
        termination=term,
        objective=objective,
        solved=term in _SOLVED,
    )
