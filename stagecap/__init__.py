"""Multi-stage electric capacity expansion planning on Pyomo."""

from stagecap.core.model_bundle import ProblemInstance
from stagecap.modeling.builder import BuildOptions, build_model
from stagecap.modeling.solver import SolveOutcome, solve_instance

__version__ = "0.1.0"

__all__ = ["build_model", "BuildOptions", "ProblemInstance", "solve_instance", "SolveOutcome"]
