# -*- coding: utf-8 -*-
"""Discounting helpers for stage-based cost streams.

A stage spans ``years_per_stage`` years. Investment decided in stage ``s``
is valued at the start of that stage, while operating costs of the
representative year are repeated every year of the stage and brought back to
the stage start with an annuity factor.
"""

from __future__ import annotations

from typing import Dict, Iterable


def discount_factor(rate: float, years_per_stage: int, stage: int) -> float:
    """``(1+r)^-((s-1)*Y)``; stage 1 is undiscounted."""
    return (1.0 + rate) ** (-(stage - 1) * years_per_stage)


def annuity_factor(rate: float, years_per_stage: int) -> float:
    """Present value at stage start of one unit paid every year of the stage."""
    return sum((1.0 + rate) ** (-(yr - 1)) for yr in range(1, years_per_stage + 1))


def discount_table(rate: float, years_per_stage: int, stages: Iterable[int]) -> Dict[int, float]:
    return {s: discount_factor(rate, years_per_stage, s) for s in stages}


def annuity_table(rate: float, years_per_stage: int, stages: Iterable[int]) -> Dict[int, float]:
    # same value for every stage while years_per_stage is uniform
    pvf = annuity_factor(rate, years_per_stage)
    return {s: pvf for s in stages}
