# -*- coding: utf-8 -*-
"""Exception hierarchy shared by every stagecap package."""

from __future__ import annotations


class StagecapError(Exception):
    """Root of all errors raised by stagecap."""


class EntityValidationError(StagecapError, ValueError):
    """A domain record violates one of its invariants."""


class ConfigurationError(StagecapError):
    """Structural problem with the run: config, stage data or references."""


class MissingDataError(ConfigurationError):
    """Demand or availability data absent while the policy forbids zero fill."""


class SolverUnavailableError(StagecapError):
    """The requested solver is not installed or not registered with Pyomo."""
