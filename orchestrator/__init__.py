"""
Stable Treasury v1.0 — Orchestrator
====================================

Cola tudo: Connectors + Treasury + Executor + Persistence.
"""

from .orchestrator import Orchestrator, BalancingAttempt, BalancingState
from .randomness import RandomSource, SystemRandomSource, FixedSeedSource, draw_limit
from .lifecycle import (
    load_config, setup_logging, parse_pools, resolve_settings,
    build_connector, build_orchestrator,
)

__all__ = [
    "Orchestrator", "BalancingAttempt", "BalancingState",
    "RandomSource", "SystemRandomSource", "FixedSeedSource", "draw_limit",
    "load_config", "setup_logging", "parse_pools", "resolve_settings",
    "build_connector", "build_orchestrator",
]
