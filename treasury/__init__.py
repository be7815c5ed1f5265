"""
Stable Treasury v1.0 - Treasury (Cérebro)
==========================================

Cache de cotações, coleta de reservas e modelo de decisão.
"""

from .decision import decide
from .errors import (
    TreasuryError, NotWarmedUp, InvalidPoolShape, InvalidRange, PoolNotConfigured,
)
from .rate_cache import RateCache
from .snapshot import DecisionInputs, ReserveSnapshotCollector
from .state import TreasuryState
from .warmup import run_warmup, run_warmup_loop

__all__ = [
    "decide",
    "TreasuryError", "NotWarmedUp", "InvalidPoolShape", "InvalidRange", "PoolNotConfigured",
    "RateCache",
    "DecisionInputs", "ReserveSnapshotCollector",
    "TreasuryState",
    "run_warmup", "run_warmup_loop",
]
