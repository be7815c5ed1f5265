"""
Stable Treasury v1.0 - Core
============================

Núcleo compartilhado: constantes, modelos de dados, ações e conversões.
NENHUMA dependência de I/O, rede ou libs externas.
"""

from .constants import (
    VERSION,
    Network,
    NETWORK_PRESETS,
    NATIVE_DECIMALS,
    STABLE_DECIMALS,
    SECONDARY_DECIMALS,
    CACHE_CAPACITY,
    SWAP_SLIPPAGE,
)
from .actions import Action, ActionKind
from .models import (
    RateSample,
    PriceData,
    ReserveSnapshot,
    PoolConfig,
    StablePoolInfo,
    SwapAction,
    ExecutionReport,
)
from .utils import to_float, to_fixed, price_to_rate

__all__ = [
    "VERSION", "Network", "NETWORK_PRESETS",
    "NATIVE_DECIMALS", "STABLE_DECIMALS", "SECONDARY_DECIMALS",
    "CACHE_CAPACITY", "SWAP_SLIPPAGE",
    "Action", "ActionKind",
    "RateSample", "PriceData", "ReserveSnapshot", "PoolConfig",
    "StablePoolInfo", "SwapAction", "ExecutionReport",
    "to_float", "to_fixed", "price_to_rate",
]
