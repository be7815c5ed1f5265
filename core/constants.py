"""
Stable Treasury v1.0 - Constantes e Enums Globais
==================================================

Definições imutáveis compartilhadas por todos os módulos.
NENHUMA dependência de I/O ou libs externas.
"""

from enum import Enum

VERSION = "1.0.0"


class Network(str, Enum):
    """Redes suportadas (define wrap_id e pool de swap)."""
    MAINNET = "mainnet"
    TESTNET = "testnet"
    SANDBOX = "sandbox"


# Preset por rede: token wrapped do ativo nativo + pool usado no swap
NETWORK_PRESETS: dict[Network, dict] = {
    Network.MAINNET: {"wrap_id": "wrap.near", "swap_pool_id": 4},
    Network.TESTNET: {"wrap_id": "wrap.testnet", "swap_pool_id": 34},
    Network.SANDBOX: {"wrap_id": "wrap.test.near", "swap_pool_id": 3},
}

# Casas decimais (representação inteira on-chain)
NATIVE_DECIMALS: int = 24       # Ativo nativo (e sua versão wrapped)
STABLE_DECIMALS: int = 18       # Stablecoin gerida pelo tesouro
SECONDARY_DECIMALS: int = 6     # Reserva secundária (USDT)

SECONDARY_SYMBOL = "USDT"

# Tamanho fixo do cache de cotações (janela da regressão)
CACHE_CAPACITY: int = 8

# Unidade de tempo do cache: amostras horárias
DEFAULT_TIME_UNIT_SECONDS: float = 3600.0

# 50% de slippage: minimiza chance de falha sem abrir demais
SWAP_SLIPPAGE: float = 0.5

# Sem limite de shares queimadas na remoção de liquidez
MAX_BURN_SHARES: int = 2**128 - 1

# =============================================================================
# Parâmetros do modelo de decisão
# =============================================================================

TREND_POWER: int = 4            # Expoente do termo do vértice
N_DN: float = 0.25
U_UP: float = 1.1
U_DN: float = 1.0
P_DN: float = 0.6
P_UP: float = 0.7
T_BUY_MIN: float = 1000.0
T_SELL_MIN: float = 1000.0
T_BUY_STEP: float = 3_000_000.0
T_SELL_STEP: float = 3_000_000.0
T_0: float = 0.0
