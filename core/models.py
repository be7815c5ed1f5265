"""
Stable Treasury v1.0 - Modelos de Dados (DTOs)
===============================================

Dataclasses usadas como contratos entre módulos.
Nenhum comportamento complexo - apenas dados e propriedades derivadas.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class RateSample:
    """
    Amostra imutável de cotação.
    Preço do ativo nativo em unidades da reserva secundária.
    """
    timestamp: float    # Unix timestamp (segundos)
    rate: float


@dataclass(frozen=True)
class PriceData:
    """Cotação bruta do oráculo (inteiro + casas decimais)."""
    multiplier: int
    decimals: int


@dataclass(frozen=True)
class ReserveSnapshot:
    """
    Reservas do tesouro no momento de uma tentativa de balanceamento.
    Construído a cada tentativa, nunca persistido.
    """
    native_reserve: float       # Ativo nativo mantido diretamente
    circulating_stable: float   # Supply total - stablecoin dentro do pool
    secondary_reserve: float    # Reserva secundária resgatável do pool
    last_rate: float = 0.0      # Última cotação do cache

    @property
    def native_value(self) -> float:
        """Valor da reserva nativa em unidades secundárias."""
        return self.native_reserve * self.last_rate


@dataclass(frozen=True)
class PoolConfig:
    """Pool estável configurado (tokens na mesma ordem do exchange)."""
    id: int
    exchange_id: str
    tokens: Tuple[str, ...]
    decimals: Tuple[int, ...]

    def other_token(self, stable_id: str) -> str:
        """Token do pool que não é a stablecoin."""
        return next(t for t in self.tokens if t != stable_id)

    def other_decimals(self, stable_id: str) -> int:
        for token, decimals in zip(self.tokens, self.decimals):
            if token != stable_id:
                return decimals
        raise ValueError(f"Pool {self.id} não possui token além de {stable_id}")


@dataclass
class StablePoolInfo:
    """Estado agregado do pool retornado pelo exchange."""
    token_account_ids: List[str]
    decimals: List[int]
    amounts: List[int]
    shares_total_supply: int = 0


@dataclass(frozen=True)
class SwapAction:
    """Swap simples em um pool do exchange."""
    pool_id: int
    token_in: str
    token_out: str
    amount_in: int
    min_amount_out: int


@dataclass
class ExecutionReport:
    """Resultado observável da execução de um plano."""
    kind: str                               # "BUY", "SELL"
    completed: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: str = ""
    output: object = None

    @property
    def success(self) -> bool:
        """True se todos os passos foram executados."""
        return self.failed_step is None
