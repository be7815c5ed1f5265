"""
Stable Treasury v1.0 - Coleta de Reservas
==========================================

Monta o ReserveSnapshot de uma tentativa de balanceamento.

Ordem das leituras (estritamente sequencial):
  1. Shares do tesouro no pool
  2. Previsão de resgate dessas shares → reserva secundária
  3. Estado agregado do pool → stablecoin presa no pool
  4. Ledger local: saldo nativo (sem o depósito anexado) e supply total
  5. Série de cotações do cache

Toda quantidade inteira é convertida com as casas decimais do seu token.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from connector.base import BaseExchange, BaseLedger
from core.constants import NATIVE_DECIMALS, STABLE_DECIMALS
from core.models import PoolConfig, ReserveSnapshot
from core.utils import to_float
from .errors import InvalidPoolShape
from .state import TreasuryState

logger = logging.getLogger("Treasury.Snapshot")

POOL_TOKENS = 2


@dataclass(frozen=True)
class DecisionInputs:
    """Tudo que o modelo de decisão precisa para uma tentativa."""
    snapshot: ReserveSnapshot
    time_points: List[float]
    rates: List[float]


def extract_amount(tokens: Sequence[str], amounts: Sequence[int], stable_id: str, stable: bool) -> int:
    """
    Separa a quantidade da stablecoin (stable=True) ou do outro token.

    Raises:
        InvalidPoolShape: Token procurado ausente.
    """
    for token_id, amount in zip(tokens, amounts):
        if (token_id == stable_id) == stable:
            return amount
    side = "stablecoin" if stable else "reserva secundária"
    raise InvalidPoolShape(f"Pool sem token de {side}")


def assert_pool_shape(pool: PoolConfig, stable_id: str) -> None:
    """Pool deve ter exatamente dois tokens, um deles a stablecoin."""
    if len(pool.tokens) != POOL_TOKENS or len(pool.decimals) != POOL_TOKENS:
        raise InvalidPoolShape("A pool of 2 tokens is required")
    if stable_id not in pool.tokens:
        raise InvalidPoolShape(f"Pool {pool.id} não contém {stable_id}")


class ReserveSnapshotCollector:
    """Lê reservas do exchange e do ledger local."""

    def __init__(
        self,
        exchange: BaseExchange,
        ledger: BaseLedger,
        state: TreasuryState,
        treasury_account: str,
        stable_id: str,
    ):
        self.exchange = exchange
        self.ledger = ledger
        self.state = state
        self.treasury_account = treasury_account
        self.stable_id = stable_id

    async def collect(
        self, pool: PoolConfig, now: float, attached_deposit: int = 0
    ) -> DecisionInputs:
        """
        Executa as leituras e converte para floats.

        Raises:
            InvalidPoolShape: Pool sem exatamente dois tokens.
            NotWarmedUp: Cache incompleto.
            ExternalCallFailure: Falha em qualquer leitura (sem retry).
        """
        assert_pool_shape(pool, self.stable_id)

        shares = await self.exchange.get_pool_shares(
            pool.exchange_id, pool.id, self.treasury_account
        )
        predicted = await self.exchange.predict_remove_liquidity(
            pool.exchange_id, pool.id, shares
        )
        if len(predicted) != POOL_TOKENS:
            raise InvalidPoolShape("A pool of 2 tokens is required")

        info = await self.exchange.get_stable_pool(pool.exchange_id, pool.id)
        if len(info.amounts) != POOL_TOKENS:
            raise InvalidPoolShape("A pool of 2 tokens is required")

        native = await self.ledger.native_balance() - attached_deposit
        supply = await self.ledger.total_supply()

        time_points, rates = self.state.collect(now)

        stable_in_pool = extract_amount(pool.tokens, info.amounts, self.stable_id, stable=True)
        secondary = extract_amount(pool.tokens, predicted, self.stable_id, stable=False)

        snapshot = ReserveSnapshot(
            native_reserve=to_float(native, NATIVE_DECIMALS),
            circulating_stable=to_float(supply - stable_in_pool, STABLE_DECIMALS),
            secondary_reserve=to_float(secondary, pool.other_decimals(self.stable_id)),
            last_rate=rates[-1],
        )
        logger.debug(
            f"[pool {pool.id}] Reservas: nativo={snapshot.native_reserve:.4f} "
            f"(valor {snapshot.native_value:.4f}) "
            f"circulante={snapshot.circulating_stable:.4f} "
            f"secundária={snapshot.secondary_reserve:.4f} NER={snapshot.last_rate}"
        )
        return DecisionInputs(snapshot=snapshot, time_points=time_points, rates=rates)
