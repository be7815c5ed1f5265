"""
Stable Treasury v1.0 — Orchestrator
====================================

Coordena os módulos: Connectors, Treasury (cache + decisão), Executor.
Expõe as operações de entrada do tesouro.

Operações:
  - warmup(): uma cotação do oráculo → cache
  - balance_treasury(pool_id, limits, execute): tentativa de balanceamento
  - treasury(): view do cache
  - reset_cache(): descarta o cache (memória e disco)

Máquina de estados por tentativa:
  COLLECTING → DECIDING → (IDLE | EXECUTING) → DONE

Tentativas concorrentes NÃO são serializadas entre si: podem disputar as
mesmas reservas externas.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from connector.base import BaseExchange, BaseLedger, BaseOracle, BaseWrapBridge
from core.actions import Action
from core.models import ExecutionReport, PoolConfig, RateSample
from executor.executor import Executor
from executor.plans import ExecutionSettings
from persistence.cache_store import CacheStore
from treasury.decision import decide
from treasury.errors import PoolNotConfigured
from treasury.snapshot import DecisionInputs, ReserveSnapshotCollector, assert_pool_shape
from treasury.state import TreasuryState
from treasury.warmup import run_warmup, run_warmup_loop
from .randomness import RandomSource, SystemRandomSource, draw_limit

logger = logging.getLogger("Orchestrator")


class BalancingState(str, Enum):
    """Estados de uma tentativa de balanceamento."""
    COLLECTING = "COLLECTING"
    DECIDING = "DECIDING"
    IDLE = "IDLE"
    EXECUTING = "EXECUTING"
    DONE = "DONE"


_TRANSITIONS: Dict[BalancingState, tuple] = {
    BalancingState.COLLECTING: (BalancingState.DECIDING,),
    BalancingState.DECIDING: (BalancingState.IDLE, BalancingState.EXECUTING),
    BalancingState.IDLE: (BalancingState.DONE,),
    BalancingState.EXECUTING: (BalancingState.DONE,),
    BalancingState.DONE: (),
}


@dataclass
class BalancingAttempt:
    """Contexto de uma tentativa, carregado ao longo da cadeia."""
    pool_id: int
    execute: bool
    limit: Optional[int] = None
    state: BalancingState = BalancingState.COLLECTING
    history: List[BalancingState] = field(default_factory=lambda: [BalancingState.COLLECTING])
    inputs: Optional[DecisionInputs] = None
    action: Optional[Action] = None
    report: Optional[ExecutionReport] = None

    def transition(self, new_state: BalancingState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Transição inválida: {self.state.value} → {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    @property
    def executed(self) -> bool:
        return self.report is not None


class Orchestrator:
    """
    Ponto de entrada das operações do tesouro.
    Autorização (owner/guardian) é responsabilidade do chamador.
    """

    def __init__(
        self,
        exchange: BaseExchange,
        bridge: BaseWrapBridge,
        oracle: BaseOracle,
        ledger: BaseLedger,
        pools: Dict[int, PoolConfig],
        settings: ExecutionSettings,
        state: Optional[TreasuryState] = None,
        random_source: Optional[RandomSource] = None,
        clock: Callable[[], float] = time.time,
        cache_store: Optional[CacheStore] = None,
    ):
        self.exchange = exchange
        self.bridge = bridge
        self.oracle = oracle
        self.ledger = ledger
        self.pools = pools
        self.settings = settings
        self.state = state or TreasuryState()
        self.random_source = random_source or SystemRandomSource()
        self.clock = clock
        self.cache_store = cache_store

        self.collector = ReserveSnapshotCollector(
            exchange=exchange,
            ledger=ledger,
            state=self.state,
            treasury_account=settings.treasury_account,
            stable_id=settings.stable_id,
        )
        self.executor = Executor(exchange, bridge, ledger, settings)

    # =================================================================
    # Helpers
    # =================================================================

    def get_pool(self, pool_id: int) -> PoolConfig:
        """Pool configurado com dois tokens, um deles a stablecoin."""
        pool = self.pools.get(pool_id)
        if pool is None:
            raise PoolNotConfigured(pool_id)
        assert_pool_shape(pool, self.settings.stable_id)
        return pool

    # =================================================================
    # Warmup
    # =================================================================

    async def warmup(self) -> RateSample:
        """Lê uma cotação do oráculo e anexa ao cache."""
        sample = await run_warmup(self.oracle, self.state, self.clock)
        self._persist_cache()
        return sample

    async def run_warmup_loop(self, interval: float, iterations: Optional[int] = None) -> int:
        """Warmup periódico (Warmup Trigger)."""
        return await run_warmup_loop(
            self.oracle,
            self.state,
            interval=interval,
            iterations=iterations,
            clock=self.clock,
            on_sample=lambda _: self._persist_cache(),
        )

    def _persist_cache(self) -> None:
        if self.cache_store:
            self.cache_store.save(self.state)

    def reset_cache(self) -> None:
        """Descarta o cache em memória e o checkpoint em disco."""
        self.state.reset()
        if self.cache_store:
            self.cache_store.clear()

    # =================================================================
    # Balanceamento
    # =================================================================

    async def balance_treasury(
        self,
        pool_id: int,
        limits: Optional[Sequence[int]] = None,
        execute: bool = False,
        attached_deposit: int = 0,
    ) -> BalancingAttempt:
        """
        Executa uma tentativa de balanceamento.

        Args:
            pool_id: Pool estável do tesouro.
            limits: [min, max] para sorteio do limite da operação.
            execute: False = apenas decide e loga.
            attached_deposit: Valor nativo anexado à chamada (excluído da reserva).

        Returns:
            BalancingAttempt com snapshot, decisão e relatório de execução.

        Raises:
            InvalidRange, NotWarmedUp, PoolNotConfigured, InvalidPoolShape:
                antes de qualquer efeito colateral.
            ExternalCallFailure: falha em leitura durante COLLECTING.
        """
        limit = draw_limit(self.random_source, limits)
        self.state.ensure_ready()
        pool = self.get_pool(pool_id)

        attempt = BalancingAttempt(pool_id=pool.id, execute=execute, limit=limit)

        # COLLECTING
        inputs = await self.collector.collect(pool, self.clock(), attached_deposit)
        attempt.inputs = inputs
        attempt.transition(BalancingState.DECIDING)

        # DECIDING
        snap = inputs.snapshot
        action = decide(
            inputs.rates,
            inputs.time_points,
            snap.native_reserve,
            snap.circulating_stable,
            snap.secondary_reserve,
            float(limit) if limit is not None else None,
        )
        attempt.action = action
        logger.info(str(action))

        if not execute:
            logger.info("Execution bypassed")
            attempt.transition(BalancingState.IDLE)
            attempt.transition(BalancingState.DONE)
            return attempt

        if action.is_noop:
            attempt.transition(BalancingState.IDLE)
            attempt.transition(BalancingState.DONE)
            return attempt

        # EXECUTING
        attempt.transition(BalancingState.EXECUTING)
        attempt.report = await self.executor.execute(action, pool, snap.last_rate)
        attempt.transition(BalancingState.DONE)
        return attempt

    async def balance_many(self, requests: Sequence[dict]) -> List[object]:
        """
        Dispara várias tentativas concorrentes (sem exclusão mútua).

        Returns:
            BalancingAttempt ou a exceção de cada tentativa, na ordem recebida.
        """
        return await asyncio.gather(
            *(self.balance_treasury(**req) for req in requests),
            return_exceptions=True,
        )

    # =================================================================
    # View
    # =================================================================

    def treasury(self) -> dict:
        """View do tesouro (cache de cotações)."""
        return self.state.view()
