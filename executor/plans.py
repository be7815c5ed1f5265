"""
Stable Treasury v1.0 — Planos de Execução
==========================================

Traduz uma Action em uma sequência ordenada de chamadas externas.

Cada passo recebe a saída do passo anterior e devolve a entrada do
próximo. Nenhum estado intermediário fica fora da cadeia.

Venda (SELL, valor A, cotação r):
  1. remove_liquidity   : resgata A de cada token do pool
  2. swap               : secundário → wrapped (mínimo: 50% de A/r)
  3. withdraw_wrapped   : saca o wrapped do exchange
  4. unwrap             : wrapped → nativo
  5. withdraw_stable    : saca a stablecoin resgatada
  6. burn               : queima a stablecoin sacada

Compra (BUY, valor A, cotação r):
  1. wrap               : A/r nativo → wrapped
  2. deposit            : deposita wrapped no exchange
  3. swap               : wrapped → secundário (mínimo: 50% de A)
  4. add_liquidity      : devolve o secundário ao pool (stablecoin = 0)

⚠️ Sem compensação: falha no meio deixa fundos onde o último passo
bem-sucedido os colocou.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from connector.base import BaseExchange, BaseLedger, BaseWrapBridge
from core.actions import Action, ActionKind
from core.constants import MAX_BURN_SHARES, NATIVE_DECIMALS, SWAP_SLIPPAGE
from core.models import PoolConfig, SwapAction
from core.utils import to_fixed
from treasury.snapshot import extract_amount

logger = logging.getLogger("Executor.Plans")


@dataclass
class PlanStep:
    """Passo de um plano: chamada externa que consome a saída anterior."""
    name: str
    call: Callable[[Any], Awaitable[Any]]


@dataclass
class ExecutionPlan:
    """Sequência ordenada de passos derivada de uma Action."""
    kind: ActionKind
    amount: float
    steps: List[PlanStep] = field(default_factory=list)

    @property
    def step_names(self) -> List[str]:
        return [s.name for s in self.steps]


@dataclass(frozen=True)
class ExecutionSettings:
    """Identificadores fixos usados na execução."""
    treasury_account: str
    stable_id: str
    wrap_id: str
    swap_pool_id: int


class PlanBuilder:
    """Constrói planos de compra/venda ligados aos connectors."""

    def __init__(
        self,
        exchange: BaseExchange,
        bridge: BaseWrapBridge,
        ledger: BaseLedger,
        settings: ExecutionSettings,
    ):
        self.exchange = exchange
        self.bridge = bridge
        self.ledger = ledger
        self.settings = settings

    def build(self, action: Action, pool: PoolConfig, rate: float) -> Optional[ExecutionPlan]:
        """Plano para a Action. None para DO_NOTHING."""
        if action.kind == ActionKind.SELL:
            return self.sell_plan(action.amount, pool, rate)
        if action.kind == ActionKind.BUY:
            return self.buy_plan(action.amount, pool, rate)
        return None

    # =====================================================================
    # SELL
    # =====================================================================

    def sell_plan(self, amount: float, pool: PoolConfig, rate: float) -> ExecutionPlan:
        s = self.settings
        exchange, bridge, ledger = self.exchange, self.bridge, self.ledger

        remove_amounts = [to_fixed(amount, d) for d in pool.decimals]
        stable_amount = extract_amount(pool.tokens, remove_amounts, s.stable_id, stable=True)
        secondary_amount = extract_amount(pool.tokens, remove_amounts, s.stable_id, stable=False)

        swap_action = SwapAction(
            pool_id=s.swap_pool_id,
            token_in=pool.other_token(s.stable_id),
            token_out=s.wrap_id,
            amount_in=secondary_amount,
            min_amount_out=to_fixed(amount * SWAP_SLIPPAGE / rate, NATIVE_DECIMALS),
        )

        async def remove_liquidity(_):
            return await exchange.remove_liquidity_by_tokens(
                pool.exchange_id, pool.id, remove_amounts, MAX_BURN_SHARES
            )

        async def swap(_):
            return await exchange.swap([swap_action])

        async def withdraw_wrapped(wrap_amount):
            await exchange.withdraw(s.wrap_id, wrap_amount)
            return wrap_amount

        async def unwrap(wrap_amount):
            return await bridge.unwrap(wrap_amount)

        async def withdraw_stable(_):
            await exchange.withdraw(s.stable_id, stable_amount)
            return stable_amount

        async def burn(burn_amount):
            await ledger.burn(s.treasury_account, burn_amount)
            logger.info(f"EVENT ft_burn owner={s.treasury_account} amount={burn_amount}")
            return burn_amount

        return ExecutionPlan(
            kind=ActionKind.SELL,
            amount=amount,
            steps=[
                PlanStep("remove_liquidity", remove_liquidity),
                PlanStep("swap", swap),
                PlanStep("withdraw_wrapped", withdraw_wrapped),
                PlanStep("unwrap", unwrap),
                PlanStep("withdraw_stable", withdraw_stable),
                PlanStep("burn", burn),
            ],
        )

    # =====================================================================
    # BUY
    # =====================================================================

    def buy_plan(self, amount: float, pool: PoolConfig, rate: float) -> ExecutionPlan:
        s = self.settings
        exchange, bridge = self.exchange, self.bridge

        native = to_fixed(amount / rate, NATIVE_DECIMALS)
        secondary_id = pool.other_token(s.stable_id)
        min_out = to_fixed(amount * SWAP_SLIPPAGE, pool.other_decimals(s.stable_id))

        logger.info(f"Trying to wrap {native} NEAR")

        async def wrap(_):
            return await bridge.wrap(native)

        async def deposit(wrapped):
            return await exchange.deposit(s.wrap_id, wrapped)

        async def swap(deposited):
            return await exchange.swap([SwapAction(
                pool_id=s.swap_pool_id,
                token_in=s.wrap_id,
                token_out=secondary_id,
                amount_in=deposited,
                min_amount_out=min_out,
            )])

        async def add_liquidity(secondary):
            add_amounts = [0 if token == s.stable_id else secondary for token in pool.tokens]
            return await exchange.add_stable_liquidity(pool.exchange_id, pool.id, add_amounts, 0)

        return ExecutionPlan(
            kind=ActionKind.BUY,
            amount=amount,
            steps=[
                PlanStep("wrap", wrap),
                PlanStep("deposit", deposit),
                PlanStep("swap", swap),
                PlanStep("add_liquidity", add_liquidity),
            ],
        )
