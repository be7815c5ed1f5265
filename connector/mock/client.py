"""
Stable Treasury v1.0 - Mock Connector
======================================

Implementação em memória de TODOS os serviços externos (exchange,
bridge wrap, oráculo, ledger) para testes unitários, de integração
e modo dry-run sem rede real.

Features:
  - Simula latência configurável
  - Pools estáveis com shares proporcionais
  - Pool de swap a preço fixo (cotação atual do oráculo)
  - Injeção de falhas por chamada (fail_on)
  - Registro ordenado das chamadas (calls) para asserções
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List

from core.constants import NATIVE_DECIMALS, STABLE_DECIMALS
from core.models import PriceData, StablePoolInfo, SwapAction
from core.utils import to_fixed, to_float
from ..base import BaseExchange, BaseLedger, BaseOracle, BaseWrapBridge
from ..errors import ExternalCallFailure, InsufficientFunds, SlippageExceeded

logger = logging.getLogger("Connector.Mock")

# Casas decimais extras publicadas pelo oráculo sobre o ativo nativo
ORACLE_EXTRA_DECIMALS = 4

DEFAULT_EXCHANGE_ID = "ref.test.near"


@dataclass
class MockPool:
    """Pool estável em memória."""
    id: int
    exchange_id: str
    tokens: List[str]
    decimals: List[int]
    amounts: List[int]
    shares_total_supply: int
    shares: Dict[str, int] = field(default_factory=dict)

    def normalized(self, amounts: List[int]) -> float:
        """Soma das quantidades em unidades reais."""
        return sum(to_float(a, d) for a, d in zip(amounts, self.decimals))


class MockConnector(BaseExchange, BaseWrapBridge, BaseOracle, BaseLedger):
    """
    Connector mock para testes.
    Um único estado compartilhado atende as quatro interfaces.
    """

    def __init__(self, config: dict = None):
        """
        Args:
            config: Dict de configuração. Campos opcionais:
                treasury_account, stable_token_id, wrap_id, swap_pool_id,
                latency, rate, rate_volatility, native_balance,
                stable_supply, pools.
        """
        config = config or {}

        self.treasury_account: str = config.get("treasury_account", "usn.test.near")
        self.stable_id: str = config.get("stable_token_id", self.treasury_account)
        self.wrap_id: str = config.get("wrap_id", "wrap.test.near")
        self.swap_pool_id: int = config.get("swap_pool_id", 3)
        self._latency: float = config.get("latency", 0.0)

        self.rate: float = config.get("rate", 11.1439)
        self.rate_volatility: float = config.get("rate_volatility", 0.0)
        self.native: int = to_fixed(config.get("native_balance", 0.0), NATIVE_DECIMALS)
        self.stable_supply: int = to_fixed(config.get("stable_supply", 0.0), STABLE_DECIMALS)

        # Saldos fora do exchange (conta do tesouro) e depositados no exchange
        self.wallet: Dict[str, int] = {}
        self.deposits: Dict[str, int] = {}

        self.decimals: Dict[str, int] = {
            self.wrap_id: NATIVE_DECIMALS,
            self.stable_id: STABLE_DECIMALS,
        }
        self.pools: Dict[int, MockPool] = {}
        for pool_cfg in config.get("pools", []):
            self.add_pool(
                pool_id=pool_cfg["id"],
                tokens=list(pool_cfg["tokens"]),
                decimals=list(pool_cfg["decimals"]),
                amounts=list(pool_cfg.get("amounts", [0.0] * len(pool_cfg["tokens"]))),
                treasury_share=pool_cfg.get("treasury_share", 1.0),
                exchange_id=pool_cfg.get("exchange_id", DEFAULT_EXCHANGE_ID),
            )

        self.calls: List[str] = []
        self._failures: Dict[str, int] = {}

    # =========================================================================
    # MÉTODOS MOCK (para testes)
    # =========================================================================

    def add_pool(
        self,
        pool_id: int,
        tokens: List[str],
        decimals: List[int],
        amounts: List[float],
        treasury_share: float = 1.0,
        exchange_id: str = DEFAULT_EXCHANGE_ID,
    ) -> MockPool:
        """Cria pool com quantidades em unidades reais."""
        raw = [to_fixed(a, d) for a, d in zip(amounts, decimals)]
        total = to_fixed(sum(amounts), STABLE_DECIMALS)
        pool = MockPool(
            id=pool_id,
            exchange_id=exchange_id,
            tokens=tokens,
            decimals=decimals,
            amounts=raw,
            shares_total_supply=total,
            shares={self.treasury_account: int(total * treasury_share)},
        )
        self.pools[pool_id] = pool
        for token, d in zip(tokens, decimals):
            self.decimals.setdefault(token, d)
        return pool

    def set_price(self, rate: float) -> None:
        """Define cotação atual (oráculo e pool de swap)."""
        self.rate = rate

    def fail_on(self, call: str, times: int = 1) -> None:
        """Faz as próximas `times` chamadas de `call` falharem."""
        self._failures[call] = self._failures.get(call, 0) + times

    def balance_of(self, token_id: str) -> int:
        """Saldo da conta do tesouro fora do exchange."""
        return self.wallet.get(token_id, 0)

    async def _enter(self, call: str) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        self.calls.append(call)
        remaining = self._failures.get(call, 0)
        if remaining > 0:
            self._failures[call] = remaining - 1
            raise ExternalCallFailure(f"{call}: falha simulada", call=call)

    def _pool(self, exchange_id: str, pool_id: int) -> MockPool:
        pool = self.pools.get(pool_id)
        if pool is None or pool.exchange_id != exchange_id:
            raise ExternalCallFailure(f"Pool {pool_id} não existe em {exchange_id}", call="pool")
        return pool

    def _debit(self, book: Dict[str, int], token_id: str, amount: int, call: str) -> None:
        available = book.get(token_id, 0)
        if available < amount:
            raise InsufficientFunds(
                f"{call}: saldo {available} de {token_id} < {amount}", call=call
            )
        book[token_id] = available - amount

    # =========================================================================
    # EXCHANGE: LEITURAS
    # =========================================================================

    async def get_pool_shares(self, exchange_id: str, pool_id: int, account_id: str) -> int:
        await self._enter("get_pool_shares")
        return self._pool(exchange_id, pool_id).shares.get(account_id, 0)

    async def predict_remove_liquidity(
        self, exchange_id: str, pool_id: int, shares: int
    ) -> List[int]:
        await self._enter("predict_remove_liquidity")
        pool = self._pool(exchange_id, pool_id)
        if pool.shares_total_supply == 0:
            return [0] * len(pool.amounts)
        return [a * shares // pool.shares_total_supply for a in pool.amounts]

    async def get_stable_pool(self, exchange_id: str, pool_id: int) -> StablePoolInfo:
        await self._enter("get_stable_pool")
        pool = self._pool(exchange_id, pool_id)
        return StablePoolInfo(
            token_account_ids=list(pool.tokens),
            decimals=list(pool.decimals),
            amounts=list(pool.amounts),
            shares_total_supply=pool.shares_total_supply,
        )

    # =========================================================================
    # EXCHANGE: LIQUIDEZ E SWAP
    # =========================================================================

    async def remove_liquidity_by_tokens(
        self, exchange_id: str, pool_id: int, amounts: List[int], max_burn_shares: int
    ) -> int:
        await self._enter("remove_liquidity_by_tokens")
        pool = self._pool(exchange_id, pool_id)

        if any(req > held for req, held in zip(amounts, pool.amounts)):
            raise InsufficientFunds("Pool sem liquidez suficiente", call="remove_liquidity_by_tokens")

        burn = math.ceil(
            pool.shares_total_supply * pool.normalized(amounts) / pool.normalized(pool.amounts)
        )
        own = pool.shares.get(self.treasury_account, 0)
        if burn > own or burn > max_burn_shares:
            raise InsufficientFunds(
                f"Shares insuficientes: {own} < {burn}", call="remove_liquidity_by_tokens"
            )

        pool.shares[self.treasury_account] = own - burn
        pool.shares_total_supply -= burn
        for i, (token, amount) in enumerate(zip(pool.tokens, amounts)):
            pool.amounts[i] -= amount
            self.deposits[token] = self.deposits.get(token, 0) + amount

        logger.debug(f"Liquidez removida do pool {pool_id}: {amounts} (shares={burn})")
        return burn

    async def add_stable_liquidity(
        self, exchange_id: str, pool_id: int, amounts: List[int], min_shares: int
    ) -> int:
        await self._enter("add_stable_liquidity")
        pool = self._pool(exchange_id, pool_id)

        for token, amount in zip(pool.tokens, amounts):
            self._debit(self.deposits, token, amount, "add_stable_liquidity")

        before = pool.normalized(pool.amounts)
        minted = (
            int(pool.shares_total_supply * pool.normalized(amounts) / before)
            if before > 0 else to_fixed(pool.normalized(amounts), STABLE_DECIMALS)
        )
        if minted < min_shares:
            raise SlippageExceeded(f"Shares {minted} < mínimo {min_shares}", call="add_stable_liquidity")

        for i, amount in enumerate(amounts):
            pool.amounts[i] += amount
        pool.shares_total_supply += minted
        pool.shares[self.treasury_account] = pool.shares.get(self.treasury_account, 0) + minted

        logger.debug(f"Liquidez adicionada ao pool {pool_id}: {amounts} (shares={minted})")
        return minted

    async def swap(self, actions: List[SwapAction]) -> int:
        await self._enter("swap")
        amount_out = 0
        for action in actions:
            if action.pool_id != self.swap_pool_id:
                raise ExternalCallFailure(f"Pool de swap {action.pool_id} desconhecido", call="swap")

            value = to_float(action.amount_in, self.decimals[action.token_in])
            if action.token_in == self.wrap_id:
                value *= self.rate
            elif action.token_out == self.wrap_id:
                value /= self.rate
            amount_out = to_fixed(value, self.decimals[action.token_out])

            if amount_out < action.min_amount_out:
                raise SlippageExceeded(
                    f"Saída {amount_out} < mínimo {action.min_amount_out}", call="swap"
                )

            self._debit(self.deposits, action.token_in, action.amount_in, "swap")
            self.deposits[action.token_out] = self.deposits.get(action.token_out, 0) + amount_out

        return amount_out

    # =========================================================================
    # EXCHANGE: DEPÓSITOS
    # =========================================================================

    async def deposit(self, token_id: str, amount: int) -> int:
        await self._enter("deposit")
        self._debit(self.wallet, token_id, amount, "deposit")
        self.deposits[token_id] = self.deposits.get(token_id, 0) + amount
        return amount

    async def withdraw(self, token_id: str, amount: int) -> int:
        await self._enter("withdraw")
        self._debit(self.deposits, token_id, amount, "withdraw")
        self.wallet[token_id] = self.wallet.get(token_id, 0) + amount
        return amount

    # =========================================================================
    # BRIDGE WRAP
    # =========================================================================

    async def wrap(self, amount: int) -> int:
        await self._enter("wrap")
        if self.native < amount:
            raise InsufficientFunds(f"Saldo nativo {self.native} < {amount}", call="wrap")
        self.native -= amount
        self.wallet[self.wrap_id] = self.wallet.get(self.wrap_id, 0) + amount
        return amount

    async def unwrap(self, amount: int) -> int:
        await self._enter("unwrap")
        self._debit(self.wallet, self.wrap_id, amount, "unwrap")
        self.native += amount
        return amount

    # =========================================================================
    # ORÁCULO
    # =========================================================================

    async def get_exchange_rate(self) -> PriceData:
        await self._enter("get_exchange_rate")
        if self.rate_volatility > 0:
            self.rate *= 1 + random.gauss(0, self.rate_volatility)
        return PriceData(
            multiplier=round(self.rate * 10**ORACLE_EXTRA_DECIMALS),
            decimals=NATIVE_DECIMALS + ORACLE_EXTRA_DECIMALS,
        )

    # =========================================================================
    # LEDGER
    # =========================================================================

    async def total_supply(self) -> int:
        await self._enter("total_supply")
        return self.stable_supply

    async def native_balance(self) -> int:
        await self._enter("native_balance")
        return self.native

    async def burn(self, account_id: str, amount: int) -> None:
        await self._enter("burn")
        if account_id != self.treasury_account:
            raise ExternalCallFailure(f"Burn não autorizado para {account_id}", call="burn")
        self._debit(self.wallet, self.stable_id, amount, "burn")
        self.stable_supply -= amount

    def snapshot(self) -> dict:
        """Estado resumido para debug/CLI."""
        return {
            "rate": self.rate,
            "native": to_float(self.native, NATIVE_DECIMALS),
            "stable_supply": to_float(self.stable_supply, STABLE_DECIMALS),
            "wallet": dict(self.wallet),
            "deposits": dict(self.deposits),
            "pools": {
                pid: {"exchange_id": p.exchange_id, "tokens": p.tokens, "amounts": list(p.amounts)}
                for pid, p in self.pools.items()
            },
        }
