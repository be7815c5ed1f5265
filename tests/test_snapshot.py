"""
Stable Treasury v1.0 - Testes da Coleta de Reservas
====================================================

Testa:
  - extract_amount / assert_pool_shape
  - ReserveSnapshotCollector (ordem das leituras, conversões, falhas)
"""

import logging

import pytest
from unittest.mock import AsyncMock

from connector.errors import ExternalCallFailure
from core.models import StablePoolInfo
from treasury.errors import InvalidPoolShape, NotWarmedUp
from treasury.snapshot import ReserveSnapshotCollector, assert_pool_shape, extract_amount
from treasury.state import TreasuryState
from .helpers import (
    EXCHANGE, HOUR, POOL_ID, START, TREASURY, USDT, make_connector, make_pool, make_warm_state,
)


def make_collector(connector, state):
    return ReserveSnapshotCollector(
        exchange=connector,
        ledger=connector,
        state=state,
        treasury_account=TREASURY,
        stable_id=TREASURY,
    )


NOW = START + 7 * HOUR


# =============================================================================
# TESTES: helpers de pool
# =============================================================================

class TestPoolShape:

    def test_extract_stable(self):
        assert extract_amount([TREASURY, USDT], [10, 20], TREASURY, stable=True) == 10

    def test_extract_secondary(self):
        assert extract_amount([USDT, TREASURY], [10, 20], TREASURY, stable=False) == 10

    def test_extract_missing_stable(self):
        with pytest.raises(InvalidPoolShape):
            extract_amount(["a", "b"], [1, 2], TREASURY, stable=True)

    def test_three_token_pool_rejected(self):
        pool = make_pool(tokens=(TREASURY, USDT, "dai"), decimals=(18, 6, 18))
        with pytest.raises(InvalidPoolShape, match="A pool of 2 tokens is required"):
            assert_pool_shape(pool, TREASURY)

    def test_pool_without_stable_rejected(self):
        pool = make_pool(tokens=("usdc", USDT), decimals=(6, 6))
        with pytest.raises(InvalidPoolShape):
            assert_pool_shape(pool, TREASURY)


# =============================================================================
# TESTES: ReserveSnapshotCollector
# =============================================================================

class TestReserveSnapshotCollector:

    @pytest.mark.asyncio
    async def test_snapshot_values(self):
        mc = make_connector(native_balance=1_000.0, stable_supply=60_000_000.0,
                            amounts=(5_000_000.0, 4_000_000.0))
        state = make_warm_state([5.0 + i for i in range(8)])
        inputs = await make_collector(mc, state).collect(make_pool(), NOW)

        snap = inputs.snapshot
        assert snap.native_reserve == pytest.approx(1_000.0)
        assert snap.circulating_stable == pytest.approx(55_000_000.0)
        assert snap.secondary_reserve == pytest.approx(4_000_000.0)
        assert snap.last_rate == 12.0
        assert inputs.rates[-1] == 12.0
        assert inputs.time_points == [-7.0, -6.0, -5.0, -4.0, -3.0, -2.0, -1.0, 0.0]

    @pytest.mark.asyncio
    async def test_logs_native_value(self, caplog):
        mc = make_connector(native_balance=1_000.0)
        state = make_warm_state([5.0 + i for i in range(8)])
        with caplog.at_level(logging.DEBUG, logger="Treasury.Snapshot"):
            inputs = await make_collector(mc, state).collect(make_pool(), NOW)
        assert inputs.snapshot.native_value == pytest.approx(12_000.0)
        assert "valor 12000.0000" in caplog.text

    @pytest.mark.asyncio
    async def test_reads_in_order(self):
        mc = make_connector()
        state = make_warm_state([5.0] * 8)
        await make_collector(mc, state).collect(make_pool(), NOW)
        assert mc.calls == [
            "get_pool_shares",
            "predict_remove_liquidity",
            "get_stable_pool",
            "native_balance",
            "total_supply",
        ]

    @pytest.mark.asyncio
    async def test_attached_deposit_excluded(self):
        mc = make_connector(native_balance=10.0)
        state = make_warm_state([5.0] * 8)
        attached = 4 * 10**24
        inputs = await make_collector(mc, state).collect(make_pool(), NOW, attached_deposit=attached)
        assert inputs.snapshot.native_reserve == pytest.approx(6.0)

    @pytest.mark.asyncio
    async def test_partial_share_reduces_secondary(self):
        mc = make_connector(amounts=(1_000.0, 1_000.0))
        mc.pools[1].shares[TREASURY] //= 2
        state = make_warm_state([5.0] * 8)
        inputs = await make_collector(mc, state).collect(make_pool(), NOW)
        assert inputs.snapshot.secondary_reserve == pytest.approx(500.0, rel=1e-6)

    @pytest.mark.asyncio
    async def test_not_warmed_up(self):
        mc = make_connector()
        state = make_warm_state([5.0] * 3)
        with pytest.raises(NotWarmedUp):
            await make_collector(mc, state).collect(make_pool(), NOW)

    @pytest.mark.asyncio
    async def test_read_failure_aborts(self):
        mc = make_connector()
        mc.fail_on("get_stable_pool")
        state = make_warm_state([5.0] * 8)
        with pytest.raises(ExternalCallFailure):
            await make_collector(mc, state).collect(make_pool(), NOW)
        assert "native_balance" not in mc.calls

    @pytest.mark.asyncio
    async def test_exchange_reporting_three_tokens(self):
        exchange = AsyncMock()
        exchange.get_pool_shares.return_value = 10
        exchange.predict_remove_liquidity.return_value = [1, 2, 3]
        ledger = AsyncMock()
        collector = ReserveSnapshotCollector(
            exchange=exchange, ledger=ledger, state=make_warm_state([5.0] * 8),
            treasury_account=TREASURY, stable_id=TREASURY,
        )
        with pytest.raises(InvalidPoolShape):
            await collector.collect(make_pool(), NOW)
        exchange.get_stable_pool.assert_not_called()
        exchange.get_pool_shares.assert_awaited_once_with(EXCHANGE, POOL_ID, TREASURY)
        exchange.predict_remove_liquidity.assert_awaited_once_with(EXCHANGE, POOL_ID, 10)

    @pytest.mark.asyncio
    async def test_stable_pool_with_three_amounts(self):
        exchange = AsyncMock()
        exchange.get_pool_shares.return_value = 10
        exchange.predict_remove_liquidity.return_value = [1, 2]
        exchange.get_stable_pool.return_value = StablePoolInfo(
            token_account_ids=[TREASURY, USDT, "dai"], decimals=[18, 6, 18], amounts=[1, 2, 3],
        )
        collector = ReserveSnapshotCollector(
            exchange=exchange, ledger=AsyncMock(), state=TreasuryState(),
            treasury_account=TREASURY, stable_id=TREASURY,
        )
        with pytest.raises(InvalidPoolShape):
            await collector.collect(make_pool(), NOW)
