"""
Stable Treasury v1.0 - Testes do Core
======================================

Testa:
  - Conversões de ponto fixo (to_float, to_fixed, price_to_rate)
  - Action (construtores, mensagem de decisão)
  - Modelos (PoolConfig, ExecutionReport)
"""

import pytest

from core.actions import Action, ActionKind
from core.constants import NATIVE_DECIMALS, SECONDARY_DECIMALS, STABLE_DECIMALS
from core.models import ExecutionReport, PoolConfig, PriceData, ReserveSnapshot
from core.utils import price_to_rate, to_fixed, to_float


# =============================================================================
# TESTES: utils.py
# =============================================================================

class TestFixedPoint:

    def test_to_float_usdt(self):
        assert to_float(1_500_000, SECONDARY_DECIMALS) == 1.5

    def test_to_float_stable(self):
        assert to_float(2 * 10**18, STABLE_DECIMALS) == 2.0

    def test_to_float_zero_decimals(self):
        assert to_float(42, 0) == 42.0

    def test_to_fixed_usdt(self):
        assert to_fixed(1.5, SECONDARY_DECIMALS) == 1_500_000

    def test_to_fixed_stable(self):
        assert to_fixed(1.0, STABLE_DECIMALS) == 10**18

    def test_to_fixed_native_magnitude(self):
        assert to_fixed(1.0, NATIVE_DECIMALS) == pytest.approx(10**24, rel=1e-12)

    def test_to_fixed_truncates(self):
        assert to_fixed(0.0000019, SECONDARY_DECIMALS) == 1

    def test_to_fixed_negative_is_zero(self):
        assert to_fixed(-10.0, SECONDARY_DECIMALS) == 0

    def test_to_fixed_zero_is_zero(self):
        assert to_fixed(0.0, STABLE_DECIMALS) == 0

    def test_negative_decimals_rejected(self):
        with pytest.raises(ValueError):
            to_float(1, -1)
        with pytest.raises(ValueError):
            to_fixed(1.0, -1)

    def test_price_to_rate(self):
        # 11.1439 publicado com 4 casas extras sobre as 24 do nativo
        price = PriceData(multiplier=111439, decimals=28)
        assert price_to_rate(price) == pytest.approx(11.1439)

    def test_price_to_rate_fewer_decimals(self):
        price = PriceData(multiplier=5, decimals=23)
        assert price_to_rate(price) == pytest.approx(50.0)


# =============================================================================
# TESTES: actions.py
# =============================================================================

class TestAction:

    def test_sell_message(self):
        assert str(Action.sell(20000.0)) == "Treasury decision is to sell $20000 USDT"

    def test_buy_message(self):
        assert str(Action.buy(1500)) == "Treasury decision is to buy $1500 USDT"

    def test_nothing_message(self):
        assert str(Action.nothing()) == "Treasury decision is to do nothing"

    def test_fractional_message(self):
        assert str(Action.sell(23604.588213058174)) == (
            "Treasury decision is to sell $23604.588213058174 USDT"
        )
        assert str(Action.buy(1000.5)) == "Treasury decision is to buy $1000.5 USDT"

    def test_kinds(self):
        assert Action.sell(1.0).kind == ActionKind.SELL
        assert Action.buy(1.0).kind == ActionKind.BUY
        assert Action.nothing().is_noop
        assert not Action.sell(1.0).is_noop

    def test_equality(self):
        assert Action.sell(20000) == Action.sell(20000.0)
        assert Action.nothing() == Action(ActionKind.DO_NOTHING)

    def test_immutable(self):
        action = Action.buy(10.0)
        with pytest.raises(AttributeError):
            action.amount = 20.0

    def test_to_dict(self):
        assert Action.sell(5.0).to_dict() == {"kind": "SELL", "amount": 5.0}


# =============================================================================
# TESTES: models.py
# =============================================================================

class TestModels:

    def test_pool_other_token(self):
        pool = PoolConfig(1, "ref", ("usn", "usdt"), (18, 6))
        assert pool.other_token("usn") == "usdt"
        assert pool.other_decimals("usn") == 6

    def test_pool_other_token_reversed_order(self):
        pool = PoolConfig(1, "ref", ("usdt", "usn"), (6, 18))
        assert pool.other_token("usn") == "usdt"
        assert pool.other_decimals("usn") == 6

    def test_snapshot_native_value(self):
        snap = ReserveSnapshot(native_reserve=10.0, circulating_stable=0.0,
                               secondary_reserve=0.0, last_rate=5.0)
        assert snap.native_value == 50.0

    def test_report_success(self):
        report = ExecutionReport(kind="SELL", completed=["remove_liquidity"])
        assert report.success
        report.failed_step = "swap"
        assert not report.success
