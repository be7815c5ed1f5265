"""
Stable Treasury v1.0 - Testes do Modelo de Decisão
===================================================

Testa:
  - Cenários de referência (venda, venda limitada, nada, compra)
  - Determinismo, limites de passo, limite sorteado, mínimos
  - Blocos do ajuste (suavização, OLS quadrático, R², confiança)
"""

import numpy as np
import pytest

from core.actions import Action, ActionKind
from core.constants import T_BUY_MIN, T_BUY_STEP, T_SELL_MIN, T_SELL_STEP
from treasury.decision import decide, fit_quadratic, r_squared, smooth, trend_confidence
from treasury.errors import NotWarmedUp

TIMES = [-7.0, -6.0, -5.0, -4.0, -3.0, -2.0, -1.0, 0.0]

SELL_RATES = [6.615, 6.62, 6.628, 6.623, 6.578, 6.6, 6.577, 6.611]
SELL_RESERVES = dict(
    native_reserve=191937460.53121,
    circulating_stable=1241195491.76577,
    secondary_reserve=1367351872.04769,
)

IDLE_RATES = [5.9519, 5.9222, 5.9189, 5.9242, 5.9194, 5.9173, 5.8818, 5.8741]
IDLE_RESERVES = dict(
    native_reserve=167242050.870139,
    circulating_stable=1001497797.34406,
    secondary_reserve=1000522964.94309,
)

BUY_RATES = [5.6584, 5.809, 5.7635, 5.8331, 5.8555, 5.8643, 5.8565, 5.8699]
BUY_RESERVES = dict(
    native_reserve=167270746.338665,
    circulating_stable=1001096736.9184,
    secondary_reserve=1000039562.72316,
)


# =============================================================================
# TESTES: Cenários de referência
# =============================================================================

class TestScenarios:

    def test_sell(self):
        action = decide(SELL_RATES, TIMES, **SELL_RESERVES)
        assert action.kind == ActionKind.SELL
        assert action == Action.sell(23604.588213058174)

    def test_sell_capped(self):
        action = decide(SELL_RATES, TIMES, **SELL_RESERVES, cap=20000)
        assert action == Action.sell(20000.0)

    def test_do_nothing(self):
        assert decide(IDLE_RATES, TIMES, **IDLE_RESERVES) == Action.nothing()

    def test_buy(self):
        action = decide(BUY_RATES, TIMES, **BUY_RESERVES)
        assert action.kind == ActionKind.BUY
        assert action == Action.buy(207013.8891493543)

    def test_buy_capped(self):
        action = decide(BUY_RATES, TIMES, **BUY_RESERVES, cap=5000)
        assert action == Action.buy(5000.0)

    def test_deterministic(self):
        first = decide(BUY_RATES, TIMES, **BUY_RESERVES)
        second = decide(list(BUY_RATES), list(TIMES), **BUY_RESERVES)
        assert first == second


# =============================================================================
# TESTES: Limites
# =============================================================================

class TestBounds:

    def test_collateral_excess_sells_bounded_by_step(self):
        # n·NER muito abaixo de 25% do circulante → venda direta
        action = decide(SELL_RATES, TIMES, native_reserve=1.0,
                        circulating_stable=1e9, secondary_reserve=1e9)
        assert action == Action.sell(T_SELL_STEP)

    def test_collateral_excess_bounded_by_secondary(self):
        action = decide(SELL_RATES, TIMES, native_reserve=1.0,
                        circulating_stable=1e9, secondary_reserve=50_000.0)
        assert action == Action.sell(50_000.0)

    def test_collateral_excess_bounded_by_cap(self):
        action = decide(SELL_RATES, TIMES, native_reserve=1.0,
                        circulating_stable=1e9, secondary_reserve=1e9, cap=1234)
        assert action == Action.sell(1234.0)

    def test_sell_below_minimum_is_nothing(self):
        action = decide(SELL_RATES, TIMES, native_reserve=1.0,
                        circulating_stable=1e9, secondary_reserve=999.0)
        assert action == Action.nothing()

    def test_cap_below_minimum_is_nothing(self):
        action = decide(SELL_RATES, TIMES, **SELL_RESERVES, cap=T_SELL_MIN - 1)
        assert action == Action.nothing()
        action = decide(BUY_RATES, TIMES, **BUY_RESERVES, cap=T_BUY_MIN - 1)
        assert action == Action.nothing()

    def test_buy_bounded_by_native_value(self):
        action = decide(BUY_RATES, TIMES, **BUY_RESERVES)
        assert action.amount <= BUY_RATES[-1] * BUY_RESERVES["native_reserve"]
        assert action.amount <= T_BUY_STEP

    @pytest.mark.parametrize("rates,reserves", [
        (SELL_RATES, SELL_RESERVES),
        (IDLE_RATES, IDLE_RESERVES),
        (BUY_RATES, BUY_RESERVES),
    ])
    def test_never_below_minimum(self, rates, reserves):
        for cap in (None, 500, 999.99, 1000, 20000):
            action = decide(rates, TIMES, **reserves, cap=cap)
            if not action.is_noop:
                assert action.amount >= 1000
                if cap is not None:
                    assert action.amount <= cap


# =============================================================================
# TESTES: Entradas inválidas
# =============================================================================

class TestInputs:

    def test_short_series_not_warmed_up(self):
        with pytest.raises(NotWarmedUp):
            decide(SELL_RATES[:7], TIMES[:7], **SELL_RESERVES)

    def test_misaligned_series(self):
        with pytest.raises(ValueError):
            decide(SELL_RATES, TIMES[:7], **SELL_RESERVES)


# =============================================================================
# TESTES: Blocos do ajuste
# =============================================================================

class TestTrendFit:

    def test_smooth(self):
        out = smooth([1.0, 2.0, 3.0, 4.0, 5.0])
        np.testing.assert_allclose(out, [2.0, 3.0, 4.0])

    def test_smooth_length(self):
        assert len(smooth(SELL_RATES)) == 6

    def test_fit_exact_parabola(self):
        x = np.array([-3.0, -2.0, -1.0, 0.0, 1.0, 2.0])
        y = 2.0 * x**2 - 3.0 * x + 1.0
        a, b, c = fit_quadratic(x, y)
        assert a == pytest.approx(2.0)
        assert b == pytest.approx(-3.0)
        assert c == pytest.approx(1.0)

    def test_fit_singular_design_raises(self):
        x = np.array([1.0, 1.0, 1.0, 1.0])
        with pytest.raises(ValueError):
            fit_quadratic(x, np.array([1.0, 2.0, 3.0, 4.0]))

    def test_r_squared_perfect_fit(self):
        t = [-2.0, -1.0, 0.0, 1.0]
        r = [v * v for v in t]
        assert r_squared(t, r, 1.0, 0.0, 0.0) == pytest.approx(1.0)

    def test_r_squared_constant_series(self):
        assert r_squared([0.0, 1.0, 2.0], [3.0, 3.0, 3.0], 0.0, 0.0, 3.0) == 0.0

    def test_confidence_sign_follows_curvature(self):
        assert trend_confidence(1.0, 0.0, 0.5) == pytest.approx(0.5)
        assert trend_confidence(-1.0, 0.0, 0.5) == pytest.approx(-0.5)

    def test_confidence_decays_with_vertex_distance(self):
        near = trend_confidence(1.0, 0.2, 0.9)
        far = trend_confidence(1.0, 6.0, 0.9)
        assert 0 < far < near

    def test_confidence_zero_curvature(self):
        assert trend_confidence(0.0, 1.0, 0.9) == 0.0

    def test_flat_series_is_nothing(self):
        action = decide([5.0] * 8, TIMES, native_reserve=1e8,
                        circulating_stable=1e9, secondary_reserve=1e9)
        assert action == Action.nothing()
