"""
Stable Treasury v1.0 - Modelo de Decisão
=========================================

Converte a série de cotações e as reservas do tesouro em uma Action.
Função pura: mesmas entradas → mesma decisão.

Fluxo:
  1. NER = última cotação da série
  2. Suavização por média móvel de 3 pontos (8 → 6 pontos)
  3. Tendência quadrática y = a·x² + b·x + c via OLS nos pontos suavizados
  4. R² da tendência medido contra a série ORIGINAL (8 pontos)
  5. Coeficiente de confiança C = sign(a) · R² / ((t0 + b/2a)^M + 1)
  6. Regras de venda / venda por tendência / compra, com limites de passo

Notação das reservas:
  n = reserva nativa, q = stablecoin circulante, u = reserva secundária
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from core.actions import Action
from core.constants import (
    CACHE_CAPACITY, N_DN, P_DN, P_UP, T_0, T_BUY_MIN, T_BUY_STEP,
    T_SELL_MIN, T_SELL_STEP, TREND_POWER, U_DN, U_UP,
)
from .errors import NotWarmedUp

logger = logging.getLogger("Treasury.Decision")


def smooth(values: Sequence[float]) -> np.ndarray:
    """Média móvel centrada de 3 pontos (descarta as bordas)."""
    v = np.asarray(values, dtype=np.float64)
    return (v[:-2] + v[1:-1] + v[2:]) / 3.0


def _ordered_sum(values) -> float:
    """Soma sequencial, da esquerda para a direita."""
    total = 0.0
    for v in values:
        total += v
    return total


def _inverse_3x3(m: list) -> list:
    """
    Inversa 3×3 por adjunta: A⁻¹ = adj(A) · (1/det A).

    det = aei + bfg + cdh − ceg − bdi − afh, avaliado nessa ordem.

    Raises:
        ValueError: Matriz singular.
    """
    (a, b, c), (d, e, f), (g, h, i) = m

    det = a * e * i + b * f * g + c * d * h - c * e * g - b * d * i - a * f * h
    if det == 0.0:
        raise ValueError("Matriz singular no ajuste quadrático")

    cofactors = [
        [e * i - f * h, -(d * i - f * g), d * h - e * g],
        [-(b * i - c * h), a * i - c * g, -(a * h - b * g)],
        [b * f - c * e, -(a * f - c * d), a * e - b * d],
    ]
    inv_det = 1.0 / det
    return [[cofactors[col][row] * inv_det for col in range(3)] for row in range(3)]


def fit_quadratic(x: np.ndarray, y: np.ndarray) -> tuple[float, float, float]:
    """
    Ajusta y = a·x² + b·x + c por mínimos quadrados ordinários.

    Colunas da matriz de projeto: [1, x, x²]. w = (XᵀX)⁻¹ · Xᵀy, com a
    inversa explícita e todas as somas feitas em ordem, para que a
    decisão seja reproduzível bit a bit.

    Returns:
        (a, b, c)
    """
    rows = [(1.0, float(xk), float(xk) * float(xk)) for xk in x]
    ys = [float(yk) for yk in y]

    xtx = [[_ordered_sum(r[i] * r[j] for r in rows) for j in range(3)] for i in range(3)]
    xty = [_ordered_sum(r[i] * yk for r, yk in zip(rows, ys)) for i in range(3)]

    inv = _inverse_3x3(xtx)
    w = [_ordered_sum(inv[i][k] * xty[k] for k in range(3)) for i in range(3)]
    return w[2], w[1], w[0]


def r_squared(
    times: Sequence[float], rates: Sequence[float], a: float, b: float, c: float
) -> float:
    """R² = 1 − Sres/Stot da tendência contra a série bruta."""
    t = np.asarray(times, dtype=np.float64)
    r = np.asarray(rates, dtype=np.float64)

    s_tot = float(np.sum((r - r.mean()) ** 2))
    s_res = float(np.sum((r - (a * t**2 + b * t + c)) ** 2))

    # Série constante: não há tendência a explicar
    if s_tot == 0.0:
        return 0.0
    return 1.0 - s_res / s_tot


def trend_confidence(a: float, b: float, r2: float) -> float:
    """
    C = sign(a) · R² / ((t0 + b/2a)^M + 1).

    Quanto mais distante o vértice da parábola do instante atual,
    menor a confiança na tendência.
    """
    if a == 0.0 or r2 == 0.0:
        return 0.0
    vertex = T_0 + b / (2.0 * a)
    return math.copysign(1.0, a) * r2 / (vertex**TREND_POWER + 1.0)


def decide(
    rates: Sequence[float],
    times: Sequence[float],
    native_reserve: float,
    circulating_stable: float,
    secondary_reserve: float,
    cap: Optional[float] = None,
) -> Action:
    """
    Decide a operação do tesouro.

    Args:
        rates: 8 cotações (mais antiga primeiro).
        times: 8 tempos correspondentes.
        native_reserve: Reserva nativa (n).
        circulating_stable: Stablecoin circulante (q).
        secondary_reserve: Reserva secundária (u).
        cap: Limite opcional do valor da operação.

    Returns:
        Action.sell / Action.buy / Action.nothing.

    Raises:
        NotWarmedUp: Série com menos de 8 amostras.
        ValueError: Séries com tamanhos diferentes.
    """
    if len(rates) != len(times):
        raise ValueError(f"Séries desalinhadas: {len(rates)} cotações, {len(times)} tempos")
    if len(rates) != CACHE_CAPACITY:
        raise NotWarmedUp(f"Decisão exige {CACHE_CAPACITY} amostras, recebidas {len(rates)}")

    n = native_reserve
    q = circulating_stable
    u = secondary_reserve

    n_er = float(rates[-1])

    x = smooth(times)
    y = smooth(rates)
    a, b, c = fit_quadratic(x, y)
    r2 = r_squared(times, rates, a, b, c)
    conf = trend_confidence(a, b, r2)

    logger.debug(
        f"Tendência: a={a:.6g} b={b:.6g} c={c:.6g} R²={r2:.4f} C={conf:.6g} NER={n_er}"
    )

    excess = N_DN * q - n_er * n

    if excess >= 0:
        r_sell = min(excess, T_SELL_STEP, u, T_SELL_STEP if cap is None else cap)
        return Action.sell(r_sell) if r_sell >= T_SELL_MIN else Action.nothing()

    if conf > 0:
        u_sell = max(conf * (u - min(P_UP * (u + n_er * n), U_UP * q)), 0.0)
        r_sell = min(u_sell, T_SELL_STEP, u, T_SELL_STEP if cap is None else cap)
        return Action.sell(r_sell) if r_sell >= T_SELL_MIN else Action.nothing()

    u_buy = conf * min(u - min(P_DN * (u + n_er * n), U_DN * q), 0.0)
    r_buy = min(u_buy, T_BUY_STEP, n_er * n, T_BUY_STEP if cap is None else cap)
    return Action.buy(r_buy) if r_buy >= T_BUY_MIN else Action.nothing()
