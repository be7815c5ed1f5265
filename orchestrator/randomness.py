"""
Stable Treasury v1.0 — Fonte de Aleatoriedade
==============================================

Sorteio do limite por tentativa quando o chamador informa `limits`.
O valor exato executado fica imprevisível para observadores externos,
mas sempre dentro de [min, max].

A semente vem de uma RandomSource injetada: sistema em produção,
semente fixa em testes.
"""

import os
import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from treasury.errors import InvalidRange


class RandomSource(ABC):
    """Fornece uma semente nova por tentativa."""

    @abstractmethod
    def seed(self) -> int:
        ...


class SystemRandomSource(RandomSource):
    """Semente de 256 bits do sistema operacional."""

    def seed(self) -> int:
        return int.from_bytes(os.urandom(32), "big")


class FixedSeedSource(RandomSource):
    """Semente constante (reprodutível)."""

    def __init__(self, seed: int = 0):
        self._seed = seed

    def seed(self) -> int:
        return self._seed


def validate_limits(limits: Optional[Sequence[int]]) -> None:
    """Rejeita faixa fora do formato [min; max] (antes de qualquer chamada externa)."""
    if limits is None:
        return
    if len(limits) != 2:
        raise InvalidRange("`limits` must be in [min; max] format")
    low, high = limits
    if low < 0 or low > high:
        raise InvalidRange("`limits` must be in [min; max] format")


def draw_limit(source: RandomSource, limits: Optional[Sequence[int]]) -> Optional[int]:
    """
    Sorteia o limite uniformemente em [min, max].

    Returns:
        Limite inteiro, ou None se `limits` não foi informado.

    Raises:
        InvalidRange: min > max, valores negativos ou formato inválido.
    """
    validate_limits(limits)
    if limits is None:
        return None
    low, high = limits
    rng = random.Random(source.seed())
    return rng.randint(int(low), int(high))
