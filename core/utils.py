"""
Stable Treasury v1.0 - Conversões de Ponto Fixo
================================================

Funções puras de utilidade. Sem I/O, sem estado, sem efeitos colaterais.

Todo valor on-chain é inteiro com N casas decimais declaradas pelo token.
A conversão para float (e de volta) passa SEMPRE por aqui, com o número
de casas explícito na chamada.
"""

from .constants import NATIVE_DECIMALS
from .models import PriceData


def _scale(decimals: int) -> int:
    if decimals < 0:
        raise ValueError(f"decimals deve ser >= 0 (recebido {decimals})")
    return 10 ** decimals


def to_float(amount: int, decimals: int) -> float:
    """
    Converte valor inteiro de ponto fixo para float.

    Args:
        amount: Valor inteiro (ex: 1_500_000 para 1.5 USDT).
        decimals: Casas decimais do token (ex: 6).

    Returns:
        Valor real correspondente.
    """
    return amount / _scale(decimals)


def to_fixed(value: float, decimals: int) -> int:
    """
    Converte float para inteiro de ponto fixo (truncando).

    Args:
        value: Valor real (ex: 1.5).
        decimals: Casas decimais do token.

    Returns:
        Valor inteiro. Negativos são truncados para 0.
    """
    if value <= 0:
        return 0
    return int(value * _scale(decimals))


def price_to_rate(price: PriceData, native_decimals: int = NATIVE_DECIMALS) -> float:
    """
    Converte cotação do oráculo em taxa (secundário por unidade nativa).

    O oráculo publica o preço por unidade mínima do ativo nativo, com
    `decimals` casas. Removendo as casas do ativo nativo obtém-se o
    preço por unidade inteira.
    """
    return price.multiplier / 10.0 ** (price.decimals - native_decimals)
