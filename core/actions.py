"""
Stable Treasury v1.0 - Decisões do Tesouro
===========================================

Centraliza a variante de ação produzida pelo modelo de decisão.

Nomenclatura:
  - BUY: Recompra reserva secundária vendendo ativo nativo.
  - SELL: Retira liquidez do pool, troca a parte secundária por nativo
    e queima a stablecoin retirada.
  - DO_NOTHING: Nenhuma operação nesta tentativa.

O `amount` é sempre expresso em unidades da reserva secundária.
"""

from dataclasses import dataclass
from enum import Enum

from .constants import SECONDARY_SYMBOL


def format_amount(amount: float) -> str:
    """Valor como aparece no log: inteiros sem casa decimal (20000, não 20000.0)."""
    return str(int(amount)) if float(amount).is_integer() else repr(float(amount))


class ActionKind(str, Enum):
    """Tipos de decisão do tesouro."""
    BUY = "BUY"
    SELL = "SELL"
    DO_NOTHING = "DO_NOTHING"


@dataclass(frozen=True)
class Action:
    """Decisão imutável de uma tentativa de balanceamento."""
    kind: ActionKind
    amount: float = 0.0

    @property
    def is_noop(self) -> bool:
        return self.kind == ActionKind.DO_NOTHING

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "amount": self.amount}

    def __str__(self) -> str:
        if self.kind == ActionKind.BUY:
            return f"Treasury decision is to buy ${format_amount(self.amount)} {SECONDARY_SYMBOL}"
        if self.kind == ActionKind.SELL:
            return f"Treasury decision is to sell ${format_amount(self.amount)} {SECONDARY_SYMBOL}"
        return "Treasury decision is to do nothing"

    @classmethod
    def buy(cls, amount: float) -> "Action":
        """Cria decisão de compra."""
        return cls(ActionKind.BUY, float(amount))

    @classmethod
    def sell(cls, amount: float) -> "Action":
        """Cria decisão de venda."""
        return cls(ActionKind.SELL, float(amount))

    @classmethod
    def nothing(cls) -> "Action":
        return cls(ActionKind.DO_NOTHING)
