"""
Stable Treasury v1.0 - Connector Base (Interfaces Abstratas)
=============================================================

Todo serviço externo consumido pelo tesouro implementa uma destas
interfaces. Garante que Treasury, Executor e Orchestrator não dependem
de uma rede específica.

Interfaces:
  - BaseExchange: pool AMM estável (shares, liquidez, swap, depósitos)
  - BaseWrapBridge: wrap/unwrap do ativo nativo
  - BaseOracle: cotação atual do ativo nativo
  - BaseLedger: ledger local da stablecoin (supply, saldo nativo, burn)

Implementações:
  - mock/client.py: Testes e modo dry-run

Chamadas de pool recebem o `exchange_id` do PoolConfig: cada pool pertence
a um exchange e toda chamada é roteada para ele.

Toda falha de chamada deve ser sinalizada com ExternalCallFailure.
"""

from abc import ABC, abstractmethod
from typing import List

from core.models import PriceData, StablePoolInfo, SwapAction


class BaseExchange(ABC):
    """Exchange AMM com pools estáveis."""

    # =========================================================================
    # LEITURAS
    # =========================================================================

    @abstractmethod
    async def get_pool_shares(self, exchange_id: str, pool_id: int, account_id: str) -> int:
        """Shares do `account_id` no pool `pool_id` do exchange `exchange_id`."""
        ...

    @abstractmethod
    async def predict_remove_liquidity(
        self, exchange_id: str, pool_id: int, shares: int
    ) -> List[int]:
        """
        Prevê quanto de cada token seria resgatado queimando `shares`.

        Returns:
            Lista de quantidades na ordem dos tokens do pool.
        """
        ...

    @abstractmethod
    async def get_stable_pool(self, exchange_id: str, pool_id: int) -> StablePoolInfo:
        """Estado agregado do pool (tokens, decimais, quantidades)."""
        ...

    # =========================================================================
    # LIQUIDEZ E SWAP
    # =========================================================================

    @abstractmethod
    async def remove_liquidity_by_tokens(
        self, exchange_id: str, pool_id: int, amounts: List[int], max_burn_shares: int
    ) -> int:
        """
        Remove liquidez nas quantidades exatas por token.
        Os tokens ficam depositados no exchange em nome do chamador.

        Returns:
            Shares queimadas.
        """
        ...

    @abstractmethod
    async def add_stable_liquidity(
        self, exchange_id: str, pool_id: int, amounts: List[int], min_shares: int
    ) -> int:
        """
        Adiciona liquidez a partir de tokens depositados no exchange.

        Returns:
            Shares recebidas.
        """
        ...

    @abstractmethod
    async def swap(self, actions: List[SwapAction]) -> int:
        """
        Executa swaps em sequência usando saldo depositado.

        Returns:
            Quantidade final recebida do último token de saída.
        """
        ...

    # =========================================================================
    # DEPÓSITOS
    # =========================================================================

    @abstractmethod
    async def deposit(self, token_id: str, amount: int) -> int:
        """Deposita tokens no exchange (transfer-call). Retorna valor creditado."""
        ...

    @abstractmethod
    async def withdraw(self, token_id: str, amount: int) -> int:
        """Saca tokens depositados no exchange de volta ao chamador."""
        ...


class BaseWrapBridge(ABC):
    """Conversão entre o ativo nativo e sua versão fungível (wrapped)."""

    @abstractmethod
    async def wrap(self, amount: int) -> int:
        """Converte nativo → wrapped. Retorna quantidade wrapped."""
        ...

    @abstractmethod
    async def unwrap(self, amount: int) -> int:
        """Converte wrapped → nativo. Retorna quantidade nativa."""
        ...


class BaseOracle(ABC):
    """Oráculo de preço do ativo nativo."""

    @abstractmethod
    async def get_exchange_rate(self) -> PriceData:
        """Cotação atual (multiplier + decimals)."""
        ...


class BaseLedger(ABC):
    """Ledger local da stablecoin e conta do tesouro."""

    @abstractmethod
    async def total_supply(self) -> int:
        """Supply total da stablecoin (ponto fixo)."""
        ...

    @abstractmethod
    async def native_balance(self) -> int:
        """Saldo nativo da conta do tesouro (ponto fixo)."""
        ...

    @abstractmethod
    async def burn(self, account_id: str, amount: int) -> None:
        """Queima stablecoin da conta indicada."""
        ...
