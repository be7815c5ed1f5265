"""
Stable Treasury v1.0 - Connector Errors
========================================

Hierarquia de exceções para chamadas a serviços externos.
"""


class ConnectorError(Exception):
    """Erro base do Connector."""
    pass


class ExternalCallFailure(ConnectorError):
    """Chamada externa (exchange, bridge, oráculo, ledger) falhou."""
    def __init__(self, message: str, call: str = ""):
        self.call = call
        super().__init__(message)


class InsufficientFunds(ExternalCallFailure):
    """Saldo insuficiente para a operação solicitada."""
    pass


class SlippageExceeded(ExternalCallFailure):
    """Swap retornaria menos que o mínimo aceitável."""
    pass
