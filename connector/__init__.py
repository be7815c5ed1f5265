"""
Stable Treasury v1.0 - Connector
=================================

Interfaces abstratas + implementação mock dos serviços externos.
"""

from .base import BaseExchange, BaseLedger, BaseOracle, BaseWrapBridge
from .errors import (
    ConnectorError, ExternalCallFailure, InsufficientFunds, SlippageExceeded,
)

__all__ = [
    "BaseExchange", "BaseLedger", "BaseOracle", "BaseWrapBridge",
    "ConnectorError", "ExternalCallFailure", "InsufficientFunds", "SlippageExceeded",
]
