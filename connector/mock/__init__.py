"""
Stable Treasury v1.0 - Mock Connector
======================================

Serviços externos simulados em memória.
"""

from .client import MockConnector, MockPool

__all__ = ["MockConnector", "MockPool"]
