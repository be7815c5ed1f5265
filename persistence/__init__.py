"""
Stable Treasury v1.0 — Persistence (Memória)
=============================================

Persiste o cache de cotações localmente entre execuções.
"""

from .cache_store import CacheStore

__all__ = ["CacheStore"]
