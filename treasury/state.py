"""
Stable Treasury v1.0 - Estado do Tesouro
=========================================

Dono explícito do cache de cotações do processo.

O cache é criado sob demanda no primeiro `append`. Leituras antes disso
falham com NotWarmedUp em vez de assumir um cache vazio implícito.
"""

import logging
from typing import List, Optional, Tuple

from core.constants import CACHE_CAPACITY, DEFAULT_TIME_UNIT_SECONDS
from core.models import RateSample
from .errors import NotWarmedUp
from .rate_cache import RateCache

logger = logging.getLogger("Treasury.State")


class TreasuryState:
    """Interface estreita (append/collect) sobre o RateCache do processo."""

    def __init__(
        self,
        capacity: int = CACHE_CAPACITY,
        time_unit: float = DEFAULT_TIME_UNIT_SECONDS,
        cache: Optional[RateCache] = None,
    ):
        self._capacity = capacity
        self._time_unit = time_unit
        self._cache: Optional[RateCache] = cache

    @property
    def initialized(self) -> bool:
        return self._cache is not None

    def append(self, timestamp: float, rate: float) -> RateSample:
        """Adiciona cotação, inicializando o cache se necessário."""
        if self._cache is None:
            self._cache = RateCache(self._capacity, self._time_unit)
            logger.info(f"Cache de cotações inicializado (capacity={self._capacity})")
        self._cache.append(timestamp, rate)
        return self._cache.last_sample

    def collect(self, now: float) -> Tuple[List[float], List[float]]:
        """Série completa do cache. NotWarmedUp se ausente ou incompleto."""
        if self._cache is None:
            raise NotWarmedUp("Cache de cotações não inicializado")
        return self._cache.collect(now)

    def ensure_ready(self) -> None:
        """Falha cedo (antes de qualquer chamada externa) se o cache não está pronto."""
        if self._cache is None or not self._cache.is_ready():
            raise NotWarmedUp("Treasury cache is not warmed up. Use `warmup`.")

    def reset(self) -> None:
        """Descarta o cache. O próximo `append` recomeça do zero."""
        self._cache = None
        logger.info("Cache de cotações descartado")

    @property
    def cache(self) -> Optional[RateCache]:
        """Cache atual (somente leitura para views/persistência)."""
        return self._cache

    def view(self) -> dict:
        """View do tesouro: amostras do cache."""
        if self._cache is None:
            return {"initialized": False, "ready": False, "samples": []}
        data = self._cache.to_dict()
        data["initialized"] = True
        data["ready"] = self._cache.is_ready()
        return data
