"""
Stable Treasury v1.0 — Cache Store
===================================

Checkpoint local do cache de cotações em JSON.

Permite que invocações separadas da CLI (warmup, balance, status)
compartilhem o mesmo cache. Arquivo ausente ou corrompido = cache vazio.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from core.constants import CACHE_CAPACITY, DEFAULT_TIME_UNIT_SECONDS
from treasury.rate_cache import RateCache
from treasury.state import TreasuryState

logger = logging.getLogger("Persistence.CacheStore")


class CacheStore:
    """Leitura/escrita do cache de cotações em disco."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(
        self,
        capacity: int = CACHE_CAPACITY,
        time_unit: float = DEFAULT_TIME_UNIT_SECONDS,
    ) -> TreasuryState:
        """
        Restaura o estado do tesouro.

        Returns:
            TreasuryState com o cache salvo, ou não inicializado se o
            arquivo não existe / é inválido.
        """
        data = self._read()
        if data is None:
            return TreasuryState(capacity=capacity, time_unit=time_unit)

        # Capacidade e unidade vêm da config atual, não do arquivo
        cache = RateCache(capacity=capacity, time_unit=time_unit)
        for sample in RateCache.from_dict(data).samples:
            cache.append(sample.timestamp, sample.rate)

        logger.info(f"Cache restaurado de {self.path} ({len(cache)}/{capacity} amostras)")
        return TreasuryState(capacity=capacity, time_unit=time_unit, cache=cache)

    def save(self, state: TreasuryState) -> None:
        """Grava o cache atual. Estado não inicializado não gera arquivo."""
        if state.cache is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(state.cache.to_dict(), f, indent=2)
        tmp.replace(self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Cache removido de {self.path}")

    def _read(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("formato inesperado")
            # Valida as amostras antes de aceitar o arquivo
            RateCache.from_dict(data)
            return data
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning(f"Cache em {self.path} ignorado: {e}")
            return None
