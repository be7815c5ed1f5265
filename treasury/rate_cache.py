"""
Stable Treasury v1.0 - Cache FIFO de Cotações
==============================================

Janela deslizante que mantém as últimas N cotações do oráculo.
Usado pelo modelo de decisão como série temporal da tendência.

O cache garante que:
  - Sempre mantém no máximo `capacity` amostras (FIFO: a mais antiga é descartada)
  - Só entrega a série (`collect`) quando está completo
  - Converte timestamps para tempo relativo ao instante da coleta
"""

from collections import deque
from typing import List, Optional, Tuple

import pandas as pd

from core.constants import CACHE_CAPACITY, DEFAULT_TIME_UNIT_SECONDS
from core.models import RateSample
from .errors import NotWarmedUp


class RateCache:
    """Buffer FIFO de amostras (timestamp, rate)."""

    def __init__(
        self,
        capacity: int = CACHE_CAPACITY,
        time_unit: float = DEFAULT_TIME_UNIT_SECONDS,
    ):
        """
        Args:
            capacity: Número de amostras exigido pelo modelo de decisão.
            time_unit: Segundos por unidade de tempo entregue em `collect`.
        """
        self.capacity = capacity
        self.time_unit = time_unit
        self._samples: deque[RateSample] = deque(maxlen=capacity)

    def append(self, timestamp: float, rate: float) -> None:
        """Adiciona amostra. Se cheio, descarta a mais antiga."""
        self._samples.append(RateSample(timestamp=float(timestamp), rate=float(rate)))

    def is_ready(self) -> bool:
        """True se tem amostras suficientes para decisão."""
        return len(self._samples) >= self.capacity

    def collect(self, now: float) -> Tuple[List[float], List[float]]:
        """
        Entrega a série temporal completa, da mais antiga para a mais recente.

        Args:
            now: Instante da coleta (Unix timestamp, segundos).

        Returns:
            (time_points, rates): tempos relativos a `now` em `time_unit`
            (negativos para o passado) e cotações.

        Raises:
            NotWarmedUp: Menos de `capacity` amostras.
        """
        if not self.is_ready():
            raise NotWarmedUp(
                f"Cache com {len(self._samples)}/{self.capacity} amostras"
            )

        time_points = [(s.timestamp - now) / self.time_unit for s in self._samples]
        rates = [s.rate for s in self._samples]
        return time_points, rates

    def to_dataframe(self) -> pd.DataFrame:
        """
        Converte cache para DataFrame.

        Returns:
            DataFrame com colunas [timestamp, time, rate].
            DataFrame vazio se cache estiver vazio.
        """
        if not self._samples:
            return pd.DataFrame(columns=['timestamp', 'time', 'rate'])

        df = pd.DataFrame([
            {'timestamp': s.timestamp, 'rate': s.rate}
            for s in self._samples
        ])
        df.insert(1, 'time', pd.to_datetime(df['timestamp'], unit='s', utc=True))
        return df

    def to_dict(self) -> dict:
        return {
            "capacity": self.capacity,
            "time_unit": self.time_unit,
            "samples": [[s.timestamp, s.rate] for s in self._samples],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RateCache":
        cache = cls(
            capacity=data.get("capacity", CACHE_CAPACITY),
            time_unit=data.get("time_unit", DEFAULT_TIME_UNIT_SECONDS),
        )
        for timestamp, rate in data.get("samples", []):
            cache.append(timestamp, rate)
        return cache

    @property
    def last_sample(self) -> Optional[RateSample]:
        """Retorna a amostra mais recente ou None."""
        return self._samples[-1] if self._samples else None

    @property
    def samples(self) -> List[RateSample]:
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def clear(self) -> None:
        """Limpa o cache."""
        self._samples.clear()

    def __repr__(self) -> str:
        return f"RateCache(len={len(self)}, capacity={self.capacity}, ready={self.is_ready()})"
