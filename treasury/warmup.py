"""
Stable Treasury v1.0 - Warmup do Cache
=======================================

Alimenta o cache de cotações com amostras do oráculo.

Fluxo do warmup:
  - Cada chamada lê UMA cotação do oráculo e a anexa ao cache
  - São necessárias 8 chamadas antes da primeira decisão
  - Em produção roda periodicamente (run_warmup_loop)
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from connector.base import BaseOracle
from connector.errors import ExternalCallFailure
from core.constants import NATIVE_DECIMALS
from core.models import RateSample
from core.utils import price_to_rate
from .state import TreasuryState

logger = logging.getLogger("Treasury.Warmup")


async def run_warmup(
    oracle: BaseOracle,
    state: TreasuryState,
    clock: Callable[[], float] = time.time,
) -> RateSample:
    """
    Lê uma cotação do oráculo e anexa ao cache.

    Args:
        oracle: Oráculo de preço.
        state: Dono do cache de cotações.
        clock: Fonte do timestamp da amostra.

    Returns:
        Amostra anexada.
    """
    price = await oracle.get_exchange_rate()
    rate = price_to_rate(price, NATIVE_DECIMALS)
    sample = state.append(clock(), rate)

    cache = state.cache
    logger.info(f"Warmup: rate={rate} ({len(cache)}/{cache.capacity} amostras)")
    return sample


async def run_warmup_loop(
    oracle: BaseOracle,
    state: TreasuryState,
    interval: float,
    iterations: Optional[int] = None,
    clock: Callable[[], float] = time.time,
    on_sample: Optional[Callable[[RateSample], None]] = None,
) -> int:
    """
    Warmup periódico. Falhas do oráculo são logadas e o loop continua.

    Args:
        interval: Segundos entre leituras.
        iterations: Número de leituras (None = infinito).
        on_sample: Callback após cada amostra (ex: persistir o cache).

    Returns:
        Número de amostras anexadas.
    """
    appended = 0
    done = 0
    while iterations is None or done < iterations:
        try:
            sample = await run_warmup(oracle, state, clock)
            appended += 1
            if on_sample:
                on_sample(sample)
        except ExternalCallFailure as e:
            logger.warning(f"Warmup falhou: {e}")
        done += 1
        if iterations is None or done < iterations:
            await asyncio.sleep(interval)
    return appended
