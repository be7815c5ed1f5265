"""
Builders compartilhados da suíte de testes.
"""

from core.models import PoolConfig
from connector.mock.client import MockConnector
from executor.plans import ExecutionSettings
from orchestrator.orchestrator import Orchestrator
from orchestrator.randomness import FixedSeedSource
from treasury.state import TreasuryState


TREASURY = "usn.test.near"
USDT = "usdt.test.near"
WRAP = "wrap.test.near"
SWAP_POOL_ID = 3
POOL_ID = 1
EXCHANGE = "ref.test.near"
START = 1_700_000_000.0
HOUR = 3600.0


# ── Helpers ──────────────────────────────────────────────────────────────────

class FakeClock:
    """Relógio controlado: cada leitura devolve `now`; `tick` avança."""

    def __init__(self, now: float = START):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float = HOUR) -> float:
        self.now += seconds
        return self.now


def make_pool(pool_id=POOL_ID, tokens=(TREASURY, USDT), decimals=(18, 6)):
    """PoolConfig estável (stablecoin + USDT)."""
    return PoolConfig(
        id=pool_id,
        exchange_id=EXCHANGE,
        tokens=tuple(tokens),
        decimals=tuple(decimals),
    )


def make_settings():
    return ExecutionSettings(
        treasury_account=TREASURY,
        stable_id=TREASURY,
        wrap_id=WRAP,
        swap_pool_id=SWAP_POOL_ID,
    )


def make_connector(
    rate=11.1439,
    native_balance=5_000_000.0,
    stable_supply=60_000_000.0,
    amounts=(5_000_000.0, 5_000_000.0),
    **extra,
):
    """MockConnector com um pool estável usn/usdt e saldos realistas."""
    config = {
        "treasury_account": TREASURY,
        "wrap_id": WRAP,
        "swap_pool_id": SWAP_POOL_ID,
        "rate": rate,
        "native_balance": native_balance,
        "stable_supply": stable_supply,
        "pools": [{
            "id": POOL_ID,
            "exchange_id": EXCHANGE,
            "tokens": [TREASURY, USDT],
            "decimals": [18, 6],
            "amounts": list(amounts),
            "treasury_share": 1.0,
        }],
    }
    config.update(extra)
    return MockConnector(config)


def make_orchestrator(connector=None, pools=None, seed=7, clock=None, state=None, cache_store=None):
    """Orchestrator ligado ao mock em todas as interfaces."""
    connector = connector or make_connector()
    pools = pools if pools is not None else {POOL_ID: make_pool()}
    return Orchestrator(
        exchange=connector,
        bridge=connector,
        oracle=connector,
        ledger=connector,
        pools=pools,
        settings=make_settings(),
        state=state,
        random_source=FixedSeedSource(seed),
        clock=clock or FakeClock(),
        cache_store=cache_store,
    )


def make_warm_state(rates, start=START, step=HOUR):
    """TreasuryState com as cotações dadas, espaçadas de `step` segundos."""
    state = TreasuryState()
    for i, rate in enumerate(rates):
        state.append(start + i * step, rate)
    return state


async def warm_up(orchestrator, n=8, step=HOUR):
    """Executa `n` warmups avançando o relógio entre eles."""
    samples = []
    for _ in range(n):
        samples.append(await orchestrator.warmup())
        orchestrator.clock.tick(step)
    return samples
