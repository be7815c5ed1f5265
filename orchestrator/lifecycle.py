"""
Stable Treasury v1.0 — Lifecycle
=================================

Funções auxiliares de startup (bootstrap): config, logging e montagem
dos componentes a partir do YAML.

Ordem de inicialização:
  1. load_config (expansão de ${VAR})
  2. setup_logging
  3. build_connector → build_orchestrator (cache restaurado do disco)
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.constants import CACHE_CAPACITY, DEFAULT_TIME_UNIT_SECONDS, Network, NETWORK_PRESETS
from core.models import PoolConfig
from executor.plans import ExecutionSettings
from persistence.cache_store import CacheStore
from treasury.state import TreasuryState
from .orchestrator import Orchestrator
from .randomness import RandomSource

logger = logging.getLogger("Lifecycle")

DEFAULT_TREASURY_ACCOUNT = "usn.test.near"


def load_config(config_path: str) -> dict:
    """
    Carrega configuração YAML com expansão de variáveis de ambiente.

    Suporta ${VAR} e ${VAR:default} no YAML.
    """
    with open(config_path) as f:
        raw = f.read()

    def _expand(match):
        var = match.group(1)
        if ":" in var:
            name, default = var.split(":", 1)
            return os.environ.get(name, default)
        return os.environ.get(var, match.group(0))

    expanded = re.sub(r"\$\{([^}]+)\}", _expand, raw)
    config = yaml.safe_load(expanded)
    return config or {}


def setup_logging(config: dict):
    """Configura logging a partir da config."""
    level = config.get("logging", {}).get("level", "INFO")
    log_file = config.get("logging", {}).get("log_file")

    handlers = [logging.StreamHandler()]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )


def cfg(config: dict, *keys, default=None) -> Any:
    """Acesso aninhado à config: cfg(config, "cache", "state_file")."""
    node: Any = config
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return default if node is None else node


# =============================================================================
# MONTAGEM
# =============================================================================

def parse_pools(config: dict) -> Dict[int, PoolConfig]:
    """Pools estáveis declarados em `pools`, indexados por id."""
    pools: Dict[int, PoolConfig] = {}
    for entry in cfg(config, "pools", default=[]):
        pool = PoolConfig(
            id=int(entry["id"]),
            exchange_id=str(entry.get("exchange_id", "")),
            tokens=tuple(entry["tokens"]),
            decimals=tuple(int(d) for d in entry["decimals"]),
        )
        pools[pool.id] = pool
    return pools


def resolve_settings(config: dict) -> ExecutionSettings:
    """
    Identificadores de execução: preset da rede + overrides explícitos.

    Raises:
        ValueError: Rede desconhecida.
    """
    network = Network(cfg(config, "network", default=Network.SANDBOX.value))
    preset = NETWORK_PRESETS[network]
    treasury_account = cfg(config, "treasury_account", default=DEFAULT_TREASURY_ACCOUNT)

    return ExecutionSettings(
        treasury_account=treasury_account,
        stable_id=cfg(config, "stable_token_id", default=treasury_account),
        wrap_id=cfg(config, "wrap_id", default=preset["wrap_id"]),
        swap_pool_id=int(cfg(config, "swap_pool_id", default=preset["swap_pool_id"])),
    )


def build_connector(config: dict, settings: Optional[ExecutionSettings] = None):
    """
    Cria o connector configurado em `connector.type`.

    O mock recebe tokens/decimais dos pools da config e o estado inicial
    (quantidades, saldos) de `connector`.
    """
    settings = settings or resolve_settings(config)
    conn_cfg = dict(cfg(config, "connector", default={}))
    conn_type = conn_cfg.pop("type", "mock")

    if conn_type != "mock":
        raise ValueError(f"Connector desconhecido: {conn_type}")

    from connector.mock.client import MockConnector

    initial = {p["id"]: p for p in conn_cfg.pop("pools", [])}
    pools = []
    for pool in parse_pools(config).values():
        state = initial.get(pool.id, {})
        pools.append({
            "id": pool.id,
            "exchange_id": pool.exchange_id,
            "tokens": list(pool.tokens),
            "decimals": list(pool.decimals),
            "amounts": state.get("amounts", [0.0] * len(pool.tokens)),
            "treasury_share": state.get("treasury_share", 1.0),
        })

    conn_cfg.update({
        "treasury_account": settings.treasury_account,
        "stable_token_id": settings.stable_id,
        "wrap_id": settings.wrap_id,
        "swap_pool_id": settings.swap_pool_id,
        "pools": pools,
    })
    logger.info(f"Connector: {conn_type} ({len(pools)} pools)")
    return MockConnector(conn_cfg)


def build_orchestrator(
    config: dict,
    connector=None,
    random_source: Optional[RandomSource] = None,
) -> Orchestrator:
    """Monta o Orchestrator com cache restaurado de `cache.state_file`."""
    settings = resolve_settings(config)
    connector = connector or build_connector(config, settings)

    capacity = CACHE_CAPACITY
    time_unit = float(cfg(config, "cache", "time_unit_seconds", default=DEFAULT_TIME_UNIT_SECONDS))
    state_file = cfg(config, "cache", "state_file")

    cache_store = CacheStore(state_file) if state_file else None
    state = (
        cache_store.load(capacity, time_unit) if cache_store
        else TreasuryState(capacity=capacity, time_unit=time_unit)
    )

    logger.info(
        f"Tesouro {settings.treasury_account} | wrap={settings.wrap_id} "
        f"| swap pool={settings.swap_pool_id}"
    )
    return Orchestrator(
        exchange=connector,
        bridge=connector,
        oracle=connector,
        ledger=connector,
        pools=parse_pools(config),
        settings=settings,
        state=state,
        random_source=random_source,
        cache_store=cache_store,
    )
