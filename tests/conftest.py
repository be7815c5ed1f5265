"""
Fixtures compartilhadas para toda a suíte de testes.
"""

import pytest

from .helpers import FakeClock, make_connector, make_orchestrator, make_pool, make_settings


@pytest.fixture
def connector():
    return make_connector()


@pytest.fixture
def pool():
    return make_pool()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def orchestrator(connector, clock):
    return make_orchestrator(connector=connector, clock=clock)


@pytest.fixture
def tmp_yaml_config(tmp_path):
    """Cria default.yaml temporário."""
    yaml_content = """
network: ${TEST_TREASURY_NETWORK:testnet}
treasury_account: ${TEST_TREASURY_ACCOUNT}
stable_token_id: usn.testnet
pools:
  - id: 7
    exchange_id: ref-finance.testnet
    tokens: [usn.testnet, usdt.testnet]
    decimals: [18, 6]
cache:
  time_unit_seconds: 60
  state_file: "{state_file}"
connector:
  type: mock
  rate: 5.5
  native_balance: 1000.0
  stable_supply: 2000.0
  pools:
    - id: 7
      amounts: [100.0, 200.0]
logging:
  level: "DEBUG"
""".replace("{state_file}", str(tmp_path / "cache.json"))
    path = tmp_path / "default.yaml"
    path.write_text(yaml_content)
    return str(path)
