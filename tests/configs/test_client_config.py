import pytest

from nodetrace.configs.client_config import DEFAULT_RPC_URL, DEFAULT_TIMEOUT, ClientConfig


def test_defaults() -> None:
    config = ClientConfig()

    assert config.rpc_url == DEFAULT_RPC_URL
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.headers == {}


def test_placeholder_is_expanded_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALCHEMY_API_KEY", "secret")

    config = ClientConfig(rpc_url="https://eth-mainnet.g.alchemy.com/v2/${ALCHEMY_API_KEY}")

    assert config.rpc_url == "https://eth-mainnet.g.alchemy.com/v2/secret"


def test_missing_placeholder_is_marked(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NODE_KEY", raising=False)

    config = ClientConfig(rpc_url="https://node.example/${NODE_KEY}")

    assert config.rpc_url == "https://node.example/missing_key"


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NODETRACE_RPC_URL", "http://archive:8545")
    monkeypatch.setenv("NODETRACE_TIMEOUT", "2.5")

    config = ClientConfig.from_env()

    assert config.rpc_url == "http://archive:8545"
    assert config.timeout == 2.5


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NODETRACE_RPC_URL", raising=False)
    monkeypatch.delenv("NODETRACE_TIMEOUT", raising=False)

    config = ClientConfig.from_env()

    assert config.rpc_url == DEFAULT_RPC_URL
    assert config.timeout == DEFAULT_TIMEOUT
