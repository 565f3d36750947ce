import os
import re
from typing import Dict

import msgspec

RPC_URL_ENV = "NODETRACE_RPC_URL"
TIMEOUT_ENV = "NODETRACE_TIMEOUT"
DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_TIMEOUT = 30.0

_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ClientConfig(msgspec.Struct):
    rpc_url: str = DEFAULT_RPC_URL
    timeout: float = DEFAULT_TIMEOUT
    headers: Dict[str, str] = msgspec.field(default_factory=dict)

    def __post_init__(self):
        # ${API_KEY}-style placeholders are filled in from the environment
        self.rpc_url = _PLACEHOLDER_RE.sub(
            lambda m: os.getenv(m.group(1), "missing_key"), self.rpc_url
        )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            rpc_url=os.getenv(RPC_URL_ENV, DEFAULT_RPC_URL),
            timeout=float(os.getenv(TIMEOUT_ENV, str(DEFAULT_TIMEOUT))),
        )
