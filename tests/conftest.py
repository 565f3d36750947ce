import copy
from typing import Any, Dict, List, Tuple

import pytest

from nodetrace.configs.client_config import ClientConfig
from nodetrace.traces import Traces
from nodetrace.transport import HttpTransport

ADDRESS = "0x0000000000000000000000000000000000000123"

_BLOCKTRACE: Dict[str, Any] = {
    "output": "0x010203",
    "stateDiff": None,
    "trace": [
        {
            "action": {
                "callType": "call",
                "from": "0x0000000000000000000000000000000000000000",
                "gas": "0x1dcd12f8",
                "input": "0x",
                "to": ADDRESS,
                "value": "0x1",
            },
            "result": {"gasUsed": "0x0", "output": "0x"},
            "subtraces": 0,
            "traceAddress": [],
            "type": "call",
        }
    ],
    "vmTrace": None,
}

_TRACE: Dict[str, Any] = {
    "action": {
        "callType": "call",
        "from": "0xaa7b131dc60b80d3cf5e59b5a21a666aa039c951",
        "gas": "0x0",
        "input": "0x",
        "to": "0xd40aba8166a212d6892125f079c33e6f5ca19814",
        "value": "0x4768d7effc3fbe",
    },
    "blockHash": "0x7eb25504e4c202cf3d62fd585d3e238f592c780cca82dacb2ed3cb5b38883add",
    "blockNumber": 3068185,
    "result": {"gasUsed": "0x0", "output": "0x"},
    "subtraces": 0,
    "traceAddress": [],
    "transactionHash": "0x07da28d752aba3b9dd7060005e554719c6205c8a3aea358599fc9b245c52f1f6",
    "transactionPosition": 0,
    "type": "call",
}


class RecordingTransport:
    """
    In-memory transport: records every dispatched call and answers with a canned result.
    """

    def __init__(self, result: Any = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: List[Tuple[str, List[Any]]] = []

    async def execute(self, method: str, params: List[Any]) -> Any:
        self.calls.append((method, params))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def url() -> str:
    """Shared RPC URL for all transport tests."""
    return "http://localhost:8545"


@pytest.fixture
def recording() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def traces(recording: RecordingTransport) -> Traces[RecordingTransport]:
    return Traces(recording)


@pytest.fixture
async def transport(url: str):
    """
    Yields an HTTP transport and ensures its client is closed after the test.
    """
    t = HttpTransport(ClientConfig(rpc_url=url))
    yield t
    await t.aclose()


@pytest.fixture
def blocktrace_payload() -> Dict[str, Any]:
    """A trace-tree as returned by trace_call / trace_replayTransaction."""
    return copy.deepcopy(_BLOCKTRACE)


@pytest.fixture
def trace_payload() -> Dict[str, Any]:
    """A single trace entry as returned by trace_get."""
    return copy.deepcopy(_TRACE)
