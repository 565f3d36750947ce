from typing import Any, Optional

from nodetrace.configs.client_config import ClientConfig
from nodetrace.traces import Traces
from nodetrace.transport import HttpTransport, Transport


class NodeClient:
    """
    Entry point bundling a transport with the namespaces built on it.

    Pass either a config (an HttpTransport is created and owned by the client)
    or an existing transport, which is shared and left open on close.
    """

    def __init__(self, config: Optional[ClientConfig] = None, transport: Optional[Transport] = None):
        if transport is None:
            self.config = config or ClientConfig.from_env()
            self.transport: Transport = HttpTransport(self.config)
            self._owns_transport = True
        else:
            self.config = config
            self.transport = transport
            self._owns_transport = False
        self._trace = Traces(self.transport)

    @property
    def trace(self) -> Traces[Any]:
        return self._trace

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> "NodeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
