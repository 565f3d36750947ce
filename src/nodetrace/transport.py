import itertools
import logging
from typing import Any, Awaitable, List, Optional, Protocol, runtime_checkable

import httpx
import msgspec

from nodetrace.configs.client_config import ClientConfig
from nodetrace.errors import RPCError, TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """
    Anything that can execute a named remote call with positional parameters.
    """

    def execute(self, method: str, params: List[Any]) -> Awaitable[Any]:
        ...


class RPCRequest(msgspec.Struct):
    """
    Standard JSON-RPC request schema.
    """
    method: str
    params: list[Any]
    id: int = 1
    jsonrpc: str = "2.0"


class RPCErrorObject(msgspec.Struct):
    code: int
    message: str
    data: Any = None


class RPCResponse(msgspec.Struct):
    """
    Generic JSON-RPC response envelope.
    The result stays untyped here; callers decode it into the shape they expect.
    """
    jsonrpc: str = "2.0"
    id: Any = None
    result: Any = None
    error: Optional[RPCErrorObject] = None


class HttpTransport:
    """
    JSON-RPC over HTTP with one persistent httpx.AsyncClient.

    The transport can carry any number of concurrent calls. It never retries;
    failures surface as TransportError (or RPCError for node-side errors).
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.timeout, headers=config.headers)
        self._ids = itertools.count(1)

    async def execute(self, method: str, params: List[Any]) -> Any:
        request = RPCRequest(method=method, params=params, id=next(self._ids))
        logger.debug("RPC -> %s id=%s params=%s", method, request.id, params)

        try:
            response = await self.client.post(
                self.config.rpc_url,
                content=msgspec.json.encode(request),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.debug("RPC %s id=%s failed: %s", method, request.id, e)
            raise TransportError(f"RPC request failed: {e}") from e

        # Nodes may pair a 4xx/5xx status with a JSON-RPC error body; that body wins.
        envelope: Optional[RPCResponse] = None
        decode_error: Optional[msgspec.DecodeError] = None
        try:
            envelope = msgspec.json.decode(response.content, type=RPCResponse)
        except msgspec.DecodeError as e:
            decode_error = e

        if envelope is not None and envelope.error is not None:
            err = envelope.error
            logger.debug("RPC %s id=%s error %s: %s", method, request.id, err.code, err.message)
            raise RPCError(f"Node RPC Error: {err.message}", code=err.code, data=err.data)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.debug("RPC %s id=%s failed: %s", method, request.id, e)
            raise TransportError(f"RPC request failed: {e}") from e

        if envelope is None:
            raise TransportError(f"RPC returned invalid envelope: {decode_error}") from decode_error

        return envelope.result

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
