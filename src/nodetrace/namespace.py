from typing import Any, Generic, List, Type, TypeVar

from nodetrace.call import CallFuture
from nodetrace.transport import Transport

TransportT = TypeVar("TransportT", bound=Transport)
T = TypeVar("T")


class Namespace(Generic[TransportT]):
    """
    A group of remote methods sharing one transport handle.
    """

    def __init__(self, transport: TransportT):
        self._transport = transport

    @property
    def transport(self) -> TransportT:
        return self._transport

    def _call(self, method: str, params: List[Any], result_type: Type[T]) -> CallFuture[T]:
        return CallFuture(self._transport.execute(method, params), result_type)
