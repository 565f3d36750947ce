from typing import Any, Awaitable, Generator, Generic, Type, TypeVar

import msgspec

from nodetrace.errors import DecodeError

T = TypeVar("T")


class CallFuture(Generic[T]):
    """
    Pending result of one dispatched call, bound to the type it decodes into.

    Awaiting it awaits the transport's raw result and converts it. Transport
    failures pass through untouched; a shape mismatch raises DecodeError with
    the raw value attached. It can be awaited once.
    """

    def __init__(self, inner: Awaitable[Any], result_type: Type[T]):
        self._inner = inner
        self.result_type = result_type
        self._awaited = False

    def __await__(self) -> Generator[Any, None, T]:
        return self._resolve().__await__()

    async def _resolve(self) -> T:
        if self._awaited:
            raise RuntimeError("CallFuture has already been awaited")
        self._awaited = True

        raw = await self._inner
        try:
            return msgspec.convert(raw, type=self.result_type)
        except msgspec.ValidationError as e:
            raise DecodeError(self.result_type, raw, str(e)) from e

    def close(self) -> None:
        """Drop a future that will never be awaited without a runtime warning."""
        close = getattr(self._inner, "close", None)
        if close is not None and not self._awaited:
            close()
        self._awaited = True
