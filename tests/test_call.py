from typing import Any, Dict, List

import pytest

from nodetrace.call import CallFuture
from nodetrace.errors import DecodeError, TransportError
from nodetrace.types import BlockTrace, Trace


async def _resolve(value: Any) -> Any:
    return value


async def _fail(error: Exception) -> Any:
    raise error


@pytest.mark.asyncio
async def test_decodes_into_expected_type(blocktrace_payload: Dict[str, Any]) -> None:
    result = await CallFuture(_resolve(blocktrace_payload), BlockTrace)

    assert isinstance(result, BlockTrace)
    assert result.output == "0x010203"
    assert result.trace is not None
    assert result.trace[0].action.value == "0x1"


@pytest.mark.asyncio
async def test_single_object_into_list_type_fails(blocktrace_payload: Dict[str, Any]) -> None:
    with pytest.raises(DecodeError) as exc_info:
        await CallFuture(_resolve(blocktrace_payload), List[BlockTrace])

    assert exc_info.value.raw == blocktrace_payload
    assert exc_info.value.expected == List[BlockTrace]


@pytest.mark.asyncio
async def test_list_into_single_object_type_fails(trace_payload: Dict[str, Any]) -> None:
    """No partial result: a one-element list is still the wrong shape."""
    with pytest.raises(DecodeError) as exc_info:
        await CallFuture(_resolve([trace_payload]), Trace)

    assert exc_info.value.raw == [trace_payload]
    assert "Trace" in str(exc_info.value)


@pytest.mark.asyncio
async def test_null_result_is_a_decode_failure() -> None:
    with pytest.raises(DecodeError):
        await CallFuture(_resolve(None), Trace)


@pytest.mark.asyncio
async def test_transport_failure_passes_through_unchanged() -> None:
    error = TransportError("connection refused")

    with pytest.raises(TransportError) as exc_info:
        await CallFuture(_fail(error), BlockTrace)

    assert exc_info.value is error
    assert not isinstance(exc_info.value, DecodeError)


@pytest.mark.asyncio
async def test_resolves_only_once(trace_payload: Dict[str, Any]) -> None:
    future = CallFuture(_resolve(trace_payload), Trace)
    await future

    with pytest.raises(RuntimeError, match="already been awaited"):
        await future


def test_close_discards_pending_call() -> None:
    pending = _resolve({})
    future = CallFuture(pending, Trace)

    future.close()

    assert pending.cr_frame is None
