"""
Parameter encoding for the trace namespace.

Every operation has one `encode_*_params` function that turns typed arguments
into the exact positional parameter list the remote method expects. All
functions are pure and raise EncodingError before anything is dispatched.
"""
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import msgspec

from nodetrace.errors import EncodingError
from nodetrace.types import (
    BLOCK_TAGS,
    AccessListItem,
    BlockId,
    BlockNumber,
    CallRequest,
    TraceFilter,
    TraceType,
)

ADDRESS_BYTES = 20
HASH_BYTES = 32

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")
_QUANTITY_RE = re.compile(r"^0x(0|[1-9a-fA-F][0-9a-fA-F]*)$")

TRACER_CONFIG_KEY = "tracer"
CALL_TRACER = "callTracer"

# CallRequest fields holding quantities; everything else is hex data or an address
_QUANTITY_FIELDS = {
    "gas",
    "gas_price",
    "value",
    "transaction_type",
    "max_fee_per_gas",
    "max_priority_fee_per_gas",
}
_ADDRESS_FIELDS = {"from_address", "to"}


# --- scalar encoders ---

def encode_quantity(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Quantity must be an int, got {type(value).__name__}")
    if value < 0:
        raise EncodingError(f"Quantity must be non-negative, got {value}")
    return hex(value)


def encode_data(value: Union[str, bytes], length: Optional[int] = None) -> str:
    """
    Canonical 0x hex form of a byte string.

    `length`, when given, is the exact number of bytes required.
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        if not _HEX_RE.match(value) or len(value) % 2:
            raise EncodingError(f"Invalid hex data: {value!r}")
        raw = bytes.fromhex(value[2:])
    else:
        raise EncodingError(f"Expected hex string or bytes, got {type(value).__name__}")

    if length is not None and len(raw) != length:
        raise EncodingError(f"Expected {length} bytes, got {len(raw)}")
    return "0x" + raw.hex()


def encode_address(value: Union[str, bytes]) -> str:
    return encode_data(value, length=ADDRESS_BYTES)


def encode_hash(value: Union[str, bytes]) -> str:
    return encode_data(value, length=HASH_BYTES)


def encode_block_number(block: BlockNumber) -> str:
    if isinstance(block, str):
        if block in BLOCK_TAGS:
            return block
        if _QUANTITY_RE.match(block):
            return block.lower()
        raise EncodingError(f"Invalid block number: {block!r}")
    return encode_quantity(block)


def encode_block_id(block: Union[BlockId, BlockNumber]) -> Dict[str, str]:
    """
    EIP-1898 object form: {"blockNumber": ...} or {"blockHash": ...}.

    Plain numbers and tags are promoted to a number-based BlockId.
    """
    if not isinstance(block, BlockId):
        block = BlockId.number(block)
    if block.block_hash is not None:
        return {"blockHash": encode_hash(block.block_hash)}
    return {"blockNumber": encode_block_number(block.block_number)}  # type: ignore[arg-type]


def encode_trace_types(trace_types: Iterable[Union[TraceType, str]]) -> List[str]:
    if isinstance(trace_types, (str, TraceType)) or not isinstance(trace_types, Iterable):
        raise EncodingError("Trace types must be given as a list")
    encoded: List[str] = []
    for trace_type in trace_types:
        try:
            encoded.append(TraceType(trace_type).value)
        except ValueError:
            raise EncodingError(f"Unknown trace type: {trace_type!r}") from None
    return encoded


def encode_indices(indices: Sequence[int]) -> List[str]:
    if not isinstance(indices, Iterable) or isinstance(indices, (str, bytes)):
        raise EncodingError("Trace indices must be given as a list")
    return [encode_quantity(i) for i in indices]


# --- structured encoders ---

def _encode_access_list(items: List[AccessListItem]) -> List[Dict[str, Any]]:
    return [
        {
            "address": encode_address(item.address),
            "storageKeys": [encode_hash(key) for key in item.storage_keys],
        }
        for item in items
    ]


def encode_call_request(req: CallRequest) -> Dict[str, Any]:
    """
    Unset fields are omitted: the node reads a missing field as unspecified,
    which is not the same as zero.
    """
    if not isinstance(req, CallRequest):
        raise EncodingError(f"Expected a CallRequest, got {type(req).__name__}")
    encoded: Dict[str, Any] = {}
    for field in msgspec.structs.fields(req):
        value = getattr(req, field.name)
        if value is None:
            continue
        if field.name in _QUANTITY_FIELDS:
            encoded[field.encode_name] = encode_quantity(value)
        elif field.name in _ADDRESS_FIELDS:
            encoded[field.encode_name] = encode_address(value)
        elif field.name == "access_list":
            encoded[field.encode_name] = _encode_access_list(value)
        else:
            encoded[field.encode_name] = encode_data(value)
    return encoded


def _encode_count(value: int, name: str) -> int:
    # plain JSON integer on the wire, not a hex quantity
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise EncodingError(f"Filter {name} must be a non-negative int, got {value!r}")
    return value


def encode_trace_filter(trace_filter: TraceFilter) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {}
    if trace_filter.from_block is not None:
        encoded["fromBlock"] = encode_block_number(trace_filter.from_block)
    if trace_filter.to_block is not None:
        encoded["toBlock"] = encode_block_number(trace_filter.to_block)
    if trace_filter.from_address is not None:
        encoded["fromAddress"] = [encode_address(a) for a in trace_filter.from_address]
    if trace_filter.to_address is not None:
        encoded["toAddress"] = [encode_address(a) for a in trace_filter.to_address]
    if trace_filter.after is not None:
        encoded["after"] = _encode_count(trace_filter.after, "after")
    if trace_filter.count is not None:
        encoded["count"] = _encode_count(trace_filter.count, "count")
    return encoded


def tracer_config() -> Dict[str, str]:
    return {TRACER_CONFIG_KEY: CALL_TRACER}


# --- per-operation parameter lists ---

def encode_call_params(
    req: CallRequest,
    trace_types: Iterable[Union[TraceType, str]],
    block: Optional[BlockNumber] = None,
) -> List[Any]:
    return [
        encode_call_request(req),
        encode_trace_types(trace_types),
        encode_block_number("latest" if block is None else block),
    ]


def encode_call_many_params(
    requests: Iterable[Tuple[CallRequest, Iterable[Union[TraceType, str]]]],
    block: Optional[Union[BlockId, BlockNumber]] = None,
) -> List[Any]:
    # The tip default here is the block-identifier form, not the bare "latest"
    # token used by the other operations. Nodes accept both.
    if not isinstance(requests, Iterable):
        raise EncodingError("call_many expects (CallRequest, trace types) pairs")
    pairs: List[Any] = []
    for pair in requests:
        try:
            req, types = pair
        except (TypeError, ValueError):
            raise EncodingError("call_many expects (CallRequest, trace types) pairs") from None
        pairs.append([encode_call_request(req), encode_trace_types(types)])
    return [pairs, encode_block_id(BlockId.latest() if block is None else block)]


def encode_raw_transaction_params(
    data: Union[str, bytes],
    trace_types: Iterable[Union[TraceType, str]],
) -> List[Any]:
    return [encode_data(data), encode_trace_types(trace_types)]


def encode_replay_transaction_params(
    tx_hash: Union[str, bytes],
    trace_types: Iterable[Union[TraceType, str]],
) -> List[Any]:
    return [encode_hash(tx_hash), encode_trace_types(trace_types)]


def encode_replay_block_transactions_params(
    block: BlockNumber,
    trace_types: Iterable[Union[TraceType, str]],
) -> List[Any]:
    return [encode_block_number(block), encode_trace_types(trace_types)]


def encode_block_params(block: BlockNumber) -> List[Any]:
    return [encode_block_number(block), tracer_config()]


def encode_filter_params(trace_filter: TraceFilter) -> List[Any]:
    return [encode_trace_filter(trace_filter)]


def encode_get_params(tx_hash: Union[str, bytes], indices: Sequence[int]) -> List[Any]:
    return [encode_hash(tx_hash), encode_indices(indices)]


def encode_transaction_params(tx_hash: Union[str, bytes]) -> List[Any]:
    return [encode_hash(tx_hash)]
