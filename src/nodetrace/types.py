from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union, get_args

import msgspec

BlockTag = Literal["latest", "earliest", "pending", "safe", "finalized"]
BLOCK_TAGS = get_args(BlockTag)

# An int, a tag, or a 0x-prefixed hex quantity.
BlockNumber = Union[int, str]


class TraceType(str, Enum):
    """
    Categories of trace output a node can be asked for.
    """
    TRACE = "trace"
    VM_TRACE = "vmTrace"
    STATE_DIFF = "stateDiff"


class BlockId:
    """
    Reference to a block either by number/tag or by hash.
    """

    __slots__ = ("block_number", "block_hash")

    def __init__(self, block_number: Optional[BlockNumber] = None, block_hash: Optional[Union[str, bytes]] = None):
        if (block_number is None) == (block_hash is None):
            raise ValueError("BlockId needs exactly one of block_number or block_hash")
        self.block_number = block_number
        self.block_hash = block_hash

    @classmethod
    def number(cls, block_number: BlockNumber) -> "BlockId":
        return cls(block_number=block_number)

    @classmethod
    def hash(cls, block_hash: Union[str, bytes]) -> "BlockId":
        return cls(block_hash=block_hash)

    @classmethod
    def latest(cls) -> "BlockId":
        return cls(block_number="latest")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockId):
            return NotImplemented
        return self.block_number == other.block_number and self.block_hash == other.block_hash

    def __repr__(self) -> str:
        if self.block_hash is not None:
            return f"BlockId.hash({self.block_hash!r})"
        return f"BlockId.number({self.block_number!r})"


# --- request side ---

class AccessListItem(msgspec.Struct):
    address: str
    storage_keys: List[str] = msgspec.field(name="storageKeys", default_factory=list)


class CallRequest(msgspec.Struct, omit_defaults=True):
    """
    Parameters of a simulated call. Unset fields are left out of the wire object.
    Quantities are ints, addresses and data are 0x hex strings.
    """
    from_address: Optional[str] = msgspec.field(name="from", default=None)
    to: Optional[str] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = msgspec.field(name="gasPrice", default=None)
    value: Optional[int] = None
    data: Optional[str] = None
    transaction_type: Optional[int] = msgspec.field(name="type", default=None)
    access_list: Optional[List[AccessListItem]] = msgspec.field(name="accessList", default=None)
    max_fee_per_gas: Optional[int] = msgspec.field(name="maxFeePerGas", default=None)
    max_priority_fee_per_gas: Optional[int] = msgspec.field(name="maxPriorityFeePerGas", default=None)


class TraceFilter(msgspec.Struct, omit_defaults=True):
    """
    Selection criteria for trace_filter. An empty filter matches everything.
    """
    from_block: Optional[BlockNumber] = msgspec.field(name="fromBlock", default=None)
    to_block: Optional[BlockNumber] = msgspec.field(name="toBlock", default=None)
    from_address: Optional[List[str]] = msgspec.field(name="fromAddress", default=None)
    to_address: Optional[List[str]] = msgspec.field(name="toAddress", default=None)
    after: Optional[int] = None
    count: Optional[int] = None


# --- result side ---

class TraceAction(msgspec.Struct):
    """
    The 'action' field of a trace entry. Call, create, suicide and reward
    actions share one flat shape; fields not used by a kind stay None.
    """
    from_address: Optional[str] = msgspec.field(name="from", default=None)
    to: Optional[str] = None
    value: Optional[str] = None
    gas: Optional[str] = None
    input: Optional[str] = None
    call_type: Optional[str] = msgspec.field(name="callType", default=None)
    init: Optional[str] = None
    address: Optional[str] = None
    refund_address: Optional[str] = msgspec.field(name="refundAddress", default=None)
    balance: Optional[str] = None
    author: Optional[str] = None
    reward_type: Optional[str] = msgspec.field(name="rewardType", default=None)


class TraceResult(msgspec.Struct):
    """
    The 'result' field of a trace entry.
    """
    gas_used: str = msgspec.field(name="gasUsed", default="0x0")
    output: Optional[str] = None
    address: Optional[str] = None
    code: Optional[str] = None


class TransactionTrace(msgspec.Struct):
    """
    A single trace entry inside a trace-tree.
    """
    action: TraceAction
    result: Optional[TraceResult] = None
    subtraces: int = 0
    trace_address: List[int] = msgspec.field(name="traceAddress", default_factory=list)
    type: str = "call"
    error: Optional[str] = None


class Trace(msgspec.Struct):
    """
    A standalone trace entry linked to its block and transaction.
    """
    action: TraceAction
    block_hash: str = msgspec.field(name="blockHash")
    block_number: int = msgspec.field(name="blockNumber")
    result: Optional[TraceResult] = None
    subtraces: int = 0
    trace_address: List[int] = msgspec.field(name="traceAddress", default_factory=list)
    transaction_hash: Optional[str] = msgspec.field(name="transactionHash", default=None)
    transaction_position: Optional[int] = msgspec.field(name="transactionPosition", default=None)
    type: str = "call"
    error: Optional[str] = None


class MemoryDiff(msgspec.Struct):
    off: int
    data: str


class StorageDiff(msgspec.Struct):
    key: str
    val: str


class VMExecutedOperation(msgspec.Struct):
    used: int
    push: List[str] = msgspec.field(default_factory=list)
    mem: Optional[MemoryDiff] = None
    store: Optional[StorageDiff] = None


class VMOperation(msgspec.Struct):
    pc: int
    cost: int
    ex: Optional[VMExecutedOperation] = None
    sub: Optional["VMTrace"] = None


class VMTrace(msgspec.Struct):
    code: str
    ops: List["VMOperation"] = msgspec.field(default_factory=list)


# "=" for unchanged, otherwise {"+": v}, {"-": v} or {"*": {"from": a, "to": b}}
Diff = Union[str, Dict[str, Any]]


class AccountDiff(msgspec.Struct):
    balance: Diff = "="
    nonce: Diff = "="
    code: Diff = "="
    storage: Dict[str, Diff] = msgspec.field(default_factory=dict)


class BlockTrace(msgspec.Struct):
    """
    Full trace output of one simulated or replayed execution.
    """
    output: str
    trace: Optional[List[TransactionTrace]] = None
    vm_trace: Optional[VMTrace] = msgspec.field(name="vmTrace", default=None)
    state_diff: Optional[Dict[str, AccountDiff]] = msgspec.field(name="stateDiff", default=None)
    transaction_hash: Optional[str] = msgspec.field(name="transactionHash", default=None)
