from typing import Iterable, List, Optional, Sequence, Tuple, Union

from nodetrace import codec
from nodetrace.call import CallFuture
from nodetrace.namespace import Namespace, TransportT
from nodetrace.types import (
    BlockId,
    BlockNumber,
    BlockTrace,
    CallRequest,
    Trace,
    TraceFilter,
    TraceType,
)

TRACE_CALL = "trace_call"
TRACE_CALL_MANY = "trace_callMany"
TRACE_RAW_TRANSACTION = "trace_rawTransaction"
TRACE_REPLAY_TRANSACTION = "trace_replayTransaction"
TRACE_REPLAY_BLOCK_TRANSACTIONS = "trace_replayBlockTransactions"
DEBUG_TRACE_BLOCK_BY_NUMBER = "debug_traceBlockByNumber"
TRACE_FILTER = "trace_filter"
TRACE_GET = "trace_get"
TRACE_TRANSACTION = "trace_transaction"

TraceTypes = Iterable[Union[TraceType, str]]


class Traces(Namespace[TransportT]):
    """
    The `trace` namespace of an execution node.

    Arguments are encoded when the method is called, so invalid input raises
    EncodingError immediately. The returned CallFuture performs the request
    when awaited.
    """

    def call(
        self,
        req: CallRequest,
        trace_types: TraceTypes,
        block: Optional[BlockNumber] = None,
    ) -> CallFuture[BlockTrace]:
        """Executes the given call and returns the requested traces for it."""
        params = codec.encode_call_params(req, trace_types, block)
        return self._call(TRACE_CALL, params, BlockTrace)

    def call_many(
        self,
        requests: Iterable[Tuple[CallRequest, TraceTypes]],
        block: Optional[Union[BlockId, BlockNumber]] = None,
    ) -> CallFuture[List[BlockTrace]]:
        """Traces several calls on top of the same block, each seeing the previous ones' effects."""
        params = codec.encode_call_many_params(requests, block)
        return self._call(TRACE_CALL_MANY, params, List[BlockTrace])

    def raw_transaction(self, data: Union[str, bytes], trace_types: TraceTypes) -> CallFuture[BlockTrace]:
        """Traces a signed raw transaction without broadcasting it."""
        params = codec.encode_raw_transaction_params(data, trace_types)
        return self._call(TRACE_RAW_TRANSACTION, params, BlockTrace)

    def replay_transaction(self, tx_hash: Union[str, bytes], trace_types: TraceTypes) -> CallFuture[BlockTrace]:
        params = codec.encode_replay_transaction_params(tx_hash, trace_types)
        return self._call(TRACE_REPLAY_TRANSACTION, params, BlockTrace)

    def replay_block_transactions(self, block: BlockNumber, trace_types: TraceTypes) -> CallFuture[List[BlockTrace]]:
        params = codec.encode_replay_block_transactions_params(block, trace_types)
        return self._call(TRACE_REPLAY_BLOCK_TRANSACTIONS, params, List[BlockTrace])

    def block(self, block: BlockNumber) -> CallFuture[List[Trace]]:
        """Returns the traces created in the given block, using the call tracer."""
        params = codec.encode_block_params(block)
        return self._call(DEBUG_TRACE_BLOCK_BY_NUMBER, params, List[Trace])

    def filter(self, trace_filter: TraceFilter) -> CallFuture[List[Trace]]:
        params = codec.encode_filter_params(trace_filter)
        return self._call(TRACE_FILTER, params, List[Trace])

    def get(self, tx_hash: Union[str, bytes], indices: Sequence[int]) -> CallFuture[Trace]:
        """Returns the trace at the given position within a transaction."""
        params = codec.encode_get_params(tx_hash, indices)
        return self._call(TRACE_GET, params, Trace)

    def transaction(self, tx_hash: Union[str, bytes]) -> CallFuture[List[Trace]]:
        params = codec.encode_transaction_params(tx_hash)
        return self._call(TRACE_TRANSACTION, params, List[Trace])
