from typing import Any, Optional


class NodeTraceError(Exception):
    """
    Base class for every error raised by nodetrace.
    """


class EncodingError(NodeTraceError, ValueError):
    """
    A caller-supplied value cannot be represented in the wire format.
    Raised before anything is dispatched to the transport.
    """


class TransportError(NodeTraceError):
    """
    The remote call could not be completed.
    """


class RPCError(TransportError):
    """
    The node answered with a JSON-RPC error object.
    """

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


class DecodeError(NodeTraceError):
    """
    The call completed but its result does not match the expected shape.
    """

    def __init__(self, expected: Any, raw: Any, reason: str = ""):
        name = getattr(expected, "__name__", None) or repr(expected)
        message = f"Cannot decode result as {name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.expected = expected
        self.raw = raw
