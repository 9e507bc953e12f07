"""JSON-RPC layer: message model, param helpers and HTTP transport."""

from whisperbox.rpc.protocol import (
    Method,
    OutgoingCall,
    WhisperResult,
    ResponseKind,
    RpcResponse,
    MultiResultResponse,
    SingleBoolResponse,
    SingleStringResponse,
    GenericResponse,
    RESPONSE_VARIANTS,
    ResponseDecodeError,
    decode_response,
)
from whisperbox.rpc.params import to_hex, wrap_param, map_params, hex_topics
from whisperbox.rpc.transport import WhisperTransport, DEFAULT_REQUEST_TIMEOUT_SECONDS

__all__ = [
    "Method",
    "OutgoingCall",
    "WhisperResult",
    "ResponseKind",
    "RpcResponse",
    "MultiResultResponse",
    "SingleBoolResponse",
    "SingleStringResponse",
    "GenericResponse",
    "RESPONSE_VARIANTS",
    "ResponseDecodeError",
    "decode_response",
    "to_hex",
    "wrap_param",
    "map_params",
    "hex_topics",
    "WhisperTransport",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
]
