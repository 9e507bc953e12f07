"""JSON-RPC message model for the Whisper node.

The node answers every call with ``{jsonrpc, id, result}`` but the type of
``result`` depends on the method and on the outcome, and nothing in the envelope
says which one was sent. Responses are therefore decoded against a fixed,
ordered set of variants, most specific first:

1. ``MultiResultResponse``  - ``result`` is a list of messages
2. ``SingleBoolResponse``   - ``result`` is a JSON boolean
3. ``SingleStringResponse`` - ``result`` is a JSON string
4. ``GenericResponse``      - anything else, including null or absent

Typed variants use strict field types so that a looser variant can never
claim a body meant for a stricter one. A list whose messages do not parse is a
decode error, never a generic result.
"""

from __future__ import annotations

import binascii
import uuid
from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

JSONRPC_VERSION = "2.0"
PAYLOAD_MARKER = "0x"
PAYLOAD_ERROR = "payload_hex"


class Method(str, Enum):
    """RPC methods consumed from the node. Values are protocol constants."""

    CHECK_IDENTITY = "shh_hasIdentity"
    NEW_IDENTITY = "shh_newIdentity"
    POST = "shh_post"
    NEW_FILTER = "shh_newFilter"
    GET_MESSAGES = "shh_getMessages"


class OutgoingCall(BaseModel):
    """Request envelope; a fresh correlation id is generated per call."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    method: Method
    params: tuple[Any, ...] = ()

    def to_json(self) -> str:
        return self.model_dump_json()


class WhisperResult(BaseModel):
    """One message retrieved from a filter.

    ``payload`` arrives as ``0x``-prefixed hex and is decoded to raw bytes here,
    once. A bad or missing field in any message fails the whole response.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hash: str
    ttl: int = 0
    sent: int = 0
    sender: str = Field(default="", alias="from")
    recipient: str = Field(default="", alias="to")
    payload: bytes

    @field_validator("payload", mode="before")
    @classmethod
    def _decode_payload(cls, value: Any) -> Any:
        if isinstance(value, bytes):
            return value
        if not isinstance(value, str) or not value.startswith(PAYLOAD_MARKER):
            raise PydanticCustomError(
                PAYLOAD_ERROR,
                "payload must be a hex string prefixed with {marker}",
                {"marker": PAYLOAD_MARKER},
            )
        try:
            return binascii.unhexlify(value[len(PAYLOAD_MARKER):])
        except (binascii.Error, ValueError) as exc:
            raise PydanticCustomError(
                PAYLOAD_ERROR,
                "payload is not valid hex: {reason}",
                {"reason": str(exc)},
            ) from exc

    @property
    def expires_at(self) -> int:
        """Retention deadline used by the dedup cache (twice the TTL)."""
        return self.sent + 2 * self.ttl


class ResponseKind(str, Enum):
    MULTI = "multi"
    BOOL = "bool"
    STRING = "string"
    GENERIC = "generic"


class RpcResponse(BaseModel):
    """Envelope fields shared by every response variant."""

    kind: ClassVar[ResponseKind]

    model_config = ConfigDict(frozen=True)

    jsonrpc: str = ""
    id: str | int | None = None
    error: Any = None


class MultiResultResponse(RpcResponse):
    kind: ClassVar[ResponseKind] = ResponseKind.MULTI
    result: tuple[WhisperResult, ...]


class SingleBoolResponse(RpcResponse):
    kind: ClassVar[ResponseKind] = ResponseKind.BOOL
    result: StrictBool


class SingleStringResponse(RpcResponse):
    kind: ClassVar[ResponseKind] = ResponseKind.STRING
    result: StrictStr


class GenericResponse(RpcResponse):
    kind: ClassVar[ResponseKind] = ResponseKind.GENERIC
    result: Any = None


# Decode priority; order matters.
RESPONSE_VARIANTS: tuple[type[RpcResponse], ...] = (
    MultiResultResponse,
    SingleBoolResponse,
    SingleStringResponse,
    GenericResponse,
)


class ResponseDecodeError(ValueError):
    """No response variant accepts the body, or a message in a result list is malformed."""


def _message_rejected(exc: PydanticValidationError) -> bool:
    # loc ("result", <index>, ...) means the list matched but one of its messages did not
    for err in exc.errors():
        loc = err.get("loc", ())
        if err.get("type") == PAYLOAD_ERROR or (loc[:1] == ("result",) and len(loc) > 1 and isinstance(loc[1], int)):
            return True
    return False


def decode_response(content: str | bytes) -> RpcResponse:
    """Decode a response body into the first variant that accepts it."""
    failures: list[str] = []
    for variant in RESPONSE_VARIANTS:
        try:
            return variant.model_validate_json(content)
        except PydanticValidationError as exc:
            if variant is MultiResultResponse and _message_rejected(exc):
                raise ResponseDecodeError(f"malformed message in result list: {exc}") from exc
            failures.append(f"{variant.kind.value}: {exc.errors()[0].get('msg', 'invalid')}")
    raise ResponseDecodeError("no response variant matched (" + "; ".join(failures) + ")")
