"""HTTP JSON-RPC transport to a Whisper node."""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from loguru import logger
from pydantic_core import PydanticSerializationError

from whisperbox.rpc.protocol import (
    Method,
    OutgoingCall,
    ResponseDecodeError,
    RpcResponse,
    decode_response,
)
from whisperbox.utils.exceptions import TransportError, ValidationError, sanitize_error_message

# Upper bound for any single request; per-call timeouts are capped to it.
DEFAULT_REQUEST_TIMEOUT_SECONDS = 180.0


class WhisperTransport:
    """
    Sends one JSON-RPC call per HTTP POST and decodes the reply.

    Non-200 statuses, network failures and undecodable bodies all raise
    ``TransportError``; nothing is retried here.
    """

    def __init__(
        self,
        url: str,
        *,
        http_client: httpx.Client | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        self.url = url
        self.request_timeout = request_timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=self.request_timeout)
        return self._http_client

    def _effective_timeout(self, timeout: float | None) -> float:
        if timeout is None or timeout <= 0:
            return self.request_timeout
        return min(timeout, self.request_timeout)

    def close(self) -> None:
        if self._http_client is not None and self._owns_client:
            self._http_client.close()
        self._http_client = None

    def __enter__(self) -> WhisperTransport:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def send(
        self,
        method: Method,
        params: Sequence[Any] = (),
        timeout: float | None = None,
    ) -> RpcResponse:
        """Perform one call and return the decoded response variant."""
        call = OutgoingCall(method=method, params=tuple(params))
        try:
            serial = call.to_json()
        except PydanticSerializationError as exc:
            raise ValidationError(f"params for {method.value} are not JSON-serializable: {exc}", field="params") from exc

        logger.debug(f"Sending: {serial}")
        client = self._get_http_client()
        try:
            resp = client.post(
                self.url,
                content=serial.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self._effective_timeout(timeout),
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"RPC call {method.value} timed out: {exc}",
                method=method.value,
                is_retryable=True,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"Unable to make RPC call {method.value}: {exc}. Original request: {serial}",
                method=method.value,
                is_retryable=True,
            ) from exc

        body = resp.text
        if resp.status_code != 200:
            raise TransportError(
                f"RPC call {method.value} returned non-OK status {resp.status_code}",
                method=method.value,
                status_code=resp.status_code,
                body=body,
                is_retryable=resp.status_code >= 500,
            )

        try:
            decoded = decode_response(resp.content)
        except ResponseDecodeError as exc:
            raise TransportError(
                f"Error deserializing response to {method.value}: {exc}. Returned content: {body}",
                method=method.value,
                status_code=resp.status_code,
                body=body,
            ) from exc

        # TODO: reject mismatched correlation ids once the node is used with pipelined requests
        if decoded.id is not None and decoded.id != call.id:
            logger.debug(f"Response id {decoded.id!r} does not match request id {call.id!r}")
        logger.debug(f"Received {decoded.kind.value} response for {method.value}: {sanitize_error_message(body)}")
        return decoded
