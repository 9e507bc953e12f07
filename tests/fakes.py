"""Fake collaborators shared by the reader, filter and client tests."""

import json

from whisperbox.rpc.protocol import RpcResponse, decode_response


def respond(result, **envelope) -> RpcResponse:
    """Decode a response body the way the transport would."""
    body = {"jsonrpc": "2.0", "id": "test-id", **envelope}
    if result is not ...:
        body["result"] = result
    return decode_response(json.dumps(body))


def message(hash_: str, payload: bytes = b"hi", *, sent: int = 1000, ttl: int = 50) -> dict:
    return {
        "hash": hash_,
        "ttl": ttl,
        "sent": sent,
        "from": "0x04aa",
        "to": "",
        "payload": "0x" + payload.hex(),
    }


class ScriptedTransport:
    """Stands in for WhisperTransport; replays canned responses in order."""

    def __init__(self, responses, on_send=None):
        self.responses = list(responses)
        self.calls: list[tuple] = []
        self.on_send = on_send

    def send(self, method, params=(), timeout=None):
        self.calls.append((method, list(params)))
        if self.on_send is not None:
            self.on_send(method)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def methods(self):
        return [m for m, _ in self.calls]

    def close(self):
        pass


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


