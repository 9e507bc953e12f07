import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from whisperbox.rpc.protocol import (
    RESPONSE_VARIANTS,
    GenericResponse,
    Method,
    MultiResultResponse,
    OutgoingCall,
    ResponseDecodeError,
    ResponseKind,
    SingleBoolResponse,
    SingleStringResponse,
    WhisperResult,
    decode_response,
)


def _body(**fields) -> str:
    return json.dumps({"jsonrpc": "2.0", "id": "abc", **fields})


def test_outgoing_call_envelope_shape() -> None:
    call = OutgoingCall(method=Method.NEW_FILTER, params=({"topics": ["0x01"]},))
    wire = json.loads(call.to_json())
    assert wire["jsonrpc"] == "2.0"
    assert wire["method"] == "shh_newFilter"
    assert wire["params"] == [{"topics": ["0x01"]}]
    assert isinstance(wire["id"], str) and wire["id"]


def test_outgoing_call_gets_fresh_id_and_is_immutable() -> None:
    a = OutgoingCall(method=Method.GET_MESSAGES, params=("0xf1",))
    b = OutgoingCall(method=Method.GET_MESSAGES, params=("0xf1",))
    assert a.id != b.id
    with pytest.raises(PydanticValidationError):
        a.method = Method.POST


def test_variant_order_is_most_specific_first() -> None:
    assert [v.kind for v in RESPONSE_VARIANTS] == [
        ResponseKind.MULTI,
        ResponseKind.BOOL,
        ResponseKind.STRING,
        ResponseKind.GENERIC,
    ]


def test_bool_result_selects_single_bool_over_generic() -> None:
    decoded = decode_response(_body(result=True))
    assert isinstance(decoded, SingleBoolResponse)
    assert decoded.result is True


def test_string_result_selects_single_string() -> None:
    decoded = decode_response(_body(result="0xdeadbeef"))
    assert isinstance(decoded, SingleStringResponse)
    assert decoded.result == "0xdeadbeef"


def test_string_that_looks_boolean_is_still_a_string() -> None:
    decoded = decode_response(_body(result="true"))
    assert isinstance(decoded, SingleStringResponse)


def test_list_result_selects_multi() -> None:
    decoded = decode_response(
        _body(result=[{"hash": "0xh1", "ttl": 50, "sent": 1000, "from": "0x04aa", "to": "", "payload": "0x6869"}])
    )
    assert isinstance(decoded, MultiResultResponse)
    [msg] = decoded.result
    assert msg.hash == "0xh1"
    assert msg.sender == "0x04aa"
    assert msg.payload == b"hi"


def test_empty_list_is_multi() -> None:
    decoded = decode_response(_body(result=[]))
    assert isinstance(decoded, MultiResultResponse)
    assert decoded.result == ()


def test_null_absent_and_other_results_fall_back_to_generic() -> None:
    for body in (_body(result=None), _body(), _body(result={"a": 1}), _body(result=7)):
        decoded = decode_response(body)
        assert isinstance(decoded, GenericResponse)
    assert decode_response(_body(result=None)).result is None
    assert decode_response(_body(result=7)).result == 7


def test_generic_keeps_error_object_for_diagnostics() -> None:
    decoded = decode_response(_body(error={"code": -32000, "message": "filter not found"}))
    assert isinstance(decoded, GenericResponse)
    assert decoded.result is None
    assert decoded.error["message"] == "filter not found"


def test_numeric_response_id_is_accepted() -> None:
    decoded = decode_response(json.dumps({"jsonrpc": "2.0", "id": 7, "result": True}))
    assert decoded.id == 7


def test_payload_decodes_marker_prefixed_hex() -> None:
    decoded = decode_response(_body(result=[{"hash": "h", "payload": "0x1234"}]))
    assert decoded.result[0].payload == bytes([0x12, 0x34])


def test_malformed_payload_fails_whole_response() -> None:
    for bad in ("0xzz", "0x123", "1234", ""):
        with pytest.raises(ResponseDecodeError):
            decode_response(_body(result=[{"hash": "ok", "payload": "0x00"}, {"hash": "h", "payload": bad}]))


def test_message_missing_fields_fails_whole_response() -> None:
    for bad in ({"hash": "h"}, {"payload": "0x00"}, "0xh1"):
        with pytest.raises(ResponseDecodeError):
            decode_response(_body(result=[{"hash": "ok", "payload": "0x00"}, bad]))


def test_body_that_is_not_an_object_is_rejected() -> None:
    with pytest.raises(ResponseDecodeError):
        decode_response("<html>bad gateway</html>")
    with pytest.raises(ResponseDecodeError):
        decode_response("[1, 2]")


def test_whisper_result_expiry_is_twice_ttl() -> None:
    r = WhisperResult(hash="h", ttl=10, sent=100, payload=b"x")
    assert r.expires_at == 120
    assert r.sender == ""
    assert r.recipient == ""
