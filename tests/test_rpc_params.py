import pytest

from whisperbox.rpc.params import hex_topics, map_params, to_hex, wrap_param
from whisperbox.utils.exceptions import ValidationError


def test_to_hex_encodes_ints_and_strings() -> None:
    assert to_hex(255) == "0xff"
    assert to_hex(0) == "0x0"
    assert to_hex("ab") == "0x6162"
    assert to_hex("") == "0x"


def test_to_hex_encodes_nested_topic_lists() -> None:
    assert to_hex([["micropayment", "handout"]]) == [["0x6d6963726f7061796d656e74", "0x68616e646f7574"]]


def test_to_hex_rejects_other_types() -> None:
    for value in (True, 1.5, {"a": 1}, ["flat", "list"]):
        with pytest.raises(ValidationError):
            to_hex(value)


def test_map_params_transforms_flat_list_members() -> None:
    params = map_params({"topics": ["micropayment", "handout"], "ttl": 50}, to_hex)
    assert params == [{"topics": ["0x6d6963726f7061796d656e74", "0x68616e646f7574"], "ttl": "0x32"}]


def test_map_params_keeps_nested_topics_grouped() -> None:
    [encoded] = map_params({"topics": [["a", "b"]]}, to_hex)
    assert encoded["topics"] == [["0x61", "0x62"]]


def test_map_params_without_transform_passes_values_through() -> None:
    assert map_params({"from": "0x04aa"}) == [{"from": "0x04aa"}]


def test_wrap_param_and_hex_topics() -> None:
    assert wrap_param("0xf1") == ["0xf1"]
    assert hex_topics(["a", "b"]) == ["0x61", "0x62"]
