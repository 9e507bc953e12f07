import json
from pathlib import Path

import pytest

from whisperbox.config.loader import (
    camel_to_snake,
    clear_config_cache,
    get_config,
    load_config,
    save_config,
    snake_to_camel,
)
from whisperbox.config.schema import WhisperBoxConfig


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.json")
    assert cfg.rpc.url == "http://127.0.0.1:8545"
    assert cfg.rpc.request_timeout_seconds == 180.0
    assert cfg.reader.read_timeout_seconds == -1
    assert cfg.reader.poll_interval_seconds == 1.0
    assert cfg.logging.level == "INFO"


def test_camel_case_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "rpc": {"url": "http://node:8545", "requestTimeoutSeconds": 30},
                "reader": {"topics": ["micropayment"], "pollIntervalSeconds": 0.5, "readTimeoutSeconds": 20},
                "logging": {"level": "DEBUG", "logToFile": True},
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.rpc.url == "http://node:8545"
    assert cfg.rpc.request_timeout_seconds == 30
    assert cfg.reader.topics == ["micropayment"]
    assert cfg.reader.poll_interval_seconds == 0.5
    assert cfg.reader.read_timeout_seconds == 20
    assert cfg.logging.log_to_file is True


def test_malformed_json_names_the_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError) as err:
        load_config(path)
    assert str(path) in str(err.value)


def test_out_of_range_values_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"reader": {"readTimeoutSeconds": -5}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_env_vars_override_defaults(monkeypatch) -> None:
    monkeypatch.setenv("WHISPERBOX_RPC__URL", "http://env-node:8545")
    assert WhisperBoxConfig().rpc.url == "http://env-node:8545"


def test_env_vars_override_values_from_file(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"rpc": {"url": "http://file-node:8545", "requestTimeoutSeconds": 30}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("WHISPERBOX_RPC__URL", "http://env-node:8545")

    cfg = load_config(path)

    assert cfg.rpc.url == "http://env-node:8545"
    assert cfg.rpc.request_timeout_seconds == 30


def test_non_object_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_save_then_load_round_trips(tmp_path: Path) -> None:
    cfg = WhisperBoxConfig.model_validate({"reader": {"topics": ["a"], "read_timeout_seconds": 10}})
    path = save_config(cfg, tmp_path / "nested" / "config.json")

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["reader"]["readTimeoutSeconds"] == 10
    assert load_config(path) == cfg


def test_get_config_loads_once_per_path(tmp_path: Path) -> None:
    first_path = tmp_path / "a.json"
    second_path = tmp_path / "b.json"
    second_path.write_text(json.dumps({"rpc": {"url": "http://b:8545"}}), encoding="utf-8")
    clear_config_cache()
    try:
        first = get_config(config_path=first_path)
        assert get_config(config_path=first_path) is first
        assert get_config(config_path=second_path).rpc.url == "http://b:8545"
        clear_config_cache()
        assert get_config(config_path=second_path) is not first
    finally:
        clear_config_cache()


def test_key_case_helpers() -> None:
    assert camel_to_snake("readTimeoutSeconds") == "read_timeout_seconds"
    assert snake_to_camel("read_timeout_seconds") == "readTimeoutSeconds"
