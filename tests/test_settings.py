import json

import pytest

from jester.config.settings import JesterSettings, load_settings, validate_setting
from jester.services.config_service import ConfigService


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(config_path=tmp_path / "missing.json")
    assert settings == JesterSettings()
    assert settings.endpoint == "http://localhost:11434"
    assert settings.auto_apply is False
    assert settings.apply_delay == 0.0


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"endpoint": "http://gpu-box:11434/", "model": "llama3", "auto_apply": True}))
    settings = load_settings(config_path=path)
    assert settings.endpoint == "http://gpu-box:11434/"
    assert settings.model == "llama3"
    assert settings.auto_apply is True


def test_overrides_win_and_none_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"model": "llama3", "timeout": 30}))
    settings = load_settings(config_path=path, model="codellama:7b", timeout=None)
    assert settings.model == "codellama:7b"
    assert settings.timeout == 30


def test_unknown_override_rejected(tmp_path):
    with pytest.raises(TypeError):
        load_settings(config_path=tmp_path / "none.json", colour="red")


def test_env_var_selects_config_file(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"model": "from-env"}))
    monkeypatch.setenv("JESTER_CONFIG", str(path))
    assert load_settings().model == "from-env"


def test_invalid_json_raises_value_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ValueError):
        load_settings(config_path=path)


def test_config_service_round_trip_with_dot_keys(tmp_path):
    path = tmp_path / "nested" / "config.json"
    service = ConfigService(config_path=path)
    service.set("ollama.endpoint", "http://localhost:11434")
    service.set("model", "llama3")
    service.save()

    reloaded = ConfigService(config_path=path)
    data = reloaded.load()
    assert data["ollama"]["endpoint"] == "http://localhost:11434"
    assert reloaded.get("ollama.endpoint") == "http://localhost:11434"
    assert reloaded.get("ollama.missing", "dflt") == "dflt"
    assert reloaded.get("model.sub") is None


def test_config_service_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigService(config_path=tmp_path / "nope.json").load()


def test_config_service_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        ConfigService(config_path=path).load()


@pytest.mark.parametrize(
    "key, value",
    [
        ("model", "llama3"),
        ("endpoint", "http://gpu-box:11434"),
        ("auto_apply", True),
        ("apply_delay", 0.5),
        ("timeout", 30),
        ("timeout", 12.5),
    ],
)
def test_validate_setting_accepts_matching_types(key, value):
    validate_setting(key, value)


@pytest.mark.parametrize(
    "key, value",
    [
        ("colour", "red"),
        ("model", 7),
        ("auto_apply", "yes"),
        ("timeout", True),
        ("apply_delay", "soon"),
    ],
)
def test_validate_setting_rejects_bad_values(key, value):
    with pytest.raises(TypeError):
        validate_setting(key, value)
