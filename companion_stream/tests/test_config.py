"""Configuration layering and validation tests.

Order under test (later wins): defaults, config file, environment, explicit
overrides. Validation failures surface as ``ConfigError``.
"""
from __future__ import annotations

import json

import pytest

from companion_stream.base.errors import ConfigError, UnknownBackendError
from companion_stream.config import get_backend_config, get_model, load_config, reset_config_cache
from companion_stream.config.defaults import TERM_COLORS
from companion_stream.config.env import get_api_key, get_env_var_name, is_placeholder

LIVE_KEY = "sk-live-0123456789"


def test_ollama_defaults():
    cfg = load_config("ollama")
    assert cfg.model == "llama3.2" and cfg.api_key is None  # nosec B101
    assert cfg.chat_url == "http://localhost:11434/api/chat"  # nosec B101
    assert cfg.generate_url == "http://localhost:11434/api/generate"  # nosec B101
    assert cfg.models_url == "http://localhost:11434/api/tags"  # nosec B101
    assert (cfg.http_timeout, cfg.buffer_size, cfg.max_messages, cfg.max_input_length) == (10.0, 1024, 20, 512)  # nosec B101
    assert cfg.terminal.output is True and cfg.terminal.color == "green"  # nosec B101


def test_backend_name_is_normalized():
    assert load_config("  Ollama ").backend == "ollama"  # nosec B101


def test_unknown_backend():
    with pytest.raises(UnknownBackendError):
        get_backend_config("gopher")


def test_openai_requires_api_key():
    with pytest.raises(ConfigError, match="api_key is required"):
        load_config("openai")


def test_openai_key_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", LIVE_KEY)
    cfg = load_config("openai")
    assert cfg.api_key == LIVE_KEY  # nosec B101
    assert cfg.chat_url == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert cfg.models_url == "https://api.openai.com/v1/models"  # nosec B101


def test_placeholder_key_counts_as_missing(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "your-key-placeholder")
    assert get_api_key("openai") is None  # nosec B101
    with pytest.raises(ConfigError):
        load_config("openai")



def test_placeholder_env_key_does_not_shadow_file_key(tmp_path, monkeypatch):
    path = tmp_path / "companion.json"
    path.write_text(json.dumps({"openai": {"api_key": LIVE_KEY}}), encoding="utf-8")
    monkeypatch.setenv("OPENAI_API_KEY", "changeme")
    assert load_config("openai", path=str(path)).api_key == LIVE_KEY  # nosec B101


def test_placeholder_key_in_file_counts_as_missing(tmp_path):
    path = tmp_path / "companion.json"
    path.write_text(json.dumps({"openai": {"api_key": "sk-example"}}), encoding="utf-8")
    with pytest.raises(ConfigError, match="api_key is required"):
        load_config("openai", path=str(path))


@pytest.mark.parametrize("value,expected", [("changeme", True), ("TEST_abc", True), ("sk-real", False), (None, False)])
def test_is_placeholder(value, expected):
    assert is_placeholder(value) is expected  # nosec B101


def test_env_var_name_lookup():
    assert get_env_var_name("OpenAI") == "OPENAI_API_KEY" and get_env_var_name("ollama") is None  # nosec B101


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    monkeypatch.setenv("OLLAMA_BUFFER_SIZE", "2048")
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434/")
    cfg = load_config("ollama")
    assert cfg.model == "mistral" and cfg.buffer_size == 2048  # nosec B101
    assert cfg.chat_url == "http://gpu-box:11434/api/chat"  # nosec B101
    assert get_model("ollama") == "mistral"  # nosec B101


def test_overrides_beat_environment(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    assert load_config("ollama", model="phi3", http_timeout=None).model == "phi3"  # nosec B101


def test_json_file_sections_and_shared_terminal(tmp_path, monkeypatch):
    path = tmp_path / "companion.json"
    path.write_text(
        json.dumps(
            {
                "ollama": {"model": "qwen2", "max_messages": 4, "terminal": {"color": "cyan"}},
                "terminal": {"color": "red", "output": False},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    cfg = load_config("ollama", path=str(path), terminal={"debug": True})
    assert cfg.model == "mistral" and cfg.max_messages == 4  # nosec B101
    assert (cfg.terminal.color, cfg.terminal.output, cfg.terminal.debug) == ("cyan", False, True)  # nosec B101


def test_yaml_file_from_environment(tmp_path, monkeypatch):
    pytest.importorskip("yaml")
    path = tmp_path / "companion.yaml"
    path.write_text("openai:\n  model: gpt-4o\n  http_timeout: 30\n  api_key: " + LIVE_KEY + "\n", encoding="utf-8")
    monkeypatch.setenv("COMPANION_CONFIG_FILE", str(path))
    cfg = load_config("openai")
    assert (cfg.model, cfg.http_timeout, cfg.api_key) == ("gpt-4o", 30.0, LIVE_KEY)  # nosec B101


def test_missing_explicit_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config("ollama", path=str(tmp_path / "nope.json"))


def test_missing_file_from_environment_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("COMPANION_CONFIG_FILE", str(tmp_path / "nope.json"))
    assert load_config("ollama").model == "llama3.2"  # nosec B101


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config("ollama", path=str(path))


def test_dotenv_fills_placeholder_values(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(f"# local secrets\nOPENAI_API_KEY='{LIVE_KEY}'\n\nnot a pair\n", encoding="utf-8")
    monkeypatch.setenv("OPENAI_API_KEY", "placeholder")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    reset_config_cache()
    assert load_config("openai").api_key == LIVE_KEY  # nosec B101


@pytest.mark.parametrize(
    "overrides,fragment",
    [
        ({"base_url": "ftp://example.org"}, "http:// or https://"),
        ({"chat_url": "localhost:11434/api/chat"}, "chat_url"),
        ({"buffer_size": 0}, "buffer_size"),
        ({"http_timeout": -1}, "http_timeout"),
        ({"max_messages": 0}, "max_messages"),
        ({"model": ""}, "model"),
    ],
)
def test_invalid_values_raise_config_error(overrides, fragment):
    with pytest.raises(ConfigError) as info:
        load_config("ollama", **overrides)
    assert fragment in str(info.value)  # nosec B101


@pytest.mark.parametrize("name,expected", [("Cyan", "cyan"), ("bright-blue", "bright_blue"), ("mauve", "bright_magenta"), ("", "green")])
def test_terminal_colour_names(name, expected):
    cfg = load_config("ollama", terminal={"color": name})
    assert cfg.terminal.color == expected and cfg.terminal.ansi == TERM_COLORS[expected]  # nosec B101


def test_dotenv_parser_handles_export_and_comments(tmp_path):
    from companion_stream.config import _parse_dotenv

    env_file = tmp_path / ".env"
    env_file.write_text('export OLLAMA_MODEL="qwen2"\n# OPENAI_API_KEY=commented\nEMPTY=\n', encoding="utf-8")
    assert _parse_dotenv(str(env_file)) == {"OLLAMA_MODEL": "qwen2", "EMPTY": ""}  # nosec B101


def test_real_environment_beats_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("OLLAMA_MODEL=qwen2\n", encoding="utf-8")
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    reset_config_cache()
    assert load_config("ollama").model == "mistral"  # nosec B101
