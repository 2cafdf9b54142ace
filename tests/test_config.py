import json

import pytest

from responder import ConfigError, build_responder
from responder.config import DEFAULT_CONFIG, load_config, merge_config
from responder.llm import LocalLLMResponder, OpenAIResponder, build_ai_responder


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENAI_BASE_URL", "LLM_MODEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_path():
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    config["ai"]["provider"] = "none"
    assert DEFAULT_CONFIG["ai"]["provider"] == "openai"


def test_json_is_merged_over_defaults(tmp_path):
    path = tmp_path / "assistant.json"
    path.write_text(json.dumps({"matching": {"fuzzy_threshold": 0.7}, "ai": {"provider": "none"}}), encoding="utf-8")
    config = load_config(str(path))
    assert config["matching"]["fuzzy_threshold"] == 0.7
    assert config["ai"]["provider"] == "none"
    assert config["ai"]["max_tokens"] == 150
    assert config["knowledge"]["source"] == "data/knowledge_base.jsonl"


def test_yaml_config(tmp_path):
    path = tmp_path / "assistant.yaml"
    path.write_text("ai:\n  provider: local\n  model: Qwen/Qwen2.5-0.5B-Instruct\n", encoding="utf-8")
    config = load_config(str(path))
    assert config["ai"]["provider"] == "local"
    assert config["ai"]["timeout_sec"] == 15.0


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_bad_config_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))
    txt = tmp_path / "config.txt"
    txt.write_text("provider=openai", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(txt))
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(listing))


def test_merge_config_replaces_scalars_and_lists():
    merged = merge_config({"a": {"b": 1, "c": [1]}, "d": 2}, {"a": {"c": [2]}, "e": 3})
    assert merged == {"a": {"b": 1, "c": [2]}, "d": 2, "e": 3}


def test_build_ai_responder_providers(monkeypatch):
    assert build_ai_responder({"ai": {"provider": "none"}}) is None

    openai_responder = build_ai_responder({"ai": {"provider": "openai"}})
    assert isinstance(openai_responder, OpenAIResponder)
    assert not openai_responder.is_configured()

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    openai_responder = build_ai_responder({"ai": {"provider": "OpenAI", "model": "gpt-4o-mini", "max_tokens": 64}})
    assert openai_responder.is_configured()
    assert openai_responder.model == "gpt-4o-mini"
    assert openai_responder.max_tokens == 64

    local = build_ai_responder({"ai": {"provider": "local", "model": "Qwen/Qwen2.5-0.5B-Instruct"}})
    assert isinstance(local, LocalLLMResponder)
    assert local.is_configured()

    with pytest.raises(ConfigError):
        build_ai_responder({"ai": {"provider": "carrier-pigeon"}})


def test_build_responder(tmp_path):
    data = tmp_path / "kb.jsonl"
    data.write_text('{"question": "How do I logout", "answer": "Settings, then Logout."}\n', encoding="utf-8")
    config = merge_config(DEFAULT_CONFIG, {"ai": {"provider": "none"}, "matching": {"fuzzy_threshold": 0.6}})
    responder = build_responder(config, str(data))
    assert responder.ready
    assert responder.ai_responder is None
    assert responder.fuzzy_threshold == 0.6
    assert responder.respond("how do i logout").text == "Settings, then Logout."


def test_build_responder_rejects_bad_knowledge(tmp_path):
    data = tmp_path / "kb.jsonl"
    data.write_text('{"question": "How do I logout", "answer": ""}\n', encoding="utf-8")
    config = merge_config(DEFAULT_CONFIG, {"ai": {"provider": "none"}})
    with pytest.raises(ConfigError):
        build_responder(config, str(data))
