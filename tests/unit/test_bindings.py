import json

import pytest

from agents import bindings
from config.registry import CHAT_KEY, REPORT_KEY, get_model


def _write_config(path, registry):
    route = {
        "name": "local",
        "base_url": "http://llm.local",
        "endpoint": "/v1/chat/completions",
        "model": "tiny-model",
        "timeout_s": 5,
    }
    path.write_text(json.dumps({"llm_routes": {"local": route}, "registry": registry}), encoding="utf-8")
    return path


def test_bind_default_models_binds_both_keys(tmp_path, monkeypatch):
    seen = []

    def fake_complete(messages, *, cfg, options=None):
        seen.append((cfg.name, options))
        return "reply"

    monkeypatch.setattr(bindings, "complete", fake_complete)
    config_path = _write_config(
        tmp_path / "app_config.json",
        {bindings.CHAT_TARGET: "local", bindings.REPORT_TARGET: "local"},
    )

    routes = bindings.bind_default_models(config_path)

    assert set(routes) == {bindings.CHAT_TARGET, bindings.REPORT_TARGET}
    assert get_model(CHAT_KEY)(messages=[{"role": "user", "content": "hi"}], options={"temperature": 0.7}) == "reply"
    assert get_model(REPORT_KEY)(messages=[], options=None) == "reply"
    assert seen == [("local", {"temperature": 0.7}), ("local", None)]


def test_missing_registry_entry_raises(tmp_path):
    config_path = _write_config(tmp_path / "app_config.json", {bindings.CHAT_TARGET: "local"})
    with pytest.raises(KeyError):
        bindings.bind_default_models(config_path)
