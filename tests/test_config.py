import pytest

from daybot import config


def test_settings_use_key_when_enabled(monkeypatch):
    monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(config, "LLM_ENABLED", True)
    settings = config.get_settings()
    assert settings.api_key == "sk-test"
    assert settings.llm_configured is True


def test_llm_switch_off_hides_key(monkeypatch):
    monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(config, "LLM_ENABLED", False)
    settings = config.get_settings()
    assert settings.api_key is None
    assert settings.llm_configured is False


def test_blank_key_is_not_configured():
    assert config.Settings(api_key="   ").llm_configured is False


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://a.example, https://b.example ,,", ["https://a.example", "https://b.example"]),
        (" https://only.example ", ["https://only.example"]),
        ("", ["http://localhost:3000", "http://127.0.0.1:3000"]),
        ("   ", ["http://localhost:3000", "http://127.0.0.1:3000"]),
    ],
)
def test_allowed_origins_parsing(monkeypatch, raw, expected):
    monkeypatch.setattr(config, "ALLOWED_ORIGINS", raw)
    assert config.allowed_origins() == expected


def test_default_origins_are_a_fresh_list(monkeypatch):
    monkeypatch.setattr(config, "ALLOWED_ORIGINS", "")
    config.allowed_origins().append("http://evil.example")
    assert "http://evil.example" not in config.allowed_origins()


@pytest.mark.parametrize(
    "raw,expected",
    [(None, True), ("false", False), ("0", False), (" OFF ", False), ("no", False), ("true", True), ("1", True)],
)
def test_env_flag(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("DAYBOT_TEST_FLAG", raising=False)
    else:
        monkeypatch.setenv("DAYBOT_TEST_FLAG", raw)
    assert config._env_flag("DAYBOT_TEST_FLAG", True) is expected
