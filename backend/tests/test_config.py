"""Settings sources: defaults, YAML file and environment variables."""

import pytest

from adreel.config import Settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("GEMINI_API_KEY", "ADREEL_GEMINI_API_KEY", "ADREEL_GATEWAY__TRANSPORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_01_defaults(clean_env):
    cfg = Settings()
    assert cfg.gateway.transport == "direct"
    assert cfg.gateway.max_attempts == 1
    assert cfg.gateway.timeout_seconds is None
    assert cfg.gemini.text_model == "gemini-2.5-flash"
    assert cfg.wizard.strict_counts is False
    assert cfg.api_key_value() is None


def test_02_plain_gemini_api_key_env(clean_env, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    assert Settings().api_key_value() == "from-env"


def test_03_yaml_file_is_read(clean_env):
    (clean_env / "config.yaml").write_text(
        "gateway:\n  transport: relay\n  relay_url: http://relay:9000\n"
        "wizard:\n  strict_counts: true\n"
    )
    cfg = Settings()
    assert cfg.gateway.transport == "relay"
    assert cfg.gateway.relay_url == "http://relay:9000"
    assert cfg.wizard.strict_counts is True


def test_04_env_overrides_yaml(clean_env, monkeypatch):
    (clean_env / "config.yaml").write_text("gateway:\n  transport: relay\n")
    monkeypatch.setenv("ADREEL_GATEWAY__TRANSPORT", "direct")
    assert Settings().gateway.transport == "direct"
