"""
Tests for settings, logging and the LLM factory.
"""

import logging

from app.core.config import Settings
from app.core.logging import NOISY_LOGGERS, get_logger, setup_logging


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_APP_SLUG", "checklist-staging")
    monkeypatch.setenv("ANALYSIS_DEBOUNCE_SECONDS", "1.5")
    monkeypatch.setenv("LLM_MODEL", "")

    settings = Settings(_env_file=None)

    assert settings.GITHUB_APP_SLUG == "checklist-staging"
    assert settings.ANALYSIS_DEBOUNCE_SECONDS == 1.5
    # Empty values are ignored in favour of defaults
    assert settings.LLM_MODEL == "gpt-5-mini"


def test_setup_logging_quiets_client_libraries():
    setup_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO


def test_get_logger_is_named():
    assert get_logger("app.test").name == "app.test"


def test_build_llm_uses_settings(monkeypatch):
    from app.core import llm as llm_module
    from app.core.config import settings

    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(settings, "LLM_MODEL", "gpt-4o-mini")
    llm_module.build_llm.cache_clear()
    try:
        model = llm_module.build_llm()
        assert model.model_name == "gpt-4o-mini"
        assert model.max_retries == 3
        assert llm_module.build_llm() is model
    finally:
        llm_module.build_llm.cache_clear()
