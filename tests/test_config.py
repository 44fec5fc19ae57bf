"""Tests for the configuration loading.
"""

import os
from unittest.mock import patch

import pytest

from calendar_assistant.core.config import Settings, get_settings


def test_settings_loading_directly():
    """Test that Settings can be initialized directly with values.

    Bypasses environment variables and .env files.
    """
    test_values = {
        "environment": "testing",
        "debug": True,
        "database_url": "sqlite:///./data/test_db.sqlite",
        "llm_provider": "ollama",
        "ollama_base_url": "http://localhost:11435",
        "default_model": "test_model",
        "llm_max_tokens": 128,
    }
    settings = Settings(**test_values, _env_file=None)

    assert settings.environment == "testing"
    assert settings.debug is True
    assert settings.database_url == "sqlite:///./data/test_db.sqlite"
    assert settings.llm_provider == "ollama"
    assert settings.ollama_base_url == "http://localhost:11435"
    assert settings.default_model == "test_model"
    assert settings.llm_max_tokens == 128


def test_settings_defaults():
    """Defaults apply when neither the environment nor a .env file sets anything."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.environment == "development"
    assert settings.debug is False
    assert settings.database_url == "sqlite:///./data/calendar_assistant.db"
    assert settings.llm_provider == "openai"
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-3.5-turbo"
    assert settings.llm_temperature == 0.7
    assert settings.llm_max_tokens == 600
    assert settings.chat_history_limit == 50


def test_settings_read_from_environment():
    env = {"OPENAI_API_KEY": "sk-test", "LLM_PROVIDER": "openai", "CHAT_HISTORY_LIMIT": "10"}
    with patch.dict(os.environ, env, clear=True):
        settings = get_settings()

    assert settings.openai_api_key == "sk-test"
    assert settings.chat_history_limit == 10


def test_database_path_extracted_from_url():
    settings = Settings(database_url="sqlite:///./data/app.db", _env_file=None)
    assert settings.database_path == "./data/app.db"


def test_database_path_rejects_non_sqlite_url():
    settings = Settings(database_url="postgresql://localhost/db", _env_file=None)
    with pytest.raises(ValueError, match="Invalid database_url"):
        _ = settings.database_path
