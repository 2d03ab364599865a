import pytest

from core.settings import DEFAULT_AGENT_MODEL, ConfigurationError, load_settings


def test_missing_secret_key_fails_fast() -> None:
    with pytest.raises(ConfigurationError):
        load_settings({})
    with pytest.raises(ConfigurationError):
        load_settings({"STRIPE_SECRET_KEY": "   "})


def test_settings_defaults_and_overrides() -> None:
    settings = load_settings({"STRIPE_SECRET_KEY": "sk_test_123"})

    assert settings.stripe_secret_key == "sk_test_123"
    assert settings.log_level == "INFO"
    assert settings.agent_model == DEFAULT_AGENT_MODEL
    assert "sk_test_123" not in repr(settings)

    custom = load_settings(
        {"STRIPE_SECRET_KEY": "sk_test_123", "BILLING_MCP_LOG_LEVEL": "debug", "BILLING_AGENT_MODEL": "openai/gpt-4o-mini"}
    )
    assert custom.log_level == "DEBUG"
    assert custom.agent_model == "openai/gpt-4o-mini"
