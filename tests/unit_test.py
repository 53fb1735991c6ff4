"""Unit tests that do not require a running API or external services."""
from study_portal.config import settings


def test_settings_load():
    """Settings load from environment (conftest sets test values)."""
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.APP_NAME == "Study Portal"
    assert settings.AUTH_COOKIE_NAME == "auth-token"


def test_environment_flag():
    """Environment flags reflect ENVIRONMENT value."""
    assert settings.ENVIRONMENT.lower() in ("development", "test", "production")
    assert settings.is_development == (settings.ENVIRONMENT.lower() == "development")
    assert settings.is_production == (settings.ENVIRONMENT.lower() == "production")


def test_comma_separated_settings_are_lists():
    assert isinstance(settings.ALLOWED_ORIGINS, list)
    assert "GET" in settings.ALLOWED_METHODS


def test_rate_limiting_disabled_for_tests():
    assert settings.RATE_LIMIT_ENABLED is False
