"""
Unit tests for configuration resolution and secret loading.
"""

from __future__ import annotations

import pytest

from config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config, load_jwt_secret

pytestmark = pytest.mark.unit

SECRET_VARS = (
    "JWT_SECRET_KEY",
    "JWT_SECRET_KEY_PATH",
    "TEST_JWT_SECRET_KEY",
    "TEST_JWT_SECRET_KEY_PATH",
)


@pytest.fixture
def clean_secret_env(monkeypatch):
    for name in SECRET_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("nonsense", DevelopmentConfig),
    ],
)
def test_get_config_resolves_by_name(name, expected):
    assert get_config(name) is expected


def test_get_config_reads_flask_env(monkeypatch):
    """Test that FLASK_ENV picks the class when no name is passed."""
    # Arrange
    monkeypatch.setenv("FLASK_ENV", "production")

    # Act & Assert
    assert get_config() is ProductionConfig


def test_defaults_match_documented_values():
    """Test the token lifetime, skew and bcrypt cost defaults."""
    assert ProductionConfig.JWT_EXPIRY_SECONDS == 3600
    assert ProductionConfig.JWT_CLOCK_SKEW_SECONDS == 0
    assert ProductionConfig.BCRYPT_ROUNDS == 10
    assert TestingConfig.BCRYPT_ROUNDS == 4


def test_load_secret_from_environment(clean_secret_env):
    # Arrange
    clean_secret_env.setenv("JWT_SECRET_KEY", "  from-env  ")

    # Act & Assert
    assert load_jwt_secret(testing=False) == "from-env"


def test_load_secret_from_file(clean_secret_env, tmp_path):
    """Test that the *_PATH variable is read when no raw secret is set."""
    # Arrange
    secret_file = tmp_path / "jwt.secret"
    secret_file.write_text("from-file\n", encoding="utf-8")
    clean_secret_env.setenv("JWT_SECRET_KEY_PATH", str(secret_file))

    # Act & Assert
    assert load_jwt_secret(testing=False) == "from-file"


def test_raw_secret_takes_precedence_over_file(clean_secret_env, tmp_path):
    # Arrange
    secret_file = tmp_path / "jwt.secret"
    secret_file.write_text("from-file", encoding="utf-8")
    clean_secret_env.setenv("JWT_SECRET_KEY", "from-env")
    clean_secret_env.setenv("JWT_SECRET_KEY_PATH", str(secret_file))

    # Act & Assert
    assert load_jwt_secret(testing=False) == "from-env"


def test_testing_prefers_test_secret(clean_secret_env):
    # Arrange
    clean_secret_env.setenv("JWT_SECRET_KEY", "prod-secret")
    clean_secret_env.setenv("TEST_JWT_SECRET_KEY", "test-secret")

    # Act & Assert
    assert load_jwt_secret(testing=True) == "test-secret"
    assert load_jwt_secret(testing=False) == "prod-secret"


def test_testing_falls_back_to_standard_secret(clean_secret_env):
    # Arrange
    clean_secret_env.setenv("JWT_SECRET_KEY", "prod-secret")

    # Act & Assert
    assert load_jwt_secret(testing=True) == "prod-secret"


def test_missing_secret_fails_loudly(clean_secret_env):
    """Test that startup is refused when no secret is configured."""
    # Act & Assert
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        load_jwt_secret(testing=False)


def test_unreadable_secret_file_fails_loudly(clean_secret_env, tmp_path):
    # Arrange
    clean_secret_env.setenv("JWT_SECRET_KEY_PATH", str(tmp_path / "missing.secret"))

    # Act & Assert
    with pytest.raises(RuntimeError, match="Unable to read JWT secret file"):
        load_jwt_secret(testing=False)
