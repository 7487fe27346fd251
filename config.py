"""
Configuration for the task manager API.

Environment-aware configuration classes following Flask's recommended
pattern: a shared ``Config`` base class holds defaults and the
environment-specific subclasses (``DevelopmentConfig``, ``TestingConfig``,
``ProductionConfig``) override only what differs.  ``get_config`` resolves
the class at runtime from ``FLASK_ENV`` or an explicit argument.

The token signing secret is not a class attribute.  It is resolved by
``load_jwt_secret`` when the application is created and handed to the
account service and auth gate explicitly.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


def _load_secret(raw_env_var: str, path_env_var: str) -> str:
    """
    Load a secret from a raw environment variable or a file-path variable.

    The raw variable takes precedence over the path variable so
    orchestrators can inject secrets directly without mounting files.
    """
    raw_secret = os.environ.get(raw_env_var, "").strip()
    if raw_secret:
        return raw_secret

    secret_path = os.environ.get(path_env_var, "").strip()
    if secret_path:
        try:
            return Path(secret_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT secret file at '{secret_path}' from {path_env_var}."
            ) from exc

    raise RuntimeError(
        f"Missing JWT secret configuration: set {raw_env_var} or {path_env_var}."
    )


def _has_secret_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one secret source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def load_jwt_secret(*, testing: bool) -> str:
    """
    Resolve the HS256 token secret for the selected environment.

    In testing mode the ``TEST_*`` variables are used when configured;
    otherwise the standard ``JWT_SECRET_KEY`` variables apply.

    Raises:
        RuntimeError: If no secret source is configured or the secret
            file cannot be read.
    """
    if testing and _has_secret_source("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH"):
        return _load_secret("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH")
    return _load_secret("JWT_SECRET_KEY", "JWT_SECRET_KEY_PATH")


class Config:
    """
    Base configuration shared by all environments.

    Every setting can be controlled through an environment variable so the
    same code base serves any environment.

    Attributes:
        SECRET_KEY: Flask signing key (unused by the token flow).
        SQLALCHEMY_DATABASE_URI: Database connection string.
        JWT_EXPIRY_SECONDS: Lifetime of an issued token.
        JWT_CLOCK_SKEW_SECONDS: Tolerance applied to ``exp``/``nbf`` checks.
        BCRYPT_ROUNDS: bcrypt cost factor used when hashing new passwords.
    """

    SECRET_KEY: str = os.environ.get(
        "SECRET_KEY", "task-manager-dev-secret-change-in-production"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'taskman.db'}",
    )

    JWT_EXPIRY_SECONDS: int = int(os.environ.get("JWT_EXPIRY_SECONDS", "3600"))
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "0"))
    BCRYPT_ROUNDS: int = int(os.environ.get("BCRYPT_ROUNDS", "10"))


class DevelopmentConfig(Config):
    """Local development: debug mode on, testing off."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Uses a separate SQLite database so test runs never touch development
    data, and the bcrypt minimum cost so hashing does not dominate the
    suite's run time.
    """

    DEBUG: bool = True
    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'test_taskman.db'}?check_same_thread=False",
    )
    SQLALCHEMY_ENGINE_OPTIONS: dict = {"pool_pre_ping": True}
    BCRYPT_ROUNDS: int = int(os.environ.get("TEST_BCRYPT_ROUNDS", "4"))


class ProductionConfig(Config):
    """
    Production deployments.

    All secrets must be supplied through environment variables.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"`` or ``"production"``.
            When ``None``, ``FLASK_ENV`` is consulted, falling back to
            ``"development"``.

    Returns:
        The configuration class (not an instance).  Unrecognised names
        resolve to ``DevelopmentConfig``.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
