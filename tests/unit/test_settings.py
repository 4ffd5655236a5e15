"""
Unit tests for settings loading.
"""

import pytest

from vibeocm.core.config import Settings

SERVER_KEYS = (
    "DEFAULT_MISTRAL_API_KEY",
    "NEXT_PUBLIC_MISTRAL_API_KEY",
    "HASHED_PASSPHRASE",
    "SECURITY_HASHED_PASSPHRASE",
    "POSTHOG_KEY",
    "POSTHOG_HOST",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in SERVER_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_server_keys_are_read_from_dotenv(tmp_path, clean_env: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text(
        "DEFAULT_MISTRAL_API_KEY=server-key-123\n"
        "HASHED_PASSPHRASE='pbkdf2_sha256$1000$00ff$abcd'\n"
        "POSTHOG_KEY=phc_x\n"
        "POSTHOG_HOST=https://eu.posthog.com\n"
        "APP_NAME=fromdotenv\n",
        encoding="utf-8",
    )
    clean_env.chdir(tmp_path)

    loaded = Settings()

    assert loaded.app_name == "fromdotenv"
    assert loaded.trial.default_mistral_api_key == "server-key-123"
    assert loaded.trial.available
    assert loaded.security.hashed_passphrase == "pbkdf2_sha256$1000$00ff$abcd"
    assert loaded.analytics.key == "phc_x"
    assert loaded.analytics.host == "https://eu.posthog.com"
    assert loaded.analytics.enabled


def test_environment_overrides_dotenv(tmp_path, clean_env: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("DEFAULT_MISTRAL_API_KEY=from-file\n", encoding="utf-8")
    clean_env.chdir(tmp_path)
    clean_env.setenv("DEFAULT_MISTRAL_API_KEY", "from-env")

    assert Settings().trial.default_mistral_api_key == "from-env"


def test_missing_dotenv_leaves_keys_empty(tmp_path, clean_env: pytest.MonkeyPatch) -> None:
    clean_env.chdir(tmp_path)

    loaded = Settings()

    assert not loaded.trial.available
    assert loaded.security.hashed_passphrase == ""
    assert not loaded.analytics.enabled
