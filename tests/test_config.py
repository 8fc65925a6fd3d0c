"""Tests for environment settings."""

import pytest

from ssh_totp.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in [
        "SSH_TOTP_SSH_COMMAND",
        "SSH_TOTP_GENERATOR",
        "SSH_TOTP_PASSWORD_PROMPT",
        "SSH_TOTP_CODE_PROMPT",
        "SSH_TOTP_READ_SIZE",
        "SSH_TOTP_LOG_LEVEL",
        "SSH_TOTP_LOG_COLORS",
    ]:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    """Defaults match the stock ssh and totp-cli prompts."""
    settings = Settings.from_env()

    assert settings.ssh_command == "ssh"
    assert settings.totp_command == "totp-cli"
    assert settings.totp_password_env == "TOTP_PASS"
    assert settings.password_prompt == "Password:"
    assert settings.totp_prompt == "Verification code:"
    assert settings.read_size == 1024
    assert settings.log_level == "WARNING"
    assert settings.log_colors is True


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables override defaults."""
    monkeypatch.setenv("SSH_TOTP_SSH_COMMAND", "/usr/local/bin/ssh")
    monkeypatch.setenv("SSH_TOTP_GENERATOR", "my-totp")
    monkeypatch.setenv("SSH_TOTP_PASSWORD_PROMPT", "password for")
    monkeypatch.setenv("SSH_TOTP_CODE_PROMPT", "OTP:")
    monkeypatch.setenv("SSH_TOTP_READ_SIZE", "4096")
    monkeypatch.setenv("SSH_TOTP_LOG_LEVEL", "debug")
    monkeypatch.setenv("SSH_TOTP_LOG_COLORS", "false")

    settings = Settings.from_env()

    assert settings.ssh_command == "/usr/local/bin/ssh"
    assert settings.totp_command == "my-totp"
    assert settings.password_prompt == "password for"
    assert settings.totp_prompt == "OTP:"
    assert settings.read_size == 4096
    assert settings.log_level == "DEBUG"
    assert settings.log_colors is False


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_invalid_read_size_falls_back(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    """Unparseable or non-positive read sizes use the default."""
    monkeypatch.setenv("SSH_TOTP_READ_SIZE", value)
    assert Settings.from_env().read_size == 1024


def test_empty_prompt_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """An empty prompt would match everything, so it is ignored."""
    monkeypatch.setenv("SSH_TOTP_PASSWORD_PROMPT", "")
    assert Settings.from_env().password_prompt == "Password:"
