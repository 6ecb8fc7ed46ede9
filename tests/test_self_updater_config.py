"""Tests for self_updater.config."""

from __future__ import annotations

import pytest

from self_updater.config import Settings


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PORT", "INSTALL_COMMAND", "BUILD_COMMAND", "COMMAND_TIMEOUT_SECONDS"):
            monkeypatch.delenv(f"SELF_UPDATER_{name}", raising=False)
        settings = Settings(_env_file=None)

        assert settings.route_path == "/api/update"
        assert settings.install_command == "pnpm install"
        assert settings.build_command == "pnpm build"
        assert settings.command_timeout_seconds is None
        assert settings.is_development is False

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SELF_UPDATER_INSTALL_COMMAND", "npm ci")
        monkeypatch.setenv("SELF_UPDATER_PORT", "8123")
        monkeypatch.setenv("SELF_UPDATER_COMMAND_TIMEOUT_SECONDS", "600")

        settings = Settings(_env_file=None)

        assert settings.install_command == "npm ci"
        assert settings.port == 8123
        assert settings.command_timeout_seconds == 600

    def test_is_development(self) -> None:
        assert Settings(_env_file=None, environment="Development").is_development is True
