"""Tests for .env / environment configuration."""

from unittest.mock import patch

import pytest

from settings import DEFAULT_BROADCAST_IP, DEFAULT_MAC_ADDRESS, load_settings, parse_users

ENV_VARS = ["TELEGRAM_BOT_TOKEN", "PC_MAC_ADDRESS", "BROADCAST_IP", "INTERFACE", "USERS", "LOG_FILE"]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so that values written by load_dotenv are rolled back too
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def env_file(tmp_path):
    def write(text):
        path = tmp_path / ".env"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write


class TestParseUsers:
    @pytest.mark.parametrize("raw,expected", [
        ("[123,456]", [123, 456]),
        ("123, 456", [123, 456]),
        ("[42]", [42]),
        ("", []),
        (None, []),
        ("[]", []),
    ])
    def test_formats(self, raw, expected):
        assert parse_users(raw) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_users("[123,abc]")


class TestLoadSettings:
    def test_defaults(self, clean_env, env_file):
        settings = load_settings(env_file(""))

        assert settings.telegram_bot_token is None
        assert settings.pc_mac_address == DEFAULT_MAC_ADDRESS
        assert settings.broadcast_ip == DEFAULT_BROADCAST_IP
        assert settings.allowed_users == []
        assert settings.log_file == "bot.log"

    def test_reads_env_file(self, clean_env, env_file):
        path = env_file(
            "TELEGRAM_BOT_TOKEN=abc:def\n"
            "PC_MAC_ADDRESS=aa:bb:cc:dd:ee:ff\n"
            "BROADCAST_IP=10.0.0.255\n"
            "USERS=[1,2]\n"
        )
        settings = load_settings(path)

        assert settings.telegram_bot_token == "abc:def"
        assert settings.pc_mac_address == "aa:bb:cc:dd:ee:ff"
        assert settings.broadcast_ip == "10.0.0.255"
        assert settings.allowed_users == [1, 2]

    def test_environment_wins_over_file(self, clean_env, env_file, monkeypatch):
        monkeypatch.setenv("BROADCAST_IP", "172.16.0.255")
        settings = load_settings(env_file("BROADCAST_IP=10.0.0.255\n"))

        assert settings.broadcast_ip == "172.16.0.255"

    def test_interface_broadcast(self, clean_env, env_file):
        with patch("settings.get_broadcast_address", return_value="10.1.2.255") as mock_brd:
            settings = load_settings(env_file("INTERFACE=eth0\n"))

        mock_brd.assert_called_once_with("eth0")
        assert settings.interface == "eth0"
        assert settings.broadcast_ip == "10.1.2.255"

    def test_explicit_broadcast_skips_interface(self, clean_env, env_file):
        with patch("settings.get_broadcast_address") as mock_brd:
            settings = load_settings(env_file("INTERFACE=eth0\nBROADCAST_IP=10.0.0.255\n"))

        mock_brd.assert_not_called()
        assert settings.broadcast_ip == "10.0.0.255"

    def test_bad_users(self, clean_env, env_file):
        with pytest.raises(ValueError):
            load_settings(env_file("USERS=[one]\n"))
