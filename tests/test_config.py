"""Tests for environment parsing in loopgram.config."""

import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from loopgram import config


class TestParsers:
    def test_log_level(self) -> None:
        assert config._parse_log_level("debug") == logging.DEBUG
        assert config._parse_log_level(" WARNING ") == logging.WARNING
        assert config._parse_log_level("nonsense") == logging.INFO
        assert config._parse_log_level(None) == logging.INFO

    def test_timeout(self) -> None:
        assert config._parse_timeout("30") == (30, True)
        assert config._parse_timeout(None) == (10, True)
        assert config._parse_timeout("abc") == (10, False)
        assert config._parse_timeout("0") == (10, False)

    def test_username(self) -> None:
        assert config._parse_username("@mybot") == "mybot"
        assert config._parse_username(" mybot ") == "mybot"
        assert config._parse_username("") is None
        assert config._parse_username("@") is None


class TestDerived:
    def test_base_url_uses_token(self) -> None:
        assert config.BASE_URL == f"{config.API_BASE_URL}/bot{config.BOT_TOKEN or ''}"

    def test_timeout_is_positive(self) -> None:
        assert config.REQUEST_TIMEOUT > 0
