"""Tests for the bot identity gate."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from loopgram.core.identity import is_for_this_bot


class TestIsForThisBot:
    def test_no_explicit_username(self) -> None:
        assert is_for_this_bot(None, "mybot") is True
        assert is_for_this_bot(None, None) is True

    def test_matching_username(self) -> None:
        assert is_for_this_bot("mybot", "mybot") is True

    def test_other_bot(self) -> None:
        assert is_for_this_bot("otherbot", "mybot") is False

    def test_comparison_is_case_sensitive(self) -> None:
        assert is_for_this_bot("MyBot", "mybot") is False

    def test_addressed_command_without_configured_username(self) -> None:
        assert is_for_this_bot("mybot", None) is False
