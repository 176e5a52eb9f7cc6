"""Tests for helper utilities and configuration validation."""
import pytest

from dentalbot.config import Config
from dentalbot.utils.helpers import (
    format_file_size, format_vnd, parse_leading_int, validate_image_extension
)


class TestParseLeadingInt:
    @pytest.mark.parametrize("text,expected", [
        ("30", 30),
        ("30 tuổi", 30),
        ("  7/10", 7),
        ("-5", -5),
        ("+3", 3),
        ("abc", None),
        ("tuổi 30", None),
        ("", None),
    ])
    def test_parse(self, text, expected):
        assert parse_leading_int(text) == expected


class TestFormatVnd:
    @pytest.mark.parametrize("amount,expected", [
        (0, "0"),
        (999, "999"),
        (1500000, "1.500.000"),
        (3000000.0, "3.000.000"),
        (1234.5, "1.234,5"),
    ])
    def test_grouping(self, amount, expected):
        assert format_vnd(amount) == expected


class TestUploadHelpers:
    def test_image_extension(self):
        allowed = [".jpg", ".jpeg", ".png", ".gif"]
        assert validate_image_extension("a.JPG", allowed)
        assert validate_image_extension("scan.final.png", allowed)
        assert not validate_image_extension("a.pdf", allowed)
        assert not validate_image_extension("noext", allowed)
        assert not validate_image_extension("", allowed)

    def test_file_size(self):
        assert format_file_size(10 * 1024 * 1024) == "10.0 MB"


class TestConfigValidation:
    def test_defaults_are_valid(self, monkeypatch):
        monkeypatch.setattr(Config, "AI_ANALYSIS_URL", "http://localhost:3010/analyze")
        monkeypatch.setattr(Config, "AI_ANALYSIS_TIMEOUT", 60.0)
        monkeypatch.setattr(Config, "SESSION_TTL_SECONDS", None)
        monkeypatch.setattr(Config, "MAX_SESSIONS", None)
        assert Config.validate() is True

    @pytest.mark.parametrize("attr,value", [
        ("AI_ANALYSIS_URL", ""),
        ("AI_ANALYSIS_TIMEOUT", 0),
        ("SESSION_TTL_SECONDS", -1),
        ("MAX_SESSIONS", 0),
    ])
    def test_invalid_settings(self, monkeypatch, attr, value):
        monkeypatch.setattr(Config, attr, value)
        with pytest.raises(RuntimeError):
            Config.validate()
