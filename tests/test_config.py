# tests/test_config.py
"""Tests for configuration management."""

from drizzle_gen.config import Settings
from drizzle_gen.main import build_parser, load_settings


class TestSettings:
    """Settings tests."""

    def test_default_settings(self):
        """Test default settings values."""
        settings = Settings()
        assert settings.output_dir == "./drizzle"
        assert settings.overwrite is False
        assert settings.allow_breaking is False
        assert settings.allow_warning is True
        assert settings.dry_run is False
        assert settings.log_level == "INFO"
        assert settings.mcp_port == 8989

    def test_env_prefix(self, monkeypatch):
        """Test that environment variables use the DRIZZLE_GEN_ prefix."""
        monkeypatch.setenv("DRIZZLE_GEN_ALLOW_BREAKING", "true")
        monkeypatch.setenv("DRIZZLE_GEN_OUTPUT_DIR", "/tmp/schema")
        settings = Settings()
        assert settings.allow_breaking is True
        assert settings.output_dir == "/tmp/schema"

    def test_apply_policy(self):
        """Test the policy keyword arguments."""
        settings = Settings(allow_warning=False, dry_run=True)
        assert settings.apply_policy() == {
            "allow_breaking": False,
            "allow_warning": False,
            "dry_run": True,
        }


class TestCommandLine:
    """Command line tests."""

    def test_arguments_override_settings(self):
        """Test that given arguments win over defaults."""
        args = build_parser().parse_args(["--output-dir", "out", "--port", "9000"])
        settings = load_settings(args)
        assert settings.output_dir == "out"
        assert settings.mcp_port == 9000
        assert settings.mcp_host == "0.0.0.0"

    def test_missing_arguments_keep_defaults(self, monkeypatch):
        """Test that omitted arguments fall back to the environment."""
        monkeypatch.setenv("DRIZZLE_GEN_LOG_LEVEL", "DEBUG")
        settings = load_settings(build_parser().parse_args([]))
        assert settings.log_level == "DEBUG"
