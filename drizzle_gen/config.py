# drizzle_gen/config.py
"""Configuration management for drizzle-gen."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project output
    output_dir: str = Field(default="./drizzle", description="Default project directory")
    overwrite: bool = False

    # Change-application policy
    allow_breaking: bool = False
    allow_warning: bool = True
    dry_run: bool = False

    # Logging
    log_level: str = "INFO"

    # MCP configuration
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8989

    model_config = SettingsConfigDict(env_prefix="DRIZZLE_GEN_")

    def apply_policy(self) -> dict:
        """Get the keyword arguments for ``apply_safe_changes``.

        Returns:
            The policy flags.
        """
        return {
            "allow_breaking": self.allow_breaking,
            "allow_warning": self.allow_warning,
            "dry_run": self.dry_run,
        }
