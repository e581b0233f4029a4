"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_FILE = Path("~/.config/todox/todox.yml")


class Settings(BaseSettings):
    """Application settings."""

    config_file: Path = Field(
        default_factory=lambda: DEFAULT_CONFIG_FILE.expanduser(),
        description="Path to todox.yml",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "TODOX_",
    }
