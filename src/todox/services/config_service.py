"""Configuration service for loading todox.yml."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import TodoxConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching application configuration."""

    def __init__(self, config_path: Path) -> None:
        """Initialize the config service.

        Args:
            config_path: Path to the todox.yml file
        """
        self.config_path = config_path
        self._config: TodoxConfig | None = None
        self._config_error: str | None = None

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    def get_config(self) -> TodoxConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._config_error = None

    def _load_config(self) -> TodoxConfig:
        """Load configuration from file or return default."""
        name = self.config_path.name
        self._config_error = None

        if not self.config_path.exists():
            logger.debug("No %s found, using defaults", name)
            return TodoxConfig.default()

        try:
            with self.config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)

            if data is None:
                self._config_error = f"{name} is empty"
                logger.warning(self._config_error)
                return TodoxConfig.default()

            if not isinstance(data, dict):
                self._config_error = f"{name} must contain a mapping"
                logger.warning(self._config_error)
                return TodoxConfig.default()

            config = TodoxConfig(**data)
            logger.info("Loaded %s with %d todo file(s)", name, len(config.todo_files))
            return config

        except yaml.YAMLError as e:
            self._config_error = f"Invalid YAML in {name}: {e}"
            logger.warning(self._config_error)
            return TodoxConfig.default()

        except ValidationError as e:
            self._config_error = f"Invalid configuration in {name}: {e}"
            logger.warning(self._config_error)
            return TodoxConfig.default()

        except OSError as e:
            self._config_error = f"Error loading {name}: {e}"
            logger.warning(self._config_error)
            return TodoxConfig.default()
