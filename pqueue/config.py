"""CLI configuration file loading and validation.

The queue itself is configured by its directory path alone. The CLI can read
that path, and a log level, from a YAML file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from pqueue.exceptions import ConfigValidationError


LOG_LEVELS = ('debug', 'info', 'warn', 'error')
DEFAULT_LOG_LEVEL = 'info'


@dataclass
class QueueConfig:
    """Settings read from a config file."""
    directory: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL


class ConfigLoader:
    """Loads and validates a YAML config file."""

    ALLOWED_KEYS = {'directory', 'log_level'}

    def __init__(self):
        self.errors: List[str] = []

    def load(self, config_path: Path) -> QueueConfig:
        """Load and validate a config file.

        Args:
            config_path: Path to the YAML file

        Returns:
            QueueConfig with relative directories resolved against the
            config file's location

        Raises:
            ConfigValidationError: If the file cannot be read or is invalid
        """
        config_path = Path(config_path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigValidationError([f"Failed to load {config_path}: {e}"]) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                [f"Config must be a YAML mapping, got {type(data).__name__}"]
            )

        return self.validate(data, base_dir=config_path.parent)

    def validate(self, data: Dict[str, Any], base_dir: Path) -> QueueConfig:
        """Validate a parsed config mapping."""
        self.errors = []

        unknown = sorted(str(key) for key in data if key not in self.ALLOWED_KEYS)
        for key in unknown:
            self.errors.append(f"Unknown key '{key}'")

        directory = None
        raw_directory = data.get('directory')
        if raw_directory is not None:
            if not isinstance(raw_directory, str) or not raw_directory.strip():
                self.errors.append("'directory' must be a non-empty string")
            else:
                directory = Path(raw_directory).expanduser()
                if not directory.is_absolute():
                    directory = base_dir / directory

        log_level = data.get('log_level', DEFAULT_LOG_LEVEL)
        if log_level not in LOG_LEVELS:
            self.errors.append(
                f"'log_level' must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )

        if self.errors:
            raise ConfigValidationError(self.errors)

        return QueueConfig(directory=directory, log_level=log_level)


def load_config(config_path: Path) -> QueueConfig:
    """Convenience wrapper around ConfigLoader.load."""
    return ConfigLoader().load(config_path)
