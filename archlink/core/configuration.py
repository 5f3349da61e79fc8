"""
Configuration management for archlink.

This module resolves the user configuration once per process. The ranking
engine never reads it: the resolved values are passed to it explicitly.
"""

import logging
import os
import tomllib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from archlink.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10

CONFIG_ENV_VAR = "ARCHLINK_CONFIG"
USER_CONFIG_DIR = Path("~/.config/archlink")
SYSTEM_CONFIG_FILE = Path("/etc/archlink/config.toml")

OFFICIAL_BACKENDS = ("web", "local")


@dataclass
class ArchlinkConfig:
    """
    Resolved archlink configuration.
    """
    max_results: int = DEFAULT_MAX_RESULTS
    request_timeout: int = 10
    retry_count: int = 3
    official_backend: str = "web"
    sync_db_path: str = "/var/lib/pacman/sync"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def resolve_max_results(value: Any) -> int:
    """
    Resolve the configured result limit, falling back to the default.

    Missing, non-integer and non-positive values yield 10 with a warning.
    """
    if value is None:
        return DEFAULT_MAX_RESULTS
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        logger.warning(f"Invalid max_results {value!r}, using {DEFAULT_MAX_RESULTS}")
        return DEFAULT_MAX_RESULTS
    return value


def _positive_int(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        logger.warning(f"Invalid {key} {value!r}, using {default}")
        return default
    return value


class ConfigurationManager:
    """
    Locates, loads and validates the archlink configuration file.

    Lookup order when no explicit path is given:
    - ``$ARCHLINK_CONFIG``
    - ``~/.config/archlink/config.yaml``
    - ``~/.config/archlink/config.toml``
    - ``/etc/archlink/config.toml``

    YAML files are parsed with PyYAML, TOML files with tomllib.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Explicit configuration file. Errors reading it are
                raised instead of being downgraded to warnings.
        """
        self.explicit_path = Path(config_path).expanduser() if config_path else None
        self._config: Optional[ArchlinkConfig] = None

    def candidate_paths(self) -> List[Path]:
        if self.explicit_path is not None:
            return [self.explicit_path]

        paths = []
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            paths.append(Path(env_path).expanduser())
        user_dir = USER_CONFIG_DIR.expanduser()
        paths.extend([user_dir / "config.yaml", user_dir / "config.toml", SYSTEM_CONFIG_FILE])
        return paths

    def find_config_file(self) -> Optional[Path]:
        for path in self.candidate_paths():
            if path.is_file():
                return path
        return None

    def load(self) -> ArchlinkConfig:
        """
        Load and resolve the configuration.

        Returns:
            ArchlinkConfig with every value resolved to a usable default.

        Raises:
            ConfigurationError: If an explicitly given file is missing or malformed.
        """
        if self._config is not None:
            return self._config

        path = self.find_config_file()
        data: Dict[str, Any] = {}

        if path is None:
            if self.explicit_path is not None:
                raise ConfigurationError(f"Configuration file not found: {self.explicit_path}")
            logger.debug("No configuration file found, using defaults")
        else:
            try:
                data = read_config_file(path)
                logger.debug(f"Loaded configuration from {path}")
            except ConfigurationError as e:
                if self.explicit_path is not None:
                    raise
                logger.warning(f"{e}; using defaults")

        self._config = self._build_config(data)
        return self._config

    def _build_config(self, data: Dict[str, Any]) -> ArchlinkConfig:
        defaults = ArchlinkConfig()

        backend = data.get("official_backend", defaults.official_backend)
        if backend not in OFFICIAL_BACKENDS:
            logger.warning(f"Unknown official_backend {backend!r}, using '{defaults.official_backend}'")
            backend = defaults.official_backend

        sync_db_path = data.get("sync_db_path", defaults.sync_db_path)
        if not isinstance(sync_db_path, str):
            logger.warning(f"Invalid sync_db_path {sync_db_path!r}, using {defaults.sync_db_path}")
            sync_db_path = defaults.sync_db_path

        return ArchlinkConfig(
            max_results=resolve_max_results(data.get("max_results")),
            request_timeout=_positive_int(data, "request_timeout", defaults.request_timeout),
            retry_count=_positive_int(data, "retry_count", defaults.retry_count),
            official_backend=backend,
            sync_db_path=sync_db_path,
        )


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML or TOML configuration file.

    Args:
        path: Configuration file; ``.toml`` files are parsed as TOML,
            anything else as YAML.

    Returns:
        Mapping of configuration keys, empty for an empty file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    path = Path(path)

    try:
        if path.suffix == ".toml":
            with open(path, 'rb') as f:
                data = tomllib.load(f)
        else:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file format in {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid config file format in {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config file format in {path}: expected a mapping")

    return data


def write_default_config(path: Union[str, Path], force: bool = False) -> Path:
    """
    Write a default YAML configuration file.

    Args:
        path: Destination file
        force: Overwrite an existing file

    Returns:
        Path of the written file

    Raises:
        ConfigurationError: If the file exists and force is False, or cannot be written
    """
    path = Path(path).expanduser()
    if path.exists() and not force:
        raise ConfigurationError(f"Configuration already exists at {path}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(ArchlinkConfig().to_dict(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigurationError(f"Failed to write config file {path}: {e}")

    return path
