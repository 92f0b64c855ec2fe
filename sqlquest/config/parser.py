"""Configuration loading for SQL Quest.

A quest run looks for its configuration in this order: an explicit
``--config`` path, ``SQLQUEST_CONFIG_FILE``, a ``sqlquest.yaml`` inside the
quest directory, then the working directory. A database URL given with
``--url`` replaces the file entirely; ``SQLQUEST_DATABASE_URL`` does the same
unless a file was named explicitly.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml
from pydantic import ValidationError

from sqlquest.config.models import EnvironmentSettings, SQLQuestConfig
from sqlquest.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("sqlquest.yaml", "sqlquest.yml")

# ${NAME} or ${NAME:-default}
_ENV_REFERENCE = re.compile(r'\$\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*(?::-([^}]*))?\}')

PathLike = Union[str, Path]


def _env_value(match: "re.Match[str]") -> str:
    name, default = match.group(1), match.group(2)
    value = os.getenv(name)
    if value is not None:
        return value
    if default is not None:
        return default.strip()
    raise ConfigurationError(f"Required environment variable '{name}' is not set")


def _expand_env(value: Any) -> Any:
    """Replace environment references in every string of a YAML document."""
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_env_value, value)
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


def _overlay(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` onto ``base``; nested mappings merge, the rest is replaced."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _overlay(current, value)
        else:
            merged[key] = value
    return merged


class ConfigParser:
    """Reads quest configuration files.

    Files may pull in shared settings with ``include:`` (a path or a list of
    paths, relative to the including file). Included files are overridden by
    the file that includes them, and include cycles are rejected.
    """

    def load_config(
        self,
        config_path: Optional[PathLike] = None,
        quest_dir: Optional[PathLike] = None,
    ) -> SQLQuestConfig:
        """Load and validate a configuration.

        Args:
            config_path: Explicit configuration file.
            quest_dir: Quest directory searched for ``sqlquest.yaml``.

        Raises:
            ConfigurationError: If no file is found or the file is invalid.
        """
        config_file = self._find_config_file(config_path, quest_dir)
        document = self._load_document(config_file)

        try:
            config = SQLQuestConfig(**document)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        logger.debug(f"Loaded configuration from {config_file} with databases {list(config.databases)}")
        return config

    def search_paths(self, quest_dir: Optional[PathLike] = None) -> List[Path]:
        """Candidate configuration files, most specific first."""
        candidates: List[Path] = []
        env_file = EnvironmentSettings().config_file
        if env_file:
            candidates.append(Path(env_file))
        if quest_dir is not None:
            candidates.extend(Path(quest_dir) / name for name in CONFIG_FILENAMES)
        candidates.extend(Path.cwd() / name for name in CONFIG_FILENAMES)
        candidates.append(Path.cwd() / "config" / CONFIG_FILENAMES[0])
        return candidates

    def _find_config_file(self, config_path: Optional[PathLike], quest_dir: Optional[PathLike]) -> Path:
        if config_path:
            path = Path(config_path)
            if not path.is_file():
                raise ConfigurationError(f"Configuration file '{config_path}' not found")
            return path

        candidates = self.search_paths(quest_dir)
        for candidate in candidates:
            if candidate.is_file():
                return candidate

        searched = ", ".join(str(candidate) for candidate in candidates)
        raise ConfigurationError(f"No configuration file found; searched: {searched}")

    def _load_document(self, path: Path, chain: Sequence[Path] = ()) -> Dict[str, Any]:
        """Read ``path`` with its includes resolved and environment references expanded."""
        path = path.resolve()
        if path in chain:
            cycle = " -> ".join(str(p) for p in (*chain, path))
            raise ConfigurationError(f"Circular configuration include: {cycle}")

        label = "Included file" if chain else "Configuration file"
        data = self._read_yaml(path, label)
        if data is None:
            if not chain:
                raise ConfigurationError(f"Configuration file '{path}' is empty")
            return {}

        data = _expand_env(data)
        includes = data.pop('include', None) or []
        if isinstance(includes, str):
            includes = [includes]

        merged: Dict[str, Any] = {}
        for include in includes:
            merged = _overlay(merged, self._load_document(path.parent / include, (*chain, path)))
        return _overlay(merged, data)

    @staticmethod
    def _read_yaml(path: Path, label: str) -> Optional[Dict[str, Any]]:
        try:
            with open(path, 'r', encoding='utf-8') as file:
                data = yaml.safe_load(file)
        except FileNotFoundError:
            raise ConfigurationError(f"{label} '{path}' not found")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in '{path}': {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(f"{label} '{path}' must contain a mapping, got {type(data).__name__}")
        return data

    def create_sample_config(self, output_path: PathLike) -> None:
        """Write a starter configuration to ``output_path``."""
        with open(output_path, 'w', encoding='utf-8') as file:
            yaml.safe_dump(SAMPLE_CONFIG, file, default_flow_style=False, sort_keys=False)


SAMPLE_CONFIG: Dict[str, Any] = {
    'databases': {
        'dev': {
            'type': 'postgresql',
            'host': 'localhost',
            'port': 5432,
            'database': 'myapp_dev',
            'username': 'dev_user',
            'password': '${DEV_DB_PASSWORD:-dev_password}',
            'options': {'connect_timeout': 10},
        },
        'local': {
            'type': 'sqlite',
            'path': './quests.db',
        },
    },
    'default_database': 'local',
    'splitter': {'service_url': None, 'timeout': 10.0},
    'execution': {'sql_dir': 'sql', 'timing': True},
    'retry': {'times': 10, 'wait': 5000},
    'view': {'schema': 'public'},
}

_config_parser = ConfigParser()


def _config_from_url(url: str) -> SQLQuestConfig:
    try:
        return SQLQuestConfig.from_url(url)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid database URL: {e}") from e


def load_config(
    config_path: Optional[PathLike] = None,
    database_url: Optional[str] = None,
    quest_dir: Optional[PathLike] = None,
) -> SQLQuestConfig:
    """Load configuration for a quest run.

    An explicit ``database_url`` always wins. ``SQLQUEST_DATABASE_URL`` is
    used only when no configuration file was named.
    """
    if database_url:
        return _config_from_url(database_url)
    if config_path:
        return _config_parser.load_config(config_path, quest_dir)

    env_url = EnvironmentSettings().database_url
    if env_url:
        return _config_from_url(env_url)
    return _config_parser.load_config(quest_dir=quest_dir)


def validate_config_file(config_path: PathLike) -> SQLQuestConfig:
    """Validate a configuration file and return the parsed configuration."""
    return _config_parser.load_config(config_path)


def create_sample_config(output_path: PathLike) -> None:
    """Create a sample configuration file."""
    _config_parser.create_sample_config(output_path)
