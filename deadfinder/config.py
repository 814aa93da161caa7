"""Configuration management for Dead Finder.

Loads environment variables and project config files, and resolves the
settings for one scan.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .errors import ConfigParseFailure

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ('deadcoderc.json', '.deadcoderc.json', 'deadcode.config.json')

DEFAULT_SRC_DIR = 'src'
DEFAULT_STRATEGY = 'structural'
DEFAULT_IGNORE_PATTERNS = [
    '**/node_modules/**',
    '**/.next/**',
    '**/dist/**',
    '**/build/**',
    '**/*.test.*',
    '**/*.spec.*',
    '**/__tests__/**',
    '**/__mocks__/**',
]

SAMPLE_CONFIG = {
    'srcDir': 'src',
    'ignorePatterns': DEFAULT_IGNORE_PATTERNS + ['**/*.stories.*', '**/*.d.ts'],
    'analysisMode': 'ast',
}


@dataclass
class AnalyzerConfig:
    """Settings for one scan."""
    src_dir: str = DEFAULT_SRC_DIR
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    strategy: str = DEFAULT_STRATEGY
    config_path: Optional[str] = None  # File the settings came from, if any


class EnvSettings:
    """Environment variable access, with ``.env`` support."""

    def __init__(self, env_path: Optional[str | Path] = None):
        """Initialize settings by loading a ``.env`` file.

        Args:
            env_path: Explicit ``.env`` path; defaults to the working directory
        """
        load_dotenv(env_path or Path.cwd() / ".env")

    @property
    def config_path(self) -> Optional[str]:
        """Explicit config file path from DEADFINDER_CONFIG."""
        return os.getenv("DEADFINDER_CONFIG") or None

    @property
    def log_level(self) -> str:
        return os.getenv("DEADFINDER_LOG_LEVEL", "WARNING").upper()


# Singleton instance
_settings = None


def get_settings() -> EnvSettings:
    """Get or create singleton EnvSettings instance."""
    global _settings
    if _settings is None:
        _settings = EnvSettings()
    return _settings


def find_config_file(start: Optional[str | Path] = None) -> Optional[Path]:
    """Search ``start`` and its parents for a known config filename.

    Args:
        start: Directory to start from (defaults to the working directory)

    Returns:
        Path of the nearest config file, or None
    """
    current = Path(start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


def _parse_config(config_path: Path) -> AnalyzerConfig:
    """Parse a JSON config file.

    Raises:
        ConfigParseFailure: If the file is unreadable, not JSON or malformed
    """
    try:
        data = json.loads(config_path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseFailure(config_path, str(e)) from e
    except json.JSONDecodeError as e:
        raise ConfigParseFailure(config_path, f"invalid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(data, dict):
        raise ConfigParseFailure(config_path, "top-level value must be an object")

    config = AnalyzerConfig(config_path=str(config_path))

    src_dir = data.get('srcDir')
    if src_dir is not None:
        if not isinstance(src_dir, str):
            raise ConfigParseFailure(config_path, "'srcDir' must be a string")
        config.src_dir = src_dir

    ignore_patterns = data.get('ignorePatterns')
    if ignore_patterns is not None:
        if not isinstance(ignore_patterns, list) or not all(isinstance(p, str) for p in ignore_patterns):
            raise ConfigParseFailure(config_path, "'ignorePatterns' must be a list of strings")
        config.ignore_patterns = list(ignore_patterns)

    strategy = data.get('analysisMode', data.get('strategy'))
    if strategy is not None:
        if not isinstance(strategy, str):
            raise ConfigParseFailure(config_path, "'analysisMode' must be a string")
        config.strategy = strategy

    return config


def load_config(config_path: Optional[str | Path] = None) -> AnalyzerConfig:
    """Load a config file, falling back to defaults.

    Without an explicit path, DEADFINDER_CONFIG is consulted, then the
    nearest known config file above the working directory. A broken file is
    reported as a warning and never aborts the scan.

    Args:
        config_path: Explicit config file path

    Returns:
        AnalyzerConfig from the file, or the defaults
    """
    if config_path is None:
        config_path = get_settings().config_path
    path = Path(config_path) if config_path else find_config_file()

    if path is None:
        return AnalyzerConfig()

    if not path.is_file():
        logger.warning("Config file not found: %s, using defaults", path)
        return AnalyzerConfig()

    try:
        config = _parse_config(path)
    except ConfigParseFailure as e:
        logger.warning("%s, using defaults", e)
        return AnalyzerConfig()

    logger.info("Loaded config from %s", path)
    return config


def resolve_config(src_dir: Optional[str] = None,
                   ignore_patterns: Optional[List[str]] = None,
                   strategy: Optional[str] = None,
                   config_path: Optional[str | Path] = None) -> AnalyzerConfig:
    """Merge settings: caller argument > config file > built-in default.

    Returns:
        Resolved AnalyzerConfig
    """
    config = load_config(config_path)
    if src_dir:
        config.src_dir = src_dir
    if ignore_patterns:
        config.ignore_patterns = list(ignore_patterns)
    if strategy:
        config.strategy = strategy
    return config


def create_sample_config(output_path: str | Path = 'deadcoderc.json', force: bool = False) -> Path:
    """Write a sample config file.

    Args:
        output_path: Where to write the file
        force: Overwrite an existing file

    Returns:
        Path of the written file

    Raises:
        FileExistsError: If the file exists and ``force`` is False
    """
    path = Path(output_path)
    if path.exists() and not force:
        raise FileExistsError(f"{path} already exists (use --force to overwrite)")
    path.write_text(json.dumps(SAMPLE_CONFIG, indent=2) + "\n", encoding='utf-8')
    return path
