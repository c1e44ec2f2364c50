"""
Layered configuration store for the Onchain Agent system.

Values are resolved from an ordered list of sources: default values,
then env-style files in their declared order, then the process
environment. Later sources override earlier ones. Keys are stored and
looked up in upper case.
"""

import logging
import math
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from dotenv import dotenv_values
from pydantic import BaseModel, Field

from onchain_agent.domains.errors import MissingConfigError

# Setup logger for this module
logger = logging.getLogger(__name__)

DEFAULT_ENV_FILES = [
    ".env.local",
    ".env.development",
    ".env",
    ".env.production",
    ".env.test",
]

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class SettingsOptions(BaseModel):
    """Options controlling which sources the store reads."""

    default_values: Dict[str, str] = Field(default_factory=dict)
    env_files: List[str] = Field(default_factory=lambda: list(DEFAULT_ENV_FILES))
    base_dir: Optional[str] = Field(
        None, description="Directory env files resolve against (defaults to CWD)"
    )
    throw_on_missing: bool = False


class Settings:
    """Key/value configuration resolved from layered sources."""

    def __init__(
        self,
        options: Optional[Union[SettingsOptions, Dict]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the store and load every source.

        Args:
            options: Source options; a plain dict is validated into SettingsOptions
            environ: Environment mapping to read last (defaults to os.environ)
        """
        if options is None:
            options = SettingsOptions()
        elif isinstance(options, dict):
            options = SettingsOptions(**options)
        self.options = options
        self._environ = environ
        self._store: Dict[str, str] = {}
        self._initialize()

    def _initialize(self) -> None:
        # Lowest priority first
        for key, value in self.options.default_values.items():
            self.set(key, value)
        self._load_env_files()
        self._load_environ()

    def _resolve(self, file_name: str) -> Path:
        base = Path(self.options.base_dir) if self.options.base_dir else Path.cwd()
        return base / file_name

    def _load_env_files(self) -> None:
        for file_name in self.options.env_files:
            path = self._resolve(file_name)
            if not path.is_file():
                continue
            try:
                values = dotenv_values(path)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.warning(f"Error loading {file_name}: {e}")
                continue

            for key, value in values.items():
                if value is None:
                    logger.warning(
                        f"Ignoring entry '{key}' without a value in {file_name}"
                    )
                    continue
                self.set(key, value)
            logger.debug(f"Loaded {len(values)} entries from {path}")

    def _load_environ(self) -> None:
        environ = os.environ if self._environ is None else self._environ
        # Exact upper-case names win over other casings of the same key
        for key in sorted(environ, key=lambda k: (k == k.upper(), k)):
            value = environ[key]
            if isinstance(value, str):
                self.set(key, value)

    def set(self, key: str, value: str) -> None:
        """Set a configuration value."""
        self._store[key.upper()] = value

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a configuration value, or the default when it is not set.

        Raises:
            MissingConfigError: if throw_on_missing is enabled and no default is given
        """
        value = self._store.get(key.upper())
        if value is None:
            if self.options.throw_on_missing and default is None:
                raise MissingConfigError(key)
            return default
        return value

    def get_required(self, key: str) -> str:
        """Get a configuration value that must be set.

        Raises:
            MissingConfigError: if the key is not set
        """
        value = self._store.get(key.upper())
        if value is None:
            raise MissingConfigError(key)
        return value

    def get_boolean(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        """Get a boolean value. Unrecognized or absent values give the default."""
        value = self._store.get(key.upper())
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        return default

    def get_number(
        self, key: str, default: Optional[Union[int, float]] = None
    ) -> Optional[Union[int, float]]:
        """Get a numeric value. Unparsable or absent values give the default."""
        value = self._store.get(key.upper())
        if value is None:
            return default
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return default
        if math.isnan(number):
            return default
        return number

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return key.upper() in self._store

    def delete(self, key: str) -> bool:
        """Delete a configuration value. Returns whether it existed."""
        return self._store.pop(key.upper(), None) is not None

    def get_all_keys(self) -> List[str]:
        """Get all configuration keys."""
        return list(self._store.keys())

    def get_all_entries(self) -> List[Tuple[str, str]]:
        """Get all configuration entries."""
        return list(self._store.items())

    def clear(self) -> None:
        """Clear all configuration values."""
        self._store.clear()

    def reload(self) -> None:
        """Clear the store and re-apply every source in priority order."""
        self.clear()
        self._initialize()


_settings: Optional[Settings] = None


def get_settings(
    options: Optional[Union[SettingsOptions, Dict]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Return the process-wide store, creating it on first use.

    The first call wins: options passed on later calls are ignored.
    """
    global _settings
    if _settings is None:
        _settings = Settings(options, environ=environ)
    elif options is not None:
        logger.debug("Settings already initialized; ignoring new options")
    return _settings


def reset_settings() -> None:
    """Forget the process-wide store. Intended for tests."""
    global _settings
    _settings = None
