"""pctl - Runtime settings"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from pctl.constants import (
    DEFAULT_HOME_DIR,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_FILENAME,
    LOGS_DIRNAME,
    SESSIONS_FILENAME,
)
from pctl.exceptions import PctlError

_FALSE_VALUES = {"0", "false", "no", "off"}


def find_env_file() -> Optional[Path]:
    """Smart .env file detection"""
    search_paths = [
        Path.cwd() / ENV_FILENAME,
        Path(os.environ.get("PCTL_HOME", DEFAULT_HOME_DIR)).expanduser() / ENV_FILENAME,
    ]

    for path in search_paths:
        if path.is_file():
            return path

    return None


@dataclass(frozen=True)
class Settings:
    """Settings for one pctl invocation."""

    home_dir: Path
    log_dir: Path
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    verify_tls: bool = True

    @property
    def sessions_file(self) -> Path:
        return self.home_dir / SESSIONS_FILENAME

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "Settings":
        """
        Build settings from a mapping of PCTL_* variables.

        Args:
            values: Variable mapping (usually environment merged with .env)

        Returns:
            Settings instance

        Raises:
            PctlError: If a numeric value cannot be parsed
        """
        home_dir = Path(values.get("PCTL_HOME") or DEFAULT_HOME_DIR).expanduser()
        log_dir = values.get("PCTL_LOG_DIR")

        raw_timeout = values.get("PCTL_TIMEOUT") or DEFAULT_TIMEOUT_SECONDS
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise PctlError(
                f"Invalid PCTL_TIMEOUT value: {raw_timeout}",
                context="Expected a number of seconds",
            )

        verify = (values.get("PCTL_VERIFY_TLS") or "true").strip().lower()

        return cls(
            home_dir=home_dir,
            log_dir=Path(log_dir).expanduser() if log_dir else home_dir / LOGS_DIRNAME,
            timeout=timeout,
            verify_tls=verify not in _FALSE_VALUES,
        )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from a .env file overlaid by the process environment.

    Args:
        env_file: Explicit .env path (detected automatically if None)

    Returns:
        Settings instance
    """
    env_file = env_file or find_env_file()
    values: Dict[str, Optional[str]] = {}
    if env_file:
        values.update(dotenv_values(env_file))
    values.update({k: v for k, v in os.environ.items() if k.startswith("PCTL_")})
    return Settings.from_mapping(values)
