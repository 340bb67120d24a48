"""
Session Store

Named, persisted sessions shared across pctl invocations. The store is the
only state that outlives a command; it does not lock against concurrent
invocations.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

import yaml

from pctl.constants import SESSIONS_FILE_MODE
from pctl.exceptions import PersistError, UnknownSessionError
from pctl.models.credentials import SessionData


class SessionStore(ABC):
    """Contract for saving, loading and removing named sessions."""

    @abstractmethod
    def get(self, name: str) -> SessionData:
        """
        Load a session.

        Raises:
            UnknownSessionError: If no session is stored under name
            PersistError: If the store cannot be read
        """
        pass

    @abstractmethod
    def save(self, name: str, data: SessionData) -> None:
        """
        Save (or replace) a session.

        Raises:
            PersistError: If the store cannot be written
        """
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        """
        Remove a session. Removing an absent name is not an error.

        Raises:
            PersistError: If the store cannot be written
        """
        pass


class YamlSessionStore(SessionStore):
    """
    Session store backed by a YAML file.

    Layout:
        sessions:
          prod:
            address: https://portainer.example.com
            credential:
              kind: api-token
              value: ptr_...
    """

    def __init__(self, path: Path):
        """
        Initialize store.

        Args:
            path: Sessions file (created on first save)
        """
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise PersistError(
                "Failed to read sessions file",
                context=f"Path: {self.path}, Error: {e}",
            )

        sessions = document.get("sessions") if isinstance(document, dict) else None
        if sessions is None:
            return {}
        if not isinstance(sessions, dict):
            raise PersistError(
                "Malformed sessions file",
                context=f"Path: {self.path}, 'sessions' is not a mapping",
            )
        return sessions

    def _write(self, sessions: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=".sessions-", suffix=".tmp"
            )
            try:
                os.chmod(tmp_path, SESSIONS_FILE_MODE)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    yaml.safe_dump(
                        {"sessions": sessions},
                        f,
                        default_flow_style=False,
                        sort_keys=True,
                    )
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, yaml.YAMLError) as e:
            raise PersistError(
                "Failed to write sessions file",
                context=f"Path: {self.path}, Error: {e}",
            )

    def get(self, name: str) -> SessionData:
        entry = self._load().get(name)
        if entry is None:
            raise UnknownSessionError(name)
        return SessionData.from_dict(entry)

    def save(self, name: str, data: SessionData) -> None:
        sessions = self._load()
        sessions[name] = data.to_dict()
        self._write(sessions)

    def remove(self, name: str) -> None:
        sessions = self._load()
        if name not in sessions:
            return
        del sessions[name]
        self._write(sessions)
