"""
pctl Utilities

Local file access shared by commands and the plan executor.
"""

from pathlib import Path
from typing import List

from dotenv import dotenv_values

from pctl.exceptions import LocalFileError
from pctl.models.commands import InlineEnv


def read_local_file(path: Path, what: str) -> bytes:
    """
    Read a local file completely.

    Args:
        path: File to read
        what: Human description for errors (e.g., "config 'nginx'")

    Returns:
        File content as bytes

    Raises:
        LocalFileError: If the file cannot be read
    """
    try:
        return Path(path).expanduser().read_bytes()
    except OSError as e:
        raise LocalFileError(f"Cannot read {what} file: {path}", context=str(e))


def read_text_file(path: Path, what: str) -> str:
    """Read a local UTF-8 text file (see read_local_file)."""
    data = read_local_file(path, what)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LocalFileError(f"{what} file is not valid UTF-8: {path}", context=str(e))


def load_env_file(path: Path) -> List[InlineEnv]:
    """
    Load stack variables from a dotenv file, keeping file order.

    Keys without a value (a bare ``KEY`` line) are skipped.

    Raises:
        LocalFileError: If the file cannot be read
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise LocalFileError(f"Env file not found: {path}")
    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as e:
        raise LocalFileError(f"Cannot read env file: {path}", context=str(e))
    return [InlineEnv(key, value) for key, value in values.items() if value is not None]
