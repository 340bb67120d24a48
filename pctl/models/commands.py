"""
Command Models

Validated descriptions of what the operator asked for: how to reach the
server, which endpoint to target, and the per-subcommand payloads.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union


# Server selection


@dataclass(frozen=True)
class UserPassLogin:
    """Inline username/password login against an address."""

    address: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class TokenLogin:
    """Inline API token against an address."""

    address: str
    token: str = field(repr=False)


@dataclass(frozen=True)
class SavedSession:
    """A session previously stored with `pctl login`."""

    name: str


ServerConfig = Union[UserPassLogin, TokenLogin, SavedSession]


# Endpoint selection


@dataclass(frozen=True)
class ById:
    endpoint_id: int

    def describe(self) -> str:
        return f"id {self.endpoint_id}"


@dataclass(frozen=True)
class ByName:
    name: str

    def describe(self) -> str:
        return f"name '{self.name}'"


@dataclass(frozen=True)
class ByTagIds:
    tag_ids: FrozenSet[int]

    def describe(self) -> str:
        return f"tag ids {', '.join(str(t) for t in sorted(self.tag_ids))}"


@dataclass(frozen=True)
class ByTagNames:
    names: FrozenSet[str]

    def describe(self) -> str:
        return f"tags {', '.join(sorted(self.names))}"


EndpointSelector = Union[ById, ByName, ByTagIds, ByTagNames]


# Payload pieces


@dataclass(frozen=True)
class InlineEnv:
    """One KEY=VALUE stack environment override."""

    key: str
    value: str


@dataclass(frozen=True)
class FileMapping:
    """A config or secret name backed by a local file."""

    name: str
    path: Path


# Subcommands


@dataclass(frozen=True)
class LoginOptions:
    session_name: str
    server: Union[UserPassLogin, TokenLogin]


@dataclass(frozen=True)
class LogoutOptions:
    session_name: str


@dataclass(frozen=True)
class DeployOptions:
    server: ServerConfig
    compose: Path
    stack: str
    endpoint: EndpointSelector
    confirmed: bool = False
    inline_vars: Tuple[InlineEnv, ...] = ()
    configs: Tuple[FileMapping, ...] = ()
    secrets: Tuple[FileMapping, ...] = ()
    env_file: Optional[Path] = None


@dataclass(frozen=True)
class DestroyOptions:
    server: ServerConfig
    endpoint: EndpointSelector
    confirmed: bool = False
    stacks: Tuple[str, ...] = ()
    configs: Tuple[str, ...] = ()
    secrets: Tuple[str, ...] = ()
