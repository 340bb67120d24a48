"""
Credential Models

Dataclass models for credentials and their persisted projection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pctl.exceptions import PersistError


class CredentialKind(Enum):
    """Kind of credential bound to a session."""

    ANONYMOUS = "anonymous"
    API_TOKEN = "api-token"
    BEARER = "bearer-token"


@dataclass(frozen=True)
class Credential:
    """Resolved credential attached to every request of a session."""

    kind: CredentialKind
    value: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Credential":
        return cls(CredentialKind.ANONYMOUS)

    @classmethod
    def api_token(cls, token: str) -> "Credential":
        return cls(CredentialKind.API_TOKEN, token)

    @classmethod
    def bearer(cls, token: str) -> "Credential":
        return cls(CredentialKind.BEARER, token)

    @property
    def is_token(self) -> bool:
        """Check if credential carries a token that can be persisted."""
        return self.kind in (CredentialKind.API_TOKEN, CredentialKind.BEARER)

    def __repr__(self) -> str:
        # Never leak the token value into logs or tracebacks
        return f"Credential(kind={self.kind.value})"


@dataclass(frozen=True)
class SessionData:
    """Persistable projection of a session: address plus token credential."""

    address: str
    kind: CredentialKind
    value: str

    def __post_init__(self):
        if self.kind is CredentialKind.ANONYMOUS:
            raise ValueError("SessionData requires a token credential")

    @classmethod
    def from_credential(cls, address: str, credential: Credential) -> "SessionData":
        return cls(address=address, kind=credential.kind, value=credential.value)

    def to_credential(self) -> Credential:
        """Rebuild the credential this session was saved with."""
        return Credential(self.kind, self.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "address": self.address,
            "credential": {"kind": self.kind.value, "value": self.value},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionData":
        """
        Create from dictionary.

        Raises:
            PersistError: If the stored entry is malformed
        """
        try:
            credential = data["credential"]
            return cls(
                address=str(data["address"]),
                kind=CredentialKind(credential["kind"]),
                value=str(credential["value"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PersistError("Malformed session entry", context=str(e))

    def __repr__(self) -> str:
        return f"SessionData(address={self.address}, kind={self.kind.value})"
