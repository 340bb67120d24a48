"""
Control Plane Records

Dataclass models for the server-side entities pctl reads: endpoints, tags,
stacks, and Docker configs/secrets.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from pctl.exceptions import DecodeError


def _require(data: Any, key: str, kind: str) -> Any:
    if not isinstance(data, dict):
        raise DecodeError(
            f"Invalid {kind} record",
            context=f"Expected object, got {type(data).__name__}",
        )
    if key not in data:
        raise DecodeError(f"Invalid {kind} record", context=f"Missing field '{key}'")
    return data[key]


def _as_int(value: Any, kind: str, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DecodeError(
            f"Invalid {kind} record",
            context=f"Field '{key}' is not an integer: {value!r}",
        )


@dataclass(frozen=True)
class EndpointRecord:
    """A registered target environment."""

    id: int
    name: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "EndpointRecord":
        """Create from a /api/endpoints item."""
        endpoint_id = _as_int(_require(data, "Id", "endpoint"), "endpoint", "Id")
        return cls(
            id=endpoint_id,
            name=str(_require(data, "Name", "endpoint")),
        )


@dataclass(frozen=True)
class Tag:
    """An endpoint label with the endpoints it is currently applied to."""

    id: int
    name: str
    endpoint_ids: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Tag":
        """
        Create from a /api/tags item.

        Only endpoints whose membership flag is true are kept.
        """
        tag_id = _as_int(_require(data, "ID", "tag"), "tag", "ID")
        name = str(_require(data, "Name", "tag"))

        memberships = data.get("Endpoints") or {}
        if not isinstance(memberships, dict):
            raise DecodeError("Invalid tag record", context="'Endpoints' is not an object")

        return cls(
            id=tag_id,
            name=name,
            endpoint_ids=frozenset(
                _as_int(eid, "tag", "Endpoints")
                for eid, flag in memberships.items()
                if flag is True
            ),
        )


@dataclass(frozen=True)
class StackRecord:
    """A deployed stack."""

    id: int
    name: str
    endpoint_id: Optional[int] = None

    def belongs_to(self, endpoint_id: int) -> bool:
        """True unless the record names a different endpoint."""
        return self.endpoint_id is None or self.endpoint_id == endpoint_id

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "StackRecord":
        """Create from a /api/stacks item."""
        stack_id = _as_int(_require(data, "Id", "stack"), "stack", "Id")
        endpoint_id = data.get("EndpointId")
        return cls(
            id=stack_id,
            name=str(_require(data, "Name", "stack")),
            endpoint_id=(
                None if endpoint_id is None else _as_int(endpoint_id, "stack", "EndpointId")
            ),
        )


@dataclass(frozen=True)
class DockerObject:
    """A Docker config or secret as listed through the endpoint proxy."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DockerObject":
        object_id = str(_require(data, "ID", "docker object"))
        spec = _require(data, "Spec", "docker object")
        return cls(id=object_id, name=str(_require(spec, "Name", "docker object spec")))
