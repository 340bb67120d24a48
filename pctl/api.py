"""
Portainer API

Request builders for every control plane call pctl makes, and a thin typed
client that sends them through a Transport and decodes the results.
"""

import base64
import json
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pctl.constants import (
    API_AUTH,
    API_ENDPOINTS,
    API_STACKS,
    API_STACKS_CREATE_SWARM,
    API_TAGS,
)
from pctl.exceptions import DecodeError
from pctl.models.records import DockerObject, EndpointRecord, StackRecord, Tag
from pctl.transport import PortainerRequest, Transport

DOCKER_CONFIGS = "configs"
DOCKER_SECRETS = "secrets"

R = TypeVar("R")


def _filters(value: Dict[str, Any]) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def _env_list(env: Dict[str, str]) -> List[Dict[str, str]]:
    return [{"name": key, "value": value} for key, value in env.items()]


# Request builders


def login(username: str, password: str) -> PortainerRequest:
    return PortainerRequest.post(API_AUTH, {"username": username, "password": password})


def list_endpoints(
    name: Optional[str] = None, tag_ids: Iterable[int] = ()
) -> PortainerRequest:
    request = PortainerRequest.get(API_ENDPOINTS)
    if name is not None:
        request = request.with_query("name", name)
    tag_ids = sorted(tag_ids)
    for tag_id in tag_ids:
        request = request.with_query("tagIds[]", tag_id)
    if tag_ids:
        # Endpoints must carry every requested tag
        request = request.with_query("tagsPartialMatch", "false")
    return request


def list_tags() -> PortainerRequest:
    return PortainerRequest.get(API_TAGS)


def inspect_swarm(endpoint_id: int) -> PortainerRequest:
    return PortainerRequest.get(f"{API_ENDPOINTS}/{endpoint_id}/docker/swarm")


def list_stacks(
    endpoint_id: Optional[int] = None, swarm_id: Optional[str] = None
) -> PortainerRequest:
    filters: Dict[str, Any] = {}
    if endpoint_id is not None:
        filters["EndpointID"] = endpoint_id
    if swarm_id is not None:
        filters["SwarmID"] = swarm_id

    request = PortainerRequest.get(API_STACKS)
    if filters:
        request = request.with_query("filters", _filters(filters))
    return request


def create_swarm_stack(
    endpoint_id: int, name: str, swarm_id: str, compose: str, env: Dict[str, str]
) -> PortainerRequest:
    body = {
        "name": name,
        "swarmID": swarm_id,
        "stackFileContent": compose,
        "env": _env_list(env),
    }
    return PortainerRequest.post(API_STACKS_CREATE_SWARM, body).with_query(
        "endpointId", endpoint_id
    )


def update_stack(
    stack_id: int, endpoint_id: int, compose: str, env: Dict[str, str]
) -> PortainerRequest:
    body = {
        "stackFileContent": compose,
        "env": _env_list(env),
        "prune": True,
    }
    return PortainerRequest.put(f"{API_STACKS}/{stack_id}", body).with_query(
        "endpointId", endpoint_id
    )


def delete_stack(stack_id: int, endpoint_id: int) -> PortainerRequest:
    return PortainerRequest.delete(f"{API_STACKS}/{stack_id}").with_query(
        "endpointId", endpoint_id
    )


def list_docker_objects(
    endpoint_id: int, kind: str, names: Iterable[str]
) -> PortainerRequest:
    request = PortainerRequest.get(f"{API_ENDPOINTS}/{endpoint_id}/docker/{kind}")
    return request.with_query("filters", _filters({"name": sorted(set(names))}))


def create_docker_object(
    endpoint_id: int, kind: str, name: str, data: bytes
) -> PortainerRequest:
    body = {"Name": name, "Data": base64.b64encode(data).decode("ascii")}
    return PortainerRequest.post(
        f"{API_ENDPOINTS}/{endpoint_id}/docker/{kind}/create", body
    )


def delete_docker_object(endpoint_id: int, kind: str, object_id: str) -> PortainerRequest:
    return PortainerRequest.delete(f"{API_ENDPOINTS}/{endpoint_id}/docker/{kind}/{object_id}")


# Decoding


def _parse_list(payload: Any, record: Type[R], what: str) -> List[R]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise DecodeError(
            f"Expected a list of {what}",
            context=f"Got {type(payload).__name__}",
        )
    return [record.from_api(item) for item in payload]


def _parse_field(payload: Any, key: str, what: str) -> str:
    if not isinstance(payload, dict) or not payload.get(key):
        raise DecodeError(f"Invalid {what} response", context=f"Missing field '{key}'")
    return str(payload[key])


class PortainerApi:
    """
    Typed access to the control plane.

    Each method issues exactly one request; nothing is cached.
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    def login(self, username: str, password: str) -> str:
        """Exchange username/password for a JWT."""
        return _parse_field(self.transport.send(login(username, password)), "jwt", "login")

    def list_endpoints(
        self, name: Optional[str] = None, tag_ids: Iterable[int] = ()
    ) -> List[EndpointRecord]:
        payload = self.transport.send(list_endpoints(name=name, tag_ids=tag_ids))
        return _parse_list(payload, EndpointRecord, "endpoints")

    def list_tags(self) -> List[Tag]:
        return _parse_list(self.transport.send(list_tags()), Tag, "tags")

    def swarm_id(self, endpoint_id: int) -> str:
        payload = self.transport.send(inspect_swarm(endpoint_id))
        return _parse_field(payload, "ID", "swarm inspect")

    def list_stacks(
        self, endpoint_id: Optional[int] = None, swarm_id: Optional[str] = None
    ) -> List[StackRecord]:
        payload = self.transport.send(list_stacks(endpoint_id, swarm_id))
        return _parse_list(payload, StackRecord, "stacks")

    def create_swarm_stack(
        self, endpoint_id: int, name: str, swarm_id: str, compose: str, env: Dict[str, str]
    ) -> Any:
        return self.transport.send(
            create_swarm_stack(endpoint_id, name, swarm_id, compose, env)
        )

    def update_stack(
        self, stack_id: int, endpoint_id: int, compose: str, env: Dict[str, str]
    ) -> Any:
        return self.transport.send(update_stack(stack_id, endpoint_id, compose, env))

    def delete_stack(self, stack_id: int, endpoint_id: int) -> None:
        self.transport.send(delete_stack(stack_id, endpoint_id))

    def list_docker_objects(
        self, endpoint_id: int, kind: str, names: Iterable[str]
    ) -> List[DockerObject]:
        payload = self.transport.send(list_docker_objects(endpoint_id, kind, names))
        return _parse_list(payload, DockerObject, kind)

    def create_docker_object(
        self, endpoint_id: int, kind: str, name: str, data: bytes
    ) -> Any:
        return self.transport.send(create_docker_object(endpoint_id, kind, name, data))

    def delete_docker_object(self, endpoint_id: int, kind: str, object_id: str) -> None:
        self.transport.send(delete_docker_object(endpoint_id, kind, object_id))
