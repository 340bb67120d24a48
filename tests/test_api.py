"""Tests for request builders, record decoding and the typed API client."""

import base64

import pytest

from pctl import api
from pctl.api import PortainerApi
from pctl.exceptions import DecodeError
from pctl.models.records import DockerObject, EndpointRecord, StackRecord, Tag
from pctl.transport import HttpMethod


class StubTransport:
    def __init__(self, payload):
        self.payload = payload
        self.requests = []

    def send(self, request):
        self.requests.append(request)
        return self.payload


def test_login_request():
    request = api.login("admin", "s3cret")

    assert request.method is HttpMethod.POST
    assert request.path == "/api/auth"
    assert request.body == {"username": "admin", "password": "s3cret"}


def test_list_endpoints_by_name():
    assert api.list_endpoints(name="swarm-eu").query == (("name", "swarm-eu"),)


def test_list_endpoints_by_tag_ids_is_sorted_and_exact():
    request = api.list_endpoints(tag_ids={5, 2})

    assert request.query == (
        ("tagIds[]", "2"),
        ("tagIds[]", "5"),
        ("tagsPartialMatch", "false"),
    )


def test_list_stacks_without_filters():
    assert api.list_stacks().query == ()


def test_docker_object_requests():
    listing = api.list_docker_objects(3, api.DOCKER_CONFIGS, ["b", "a", "b"])
    create = api.create_docker_object(3, api.DOCKER_SECRETS, "db", b"\x00\xff")
    delete = api.delete_docker_object(3, api.DOCKER_SECRETS, "s1")

    assert listing.path == "/api/endpoints/3/docker/configs"
    assert listing.query == (("filters", '{"name":["a","b"]}'),)
    assert create.path == "/api/endpoints/3/docker/secrets/create"
    assert create.body == {"Name": "db", "Data": base64.b64encode(b"\x00\xff").decode()}
    assert delete.describe() == "DELETE /api/endpoints/3/docker/secrets/s1"


def test_endpoint_record():
    record = EndpointRecord.from_api({"Id": 3, "Name": "swarm-eu", "TagIds": [1, 2]})

    assert record == EndpointRecord(3, "swarm-eu")


@pytest.mark.parametrize(
    "payload",
    [
        {"Name": "no-id"},
        {"Id": "three", "Name": "bad-id"},
        ["not", "an", "object"],
    ],
)
def test_invalid_endpoint_record(payload):
    with pytest.raises(DecodeError):
        EndpointRecord.from_api(payload)


def test_tag_keeps_only_true_memberships():
    tag = Tag.from_api({"ID": 1, "Name": "prod", "Endpoints": {"1": True, "2": False, "3": True}})

    assert tag.endpoint_ids == frozenset({1, 3})


def test_tag_without_endpoints():
    assert Tag.from_api({"ID": 1, "Name": "prod", "Endpoints": None}).endpoint_ids == frozenset()


def test_stack_record():
    record = StackRecord.from_api({"Id": 5, "Name": "web", "EndpointId": 3, "SwarmId": "s1"})

    assert record == StackRecord(5, "web", 3)
    assert record.belongs_to(3)
    assert not record.belongs_to(4)


def test_stack_record_without_endpoint_belongs_anywhere():
    record = StackRecord.from_api({"Id": 5, "Name": "web"})

    assert record.endpoint_id is None
    assert record.belongs_to(4)


def test_stack_record_rejects_bad_endpoint_id():
    with pytest.raises(DecodeError):
        StackRecord.from_api({"Id": 5, "Name": "web", "EndpointId": "three"})


def test_docker_object_requires_spec_name():
    assert DockerObject.from_api({"ID": "c1", "Spec": {"Name": "nginx"}}).name == "nginx"
    with pytest.raises(DecodeError):
        DockerObject.from_api({"ID": "c1", "Spec": {}})


def test_login_requires_jwt():
    with pytest.raises(DecodeError):
        PortainerApi(StubTransport({"token": "x"})).login("admin", "pw")


def test_swarm_id():
    assert PortainerApi(StubTransport({"ID": "swarm-abc"})).swarm_id(3) == "swarm-abc"


def test_list_expects_array():
    with pytest.raises(DecodeError):
        PortainerApi(StubTransport({"message": "oops"})).list_tags()


def test_list_empty_body():
    assert PortainerApi(StubTransport(None)).list_stacks(endpoint_id=3) == []
