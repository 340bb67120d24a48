"""
Transport

HTTP-shaped request values and the Transport contract used by every
service. ``RequestsTransport`` is the real implementation; tests swap in a
fake that records calls.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Tuple

import requests

from pctl.constants import (
    API_KEY_HEADER,
    AUTHORIZATION_HEADER,
    DEFAULT_TIMEOUT_SECONDS,
    USER_AGENT,
)
from pctl.exceptions import DecodeError, TransportError
from pctl.logger import CommandLogger
from pctl.models.credentials import Credential, CredentialKind


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class PortainerRequest:
    """One request against the control plane API."""

    method: HttpMethod
    path: str
    body: Optional[Any] = None
    query: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def get(cls, path: str) -> "PortainerRequest":
        return cls(HttpMethod.GET, path)

    @classmethod
    def delete(cls, path: str) -> "PortainerRequest":
        return cls(HttpMethod.DELETE, path)

    @classmethod
    def post(cls, path: str, body: Any) -> "PortainerRequest":
        return cls(HttpMethod.POST, path, body=body)

    @classmethod
    def put(cls, path: str, body: Any) -> "PortainerRequest":
        return cls(HttpMethod.PUT, path, body=body)

    def with_query(self, key: str, value: Any) -> "PortainerRequest":
        """Return a copy with one more query parameter appended."""
        return replace(self, query=self.query + ((key, str(value)),))

    def describe(self) -> str:
        return f"{self.method.value} {self.path}"


class Transport(ABC):
    """Single capability contract: send a request, get decoded JSON back."""

    @abstractmethod
    def send(self, request: PortainerRequest) -> Any:
        """
        Send a request.

        Args:
            request: Request to send

        Returns:
            Decoded JSON body, or None when the response has no body

        Raises:
            TransportError: Network failure or non-success status
            DecodeError: Response body is not valid JSON
        """
        pass

    def close(self) -> None:
        """Release network resources. Safe to call more than once."""
        pass


def auth_headers(credential: Credential) -> dict:
    """Headers that authenticate a request with the given credential."""
    if credential.kind is CredentialKind.API_TOKEN:
        return {API_KEY_HEADER: credential.value}
    if credential.kind is CredentialKind.BEARER:
        return {AUTHORIZATION_HEADER: f"Bearer {credential.value}"}
    return {}


def _error_detail(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] if text else None

    if isinstance(payload, dict):
        parts = [str(payload[k]) for k in ("message", "details") if payload.get(k)]
        return ": ".join(parts) or None
    return None


class RequestsTransport(Transport):
    """Transport bound to one server address using a requests session."""

    def __init__(
        self,
        address: str,
        credential: Credential,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        verify: bool = True,
        logger: Optional[CommandLogger] = None,
    ):
        """
        Initialize transport.

        Args:
            address: Server base address (e.g., https://portainer.example.com)
            credential: Credential attached to every request
            timeout: Per-request timeout in seconds
            verify: Verify TLS certificates
            logger: Optional command logger for request tracing
        """
        self.address = address.rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self.logger = logger
        self.http = requests.Session()
        self.http.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        self.http.headers.update(auth_headers(credential))

    def url_for(self, path: str) -> str:
        return f"{self.address}{path}"

    def close(self) -> None:
        self.http.close()

    def send(self, request: PortainerRequest) -> Any:
        if self.logger:
            self.logger.log_request(request.method.value, request.path)

        try:
            response = self.http.request(
                request.method.value,
                self.url_for(request.path),
                params=list(request.query) or None,
                json=request.body,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Request failed: {request.describe()}",
                context=str(e),
            )

        if response.status_code >= 400:
            raise TransportError(
                f"{request.describe()} returned HTTP {response.status_code}",
                context=_error_detail(response),
                status_code=response.status_code,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"Invalid JSON in response to {request.describe()}",
                context=str(e),
            )
