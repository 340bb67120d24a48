"""
Authentication Service

Turns a server description (inline login, inline token, or saved session
name) into a Session bound to one address.
"""

from typing import TYPE_CHECKING, Callable, Optional

from pctl.api import PortainerApi
from pctl.exceptions import (
    AuthError,
    PersistError,
    TransportError,
    UnsavableCredentialError,
)
from pctl.logger import CommandLogger
from pctl.models.commands import (
    EndpointSelector,
    LoginOptions,
    SavedSession,
    ServerConfig,
    TokenLogin,
    UserPassLogin,
)
from pctl.models.credentials import Credential, SessionData
from pctl.services.handle import ConsumableHandle
from pctl.services.session_store import SessionStore
from pctl.transport import Transport

if TYPE_CHECKING:
    from pctl.services.endpoint_resolver import Endpoint

TransportFactory = Callable[[str, Credential], Transport]

# Statuses the control plane uses for rejected credentials
AUTH_REJECTED_STATUSES = (400, 401, 403, 422)


class Session(ConsumableHandle):
    """An authenticated handle bound to one server address."""

    handle_label = "session"

    def __init__(
        self,
        transport: Transport,
        credential: Credential,
        address: str,
        password_login: bool = False,
    ):
        super().__init__()
        self._transport = transport
        self._credential = credential
        self._address = address
        self._password_login = password_login

    @property
    def credential(self) -> Credential:
        return self._credential

    @property
    def address(self) -> str:
        return self._address

    @property
    def password_login(self) -> bool:
        """True when the token was obtained by a username/password login."""
        return self._password_login

    @property
    def api(self) -> PortainerApi:
        self.ensure_live()
        return PortainerApi(self._transport)

    def release_transport(self) -> Transport:
        """Hand the transport to the next stage and retire this session."""
        self.consume()
        return self._transport

    def save(self, store: SessionStore, name: str) -> None:
        """
        Persist this session under a name.

        Args:
            store: Session store to write to
            name: Session name

        Raises:
            UnsavableCredentialError: If the session came from a username/password
                login or carries no token
            PersistError: If the store write fails
        """
        if self._password_login:
            raise UnsavableCredentialError(
                "Saving username and password is not supported",
                context="Log in with an API token (-t) to save a session",
            )
        if not self._credential.is_token:
            raise UnsavableCredentialError(
                "Only token sessions can be saved",
                context="Log in with an API token (-t) to save a session",
            )
        store.save(name, SessionData.from_credential(self._address, self._credential))

    def endpoint(
        self, selector: EndpointSelector, logger: Optional[CommandLogger] = None
    ) -> "Endpoint":
        """Resolve exactly one endpoint; consumes this session."""
        from pctl.services.endpoint_resolver import EndpointResolver

        return EndpointResolver(logger=logger).resolve(self, selector)

    def __repr__(self) -> str:
        return f"Session(address={self._address}, credential={self._credential!r})"


class Authenticator:
    """
    Authentication service.

    Responsibilities:
    - Exchange username/password for a bearer token (one login call)
    - Bind API tokens without a network call
    - Rebuild saved sessions from the session store
    - Persist sessions for the login command
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        store: SessionStore,
        logger: Optional[CommandLogger] = None,
    ):
        """
        Initialize authenticator.

        Args:
            transport_factory: Builds a transport for (address, credential)
            store: Session store for saved sessions
            logger: Optional command logger
        """
        self.transport_factory = transport_factory
        self.store = store
        self.logger = logger

    def authenticate(self, server: ServerConfig) -> Session:
        """
        Build a session for a server description.

        Args:
            server: Inline login, inline token, or saved session name

        Returns:
            Session bound to the server address

        Raises:
            AuthError: If the login is rejected
            TransportError: If the login call fails
            UnknownSessionError: If a saved session does not exist
        """
        if isinstance(server, UserPassLogin):
            return self._login(server)
        if isinstance(server, TokenLogin):
            return self._bind(server.address, Credential.api_token(server.token))
        if isinstance(server, SavedSession):
            data = self.store.get(server.name)
            if self.logger:
                self.logger.log(f"Using saved session '{server.name}' ({data.address})")
            return self._bind(data.address, data.to_credential())
        raise TypeError(f"Unsupported server config: {server!r}")

    def login(self, options: LoginOptions) -> Session:
        """
        Authenticate and save the session under the requested name.

        The login itself is not undone when saving fails.

        Raises:
            UnsavableCredentialError: If the session came from a username/password
                login (the store is not touched)
            PersistError: If the session was created but could not be saved
        """
        session = self.authenticate(options.server)
        try:
            session.save(self.store, options.session_name)
        except PersistError as e:
            if self.logger:
                self.logger.warning("Login succeeded but the session was not saved")
            raise PersistError(
                f"Login succeeded but saving session '{options.session_name}' failed",
                context=e.format_message(),
            )
        return session

    def _bind(
        self, address: str, credential: Credential, password_login: bool = False
    ) -> Session:
        transport = self.transport_factory(address, credential)
        return Session(transport, credential, address, password_login=password_login)

    def _login(self, server: UserPassLogin) -> Session:
        anonymous = self.transport_factory(server.address, Credential.anonymous())
        if self.logger:
            self.logger.log(f"Logging in to {server.address} as '{server.username}'")

        try:
            token = PortainerApi(anonymous).login(server.username, server.password)
        except TransportError as e:
            if e.status_code in AUTH_REJECTED_STATUSES:
                raise AuthError(
                    f"Login rejected for user '{server.username}'",
                    context=e.context or f"HTTP {e.status_code}",
                )
            raise
        finally:
            anonymous.close()

        # The session talks with the JWT but remembers it came from a password
        return self._bind(server.address, Credential.bearer(token), password_login=True)
