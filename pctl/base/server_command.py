"""
Server Command Base Class

Base class for commands that talk to a control plane.
Provides session store, transport and authenticator wiring.
"""

from typing import List, Optional

from rich.console import Console

from pctl.config import Settings
from pctl.models.commands import ServerConfig
from pctl.models.credentials import Credential
from pctl.services import Authenticator, Session, SessionStore, YamlSessionStore
from pctl.services.authenticator import TransportFactory
from pctl.transport import RequestsTransport, Transport

from .base_command import BaseCommand


class ServerCommand(BaseCommand):
    """
    Base class for server-facing commands.

    Provides:
    - Session store rooted in the pctl home directory
    - Transports configured from settings (timeout, TLS verification),
      closed when the command finishes
    - Authenticator for inline credentials and saved sessions
    """

    def __init__(
        self,
        verbose: bool = False,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        session_store: Optional[SessionStore] = None,
        transport_factory: Optional[TransportFactory] = None,
    ):
        super().__init__(verbose=verbose, settings=settings, console=console)
        self.session_store = session_store or YamlSessionStore(self.settings.sessions_file)
        self.transport_factory = transport_factory or self.build_transport
        self.transports: List[Transport] = []

    def build_transport(self, address: str, credential: Credential) -> Transport:
        return RequestsTransport(
            address,
            credential,
            timeout=self.settings.timeout,
            verify=self.settings.verify_tls,
            logger=self.logger,
        )

    def open_transport(self, address: str, credential: Credential) -> Transport:
        """Build a transport and remember it so cleanup() can close it."""
        transport = self.transport_factory(address, credential)
        self.transports.append(transport)
        return transport

    def authenticator(self) -> Authenticator:
        return Authenticator(self.open_transport, self.session_store, logger=self.logger)

    def open_session(self, server: ServerConfig) -> Session:
        """
        Authenticate against the server.

        Raises:
            AuthError: If the login is rejected
            UnknownSessionError: If a saved session does not exist
        """
        return self.authenticator().authenticate(server)

    def cleanup(self) -> None:
        while self.transports:
            self.transports.pop().close()
