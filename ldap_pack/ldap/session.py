from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, List
import logging

from ldap3.core.exceptions import LDAPException

from .errors import LDAPBindError, LDAPConnectError, LDAPSearchError
from .models import LDAPConfig, RawAttributeRecord, SearchRequest
from .transport import DirectoryTransport, Ldap3Transport

log = logging.getLogger(__name__)

TransportFactory = Callable[[LDAPConfig], DirectoryTransport]


def default_transport(cfg: LDAPConfig) -> DirectoryTransport:
    return Ldap3Transport(connect_timeout=cfg.connect_timeout)


class SessionState(Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


class DirectorySession:
    """Single-use connection to the directory: connect, search once, close.

    Instances are never reused; build a new one (see ``open_session``) per lookup.
    """

    def __init__(self, cfg: LDAPConfig, transport: DirectoryTransport) -> None:
        self.cfg = cfg
        self.transport = transport
        self.state = SessionState.UNCONNECTED

    def connect(self, use_tls: bool, insecure_skip_verify: bool = False) -> None:
        if self.state is not SessionState.UNCONNECTED:
            raise RuntimeError(f"cannot connect a session in state {self.state.value}")

        try:
            if use_tls:
                self.transport.open_secure_connection(self.cfg.url, insecure_skip_verify)
            else:
                self.transport.open_plain_connection(self.cfg.url)
        except LDAPException as e:
            raise LDAPConnectError(f"Cannot connect to LDAP: {e}") from e

        try:
            self.transport.authenticate(self.cfg.bind_username, self.cfg.bind_password)
        except LDAPException as e:
            self.close()
            raise LDAPBindError(f"Cannot bind to LDAP: {e}") from e

        self.state = SessionState.CONNECTED
        log.debug("Connected to %s as %s (tls=%s)", self.cfg.url, self.cfg.bind_username, use_tls)

    def search(self, request: SearchRequest) -> List[RawAttributeRecord]:
        if self.state is not SessionState.CONNECTED:
            raise RuntimeError(f"cannot search in state {self.state.value}")

        try:
            return self.transport.execute_search(
                request.base_dn,
                request.search_filter,
                request.attributes,
                request.search_timeout,
            )
        except LDAPException as e:
            raise LDAPSearchError(f"LDAP group error: {e}") from e

    def close(self) -> None:
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        try:
            self.transport.close()
        except Exception as e:
            # Never mask the outcome of the lookup itself.
            log.debug("Ignoring error while closing LDAP connection: %s", e)


@contextmanager
def open_session(
    cfg: LDAPConfig,
    use_tls: bool,
    insecure_skip_verify: bool = False,
    transport_factory: TransportFactory = default_transport,
) -> Iterator[DirectorySession]:
    session = DirectorySession(cfg, transport_factory(cfg))
    try:
        session.connect(use_tls, insecure_skip_verify)
        yield session
    finally:
        session.close()
