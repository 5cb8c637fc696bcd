from __future__ import annotations

from typing import List, Optional, Protocol, Sequence
import ssl

from ldap3 import Server, Connection, Tls, NONE, SIMPLE, SUBTREE, DEREF_NEVER
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_SUCCESS

from .models import RawAttributeRecord


class DirectoryTransport(Protocol):
    """Capabilities a directory session needs from the wire layer.

    Implementations signal failures by raising ``LDAPException`` (or a subclass).
    Searches always run over the whole subtree, never dereference aliases and
    have no size limit.
    """

    def open_plain_connection(self, url: str) -> None: ...

    def open_secure_connection(self, url: str, insecure_skip_verify: bool) -> None: ...

    def authenticate(self, identity: str, secret: str) -> None: ...

    def execute_search(
        self,
        base_dn: str,
        search_filter: str,
        attributes: Sequence[str],
        time_limit: int,
    ) -> List[RawAttributeRecord]: ...

    def close(self) -> None: ...


def _decode(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _describe(result: Optional[dict]) -> str:
    res = result or {}
    desc = str(res.get("description") or "")
    msg = str(res.get("message") or "")
    if desc and msg:
        return f"{desc}: {msg}"
    return desc or msg or "unknown error"


class Ldap3Transport:
    """DirectoryTransport backed by ldap3. One instance serves one session."""

    def __init__(self, connect_timeout: float = 10.0) -> None:
        self.connect_timeout = connect_timeout
        self.conn: Connection | None = None

    def _open(self, server: Server) -> None:
        # Requested attribute names go to the server as given, unknown ones are
        # dropped server-side.
        conn = Connection(server, auto_bind=False, check_names=False)
        conn.open()
        self.conn = conn

    def open_plain_connection(self, url: str) -> None:
        server = Server(url, use_ssl=False, get_info=NONE, connect_timeout=self.connect_timeout)
        self._open(server)

    def open_secure_connection(self, url: str, insecure_skip_verify: bool) -> None:
        tls = Tls(validate=ssl.CERT_NONE if insecure_skip_verify else ssl.CERT_REQUIRED)
        server = Server(url, use_ssl=True, tls=tls, get_info=NONE, connect_timeout=self.connect_timeout)
        self._open(server)

    def _require_conn(self) -> Connection:
        if self.conn is None:
            raise LDAPException("connection is not open")
        return self.conn

    def authenticate(self, identity: str, secret: str) -> None:
        conn = self._require_conn()
        conn.user = identity
        conn.password = secret
        conn.authentication = SIMPLE
        if not conn.bind():
            raise LDAPException(_describe(conn.result))

    def execute_search(
        self,
        base_dn: str,
        search_filter: str,
        attributes: Sequence[str],
        time_limit: int,
    ) -> List[RawAttributeRecord]:
        conn = self._require_conn()
        # ldap3 returns False for a successful search with no entries, so the
        # result code decides.
        conn.search(
            search_base=base_dn,
            search_filter=search_filter,
            search_scope=SUBTREE,
            dereference_aliases=DEREF_NEVER,
            attributes=list(attributes),
            size_limit=0,
            time_limit=time_limit,
        )
        result = conn.result or {}
        if result.get("result") != RESULT_SUCCESS:
            raise LDAPException(_describe(result))

        records: List[RawAttributeRecord] = []
        for entry in conn.response or []:
            if entry.get("type") != "searchResEntry":
                continue
            raw = entry.get("raw_attributes") or {}
            records.append({str(name): [_decode(v) for v in values] for name, values in raw.items()})
        return records

    def close(self) -> None:
        conn, self.conn = self.conn, None
        if conn is not None:
            conn.unbind()
