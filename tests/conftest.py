from __future__ import annotations

from typing import Callable

import pytest
from ldap3.core.exceptions import LDAPException

from ldap_pack.ldap import LDAPConfig, SearchConfiguration


class FakeTransport:
    """In-memory DirectoryTransport recording every call made to it."""

    def __init__(
        self,
        records: list[dict[str, list[str]]] | None = None,
        open_error: str = "",
        bind_error: str = "",
        search_error: str = "",
        close_error: str = "",
    ) -> None:
        self.records = records or []
        self.open_error = open_error
        self.bind_error = bind_error
        self.search_error = search_error
        self.close_error = close_error
        self.calls: list[tuple] = []

    def count(self, name: str) -> int:
        return sum(1 for c in self.calls if c[0] == name)

    def open_plain_connection(self, url: str) -> None:
        self.calls.append(("open_plain", url))
        if self.open_error:
            raise LDAPException(self.open_error)

    def open_secure_connection(self, url: str, insecure_skip_verify: bool) -> None:
        self.calls.append(("open_secure", url, insecure_skip_verify))
        if self.open_error:
            raise LDAPException(self.open_error)

    def authenticate(self, identity: str, secret: str) -> None:
        self.calls.append(("authenticate", identity, secret))
        if self.bind_error:
            raise LDAPException(self.bind_error)

    def execute_search(self, base_dn, search_filter, attributes, time_limit):
        self.calls.append(("search", base_dn, search_filter, tuple(attributes), time_limit))
        if self.search_error:
            raise LDAPException(self.search_error)
        return self.records

    def close(self) -> None:
        self.calls.append(("close",))
        if self.close_error:
            raise LDAPException(self.close_error)


@pytest.fixture
def fake_transport() -> type[FakeTransport]:
    return FakeTransport


@pytest.fixture
def ldap_cfg() -> LDAPConfig:
    return LDAPConfig(url="ldap.example.com:636", bind_username="svc-flyte", bind_password="s3cret")


@pytest.fixture
def search_cfg() -> SearchConfiguration:
    return SearchConfiguration(
        attributes=("memberOf",),
        base_dn="cn=blah-blah,OU=User Policies,OU=All Users,DC=FAE,DC=CORPORATE,",
        search_filter="(mailNickname={username})",
        group_attribute="cn",
        search_timeout=20,
        enable_tls=True,
    )


@pytest.fixture
def make_transport() -> Callable[..., tuple[Callable[[LDAPConfig], FakeTransport], list[FakeTransport]]]:
    """Build a transport factory; every transport it creates is appended to the returned list."""

    def _make(**kwargs):
        created: list[FakeTransport] = []

        def factory(cfg: LDAPConfig) -> FakeTransport:
            t = FakeTransport(**kwargs)
            created.append(t)
            return t

        return factory, created

    return _make


@pytest.fixture
def ldap_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    values = {
        "LDAP_URL": "ldap.example.com:636",
        "BIND_USERNAME": "svc-flyte",
        "BIND_PASSWORD": "s3cret",
        "BASE_DN": "OU=All Users,DC=example,DC=com",
        "ATTRIBUTES": "memberOf, uid",
        "SEARCH_FILTER": "(mailNickname={username})",
        "GROUP_ATTRIBUTE": "cn",
        "ENABLE_TLS": "true",
    }
    for k, v in values.items():
        monkeypatch.setenv(k, v)
    for k in (
        "INSECURE_SKIP_VERIFY",
        "SEARCH_TIMEOUT_IN_SECONDS",
        "LDAP_CONNECT_TIMEOUT_SECONDS",
        "LOG_LEVEL",
        "LOG_DIR",
        "LOG_RETENTION_DAYS",
        "PACK_HELP_URL",
    ):
        monkeypatch.delenv(k, raising=False)
    return values
