from __future__ import annotations


class LDAPClientError(Exception):
    """Base class for directory failures surfaced to callers."""


class LDAPConnectError(LDAPClientError):
    pass


class LDAPBindError(LDAPConnectError):
    """Bind rejected. Subclasses the connect error so existing handlers keep working."""


class LDAPSearchError(LDAPClientError):
    pass
