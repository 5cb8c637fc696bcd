"""LDAP session layer.

Public API:
    - LDAPConfig, SearchConfiguration, SearchRequest
    - DirectorySession, open_session
    - DirectoryTransport, Ldap3Transport
    - error classes
"""

from .errors import LDAPClientError, LDAPConnectError, LDAPBindError, LDAPSearchError
from .models import LDAPConfig, SearchConfiguration, SearchRequest, RawAttributeRecord, USERNAME_PLACEHOLDER
from .transport import DirectoryTransport, Ldap3Transport
from .session import DirectorySession, open_session

__all__ = [
    "LDAPClientError",
    "LDAPConnectError",
    "LDAPBindError",
    "LDAPSearchError",
    "LDAPConfig",
    "SearchConfiguration",
    "SearchRequest",
    "RawAttributeRecord",
    "USERNAME_PLACEHOLDER",
    "DirectoryTransport",
    "Ldap3Transport",
    "DirectorySession",
    "open_session",
]
