from __future__ import annotations

from typing import List, Sequence
import logging

from ..ldap import (
    LDAPConfig,
    RawAttributeRecord,
    SearchConfiguration,
    SearchRequest,
    USERNAME_PLACEHOLDER,
    open_session,
)
from ..ldap.session import TransportFactory, default_transport

log = logging.getLogger(__name__)


def build_search_filter(template: str, username: str) -> str:
    """Substitute every ``{username}`` in the template.

    The username is inserted verbatim: filter metacharacters are not escaped,
    so input has to be validated by the caller.
    """
    return template.replace(USERNAME_PLACEHOLDER, username)


def build_search_request(sd: SearchConfiguration, username: str) -> SearchRequest:
    return SearchRequest(
        attributes=tuple(sd.attributes),
        base_dn=sd.base_dn,
        search_filter=build_search_filter(sd.search_filter, username),
        search_timeout=sd.search_timeout,
    )


def extract_group_from_value(attribute_value: str, group_attribute: str) -> str:
    """Return the value of the first ``<group_attribute>=`` component of a DN.

    e.g. ("OU=Lists,CN=London team,DC=com", "cn") -> "London team".
    The key match is case-insensitive. Escaped commas are not handled.
    Returns "" when no component matches.
    """
    prefix = group_attribute.upper() + "="
    for rdn in attribute_value.split(","):
        if rdn.upper().startswith(prefix):
            return rdn[len(prefix):]
    return ""


def extract_user_groups(records: Sequence[RawAttributeRecord], group_attribute: str) -> List[str]:
    groups: List[str] = []
    if not records:
        return groups
    # Only the first entry counts, all of its attributes are scanned.
    for values in records[0].values():
        for attribute_value in values:
            group = extract_group_from_value(attribute_value, group_attribute)
            if group:
                groups.append(group)
    return groups


class GroupSearcher:
    def __init__(self, cfg: LDAPConfig, transport_factory: TransportFactory = default_transport) -> None:
        self.cfg = cfg
        self.transport_factory = transport_factory

    def get_groups_for(self, sd: SearchConfiguration, username: str) -> List[str]:
        request = build_search_request(sd, username)
        with open_session(
            self.cfg,
            use_tls=sd.enable_tls,
            insecure_skip_verify=sd.insecure_skip_verify,
            transport_factory=self.transport_factory,
        ) as session:
            records = session.search(request)

        log.debug("Search %r returned %d record(s)", request.search_filter, len(records))
        return extract_user_groups(records, sd.group_attribute)
