from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

USERNAME_PLACEHOLDER = "{username}"

# attribute name -> values, in the order the server returned them
RawAttributeRecord = Dict[str, List[str]]


@dataclass(frozen=True)
class LDAPConfig:
    url: str
    bind_username: str
    bind_password: str = field(repr=False)
    connect_timeout: float = 10.0


@dataclass(frozen=True)
class SearchConfiguration:
    attributes: Tuple[str, ...]  # e.g. ("memberOf",)
    base_dn: str
    search_filter: str  # template, contains USERNAME_PLACEHOLDER
    group_attribute: str  # RDN key holding the group name, e.g. "cn"
    search_timeout: int = 20
    enable_tls: bool = False
    insecure_skip_verify: bool = False


@dataclass(frozen=True)
class SearchRequest:
    attributes: Tuple[str, ...]
    base_dn: str
    search_filter: str
    search_timeout: int
