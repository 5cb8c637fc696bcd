from functools import lru_cache

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

from .ldap import LDAPConfig, SearchConfiguration


class EnvSettings(BaseSettings):
    # LDAP connection
    ldap_url: str = Field(..., alias="LDAP_URL")
    bind_username: str = Field(..., alias="BIND_USERNAME")
    bind_password: str = Field(..., alias="BIND_PASSWORD", repr=False)
    enable_tls: bool = Field(..., alias="ENABLE_TLS")
    insecure_skip_verify: bool = Field(False, alias="INSECURE_SKIP_VERIFY")
    connect_timeout_s: float = Field(10.0, alias="LDAP_CONNECT_TIMEOUT_SECONDS", gt=0)

    # Group search
    base_dn: str = Field(..., alias="BASE_DN")
    attributes: str = Field(..., alias="ATTRIBUTES")  # ',' separated
    search_filter: str = Field(..., alias="SEARCH_FILTER")  # contains {username}
    group_attribute: str = Field(..., alias="GROUP_ATTRIBUTE")
    search_timeout_s: int = Field(20, alias="SEARCH_TIMEOUT_IN_SECONDS", ge=0)

    # Pack
    pack_help_url: str = Field(
        "https://github.com/ExpediaGroup/flyte-ldap/blob/master/README.md", alias="PACK_HELP_URL"
    )

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("", alias="LOG_DIR")
    log_retention_days: int = Field(30, alias="LOG_RETENTION_DAYS")

    class Config:
        populate_by_name = True
        env_ignore_empty = True

    @field_validator(
        "ldap_url", "bind_username", "bind_password", "base_dn", "attributes", "search_filter", "group_attribute"
    )
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be set")
        return v

    def attribute_list(self) -> tuple[str, ...]:
        return tuple(a.strip() for a in self.attributes.split(",") if a.strip())

    def ldap_config(self) -> LDAPConfig:
        return LDAPConfig(
            url=self.ldap_url,
            bind_username=self.bind_username,
            bind_password=self.bind_password,
            connect_timeout=self.connect_timeout_s,
        )

    def search_configuration(self) -> SearchConfiguration:
        return SearchConfiguration(
            attributes=self.attribute_list(),
            base_dn=self.base_dn,
            search_filter=self.search_filter,
            group_attribute=self.group_attribute,
            search_timeout=self.search_timeout_s,
            enable_tls=self.enable_tls,
            insecure_skip_verify=self.insecure_skip_verify,
        )


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()
