"""Flyte-style pack resolving a user's LDAP group memberships."""

__version__ = "1.0.0"
