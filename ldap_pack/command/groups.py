from __future__ import annotations

from typing import List, Optional, Protocol
import logging

from pydantic import BaseModel, ValidationError

from ..ldap import LDAPClientError, SearchConfiguration
from ..pack import Command, CommandHandler, Event, EventDef, new_fatal_event

log = logging.getLogger(__name__)

GET_GROUPS_COMMAND_NAME = "GetGroups"

GET_GROUPS_SUCCESS_EVENT_DEF = EventDef(name="GroupsRetrieved")
GET_GROUPS_ERROR_EVENT_DEF = EventDef(name="GroupsRetrievalError")


class Searcher(Protocol):
    def get_groups_for(self, sd: SearchConfiguration, username: str) -> List[str]: ...


class GetGroupsInput(BaseModel):
    username: Optional[str] = None


class UserGroupsPayload(BaseModel):
    username: Optional[str] = None
    usergroups: Optional[List[str]] = None
    error: Optional[str] = None


def new_get_groups_error_event(error_text: str, username: str) -> Event:
    return Event(
        event_def=GET_GROUPS_ERROR_EVENT_DEF,
        payload=UserGroupsPayload(username=username, error=error_text),
    )


def get_groups_handler(searcher: Searcher, sd: SearchConfiguration) -> CommandHandler:
    def handler(raw: bytes | str) -> Event:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        # A null body carries no fields, same as {}.
        if raw.strip() == "null":
            raw = "{}"
        try:
            args = GetGroupsInput.model_validate_json(raw)
        except ValidationError as e:
            return new_fatal_event(UserGroupsPayload(error=f"Json unmarshalling error: {e}"))

        if not args.username:
            return new_get_groups_error_event("No Username provided.", "")

        try:
            user_groups = searcher.get_groups_for(sd, args.username)
        except LDAPClientError as e:
            log.debug("Got error as %s", e)
            return new_get_groups_error_event(str(e), args.username)
        except Exception as e:
            log.exception("Group lookup for %s failed", args.username)
            return new_get_groups_error_event(str(e) or type(e).__name__, args.username)
        log.debug("Got the user groups as %s", user_groups)

        return Event(
            event_def=GET_GROUPS_SUCCESS_EVENT_DEF,
            payload=UserGroupsPayload(username=args.username, usergroups=user_groups),
        )

    return handler


def get_groups_command(searcher: Searcher, sd: SearchConfiguration) -> Command:
    return Command(
        name=GET_GROUPS_COMMAND_NAME,
        handler=get_groups_handler(searcher, sd),
        output_events=[GET_GROUPS_SUCCESS_EVENT_DEF, GET_GROUPS_ERROR_EVENT_DEF],
    )
