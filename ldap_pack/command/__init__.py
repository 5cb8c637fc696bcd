from .groups import (
    GET_GROUPS_COMMAND_NAME,
    GET_GROUPS_ERROR_EVENT_DEF,
    GET_GROUPS_SUCCESS_EVENT_DEF,
    GetGroupsInput,
    UserGroupsPayload,
    get_groups_command,
    new_get_groups_error_event,
)

__all__ = [
    "GET_GROUPS_COMMAND_NAME",
    "GET_GROUPS_ERROR_EVENT_DEF",
    "GET_GROUPS_SUCCESS_EVENT_DEF",
    "GetGroupsInput",
    "UserGroupsPayload",
    "get_groups_command",
    "new_get_groups_error_event",
]
