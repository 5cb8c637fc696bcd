from .search import (
    GroupSearcher,
    build_search_filter,
    build_search_request,
    extract_group_from_value,
    extract_user_groups,
)

__all__ = [
    "GroupSearcher",
    "build_search_filter",
    "build_search_request",
    "extract_group_from_value",
    "extract_user_groups",
]
