"""Domain services."""

from .account_link_service import AccountLinkService
from .base import Service
from .directory import Directory
from .reconciliation import decide_link, merge_user_metadata

__all__ = [
    "AccountLinkService",
    "Directory",
    "Service",
    "decide_link",
    "merge_user_metadata",
]
