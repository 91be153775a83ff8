"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O of its own; collaborators are injected.
* No imports from ``cli`` or ``infra``.
"""

from tubeport.core.models import (
    Backend,
    ChannelInfo,
    ChannelRef,
    HistoryEntry,
    Profile,
    Subscription,
    SubscriptionFormat,
)
from tubeport.core.resolver import ChannelResolver
from tubeport.core.sanitizer import HISTORY_KEYS, PROFILE_KEYS, SanitizeResult, sanitize
from tubeport.core.transfer_service import TransferReport, TransferService, TransferStatus

__all__: list[str] = [
    "Backend",
    "ChannelInfo",
    "ChannelRef",
    "ChannelResolver",
    "HISTORY_KEYS",
    "HistoryEntry",
    "PROFILE_KEYS",
    "Profile",
    "SanitizeResult",
    "Subscription",
    "SubscriptionFormat",
    "TransferReport",
    "TransferService",
    "TransferStatus",
    "sanitize",
]
