from .record import LOCAL_ID_PREFIX, AttendanceStatus, Record, RecordStatus, new_local_id
from .resource_type import RESOURCE_TYPES, ResourceType, get_resource_type
from .filter_state import ALL_STATUSES, DEFAULT_PAGE_SIZE, FilterState
from .mutation import IntentKind, MutationIntent, MutationState
from .notification import Notification, NotificationLevel

__all__ = [
    "LOCAL_ID_PREFIX",
    "AttendanceStatus",
    "Record",
    "RecordStatus",
    "new_local_id",
    "RESOURCE_TYPES",
    "ResourceType",
    "get_resource_type",
    "ALL_STATUSES",
    "DEFAULT_PAGE_SIZE",
    "FilterState",
    "IntentKind",
    "MutationIntent",
    "MutationState",
    "Notification",
    "NotificationLevel",
]
