from .notification_center import NotificationCenter
from .collection_cache import CollectionView, DataSource, SynchronizedCollectionCache
from .mutation_coordinator import OptimisticMutationCoordinator, PendingMutation
from .refresh_scheduler import RefreshScheduler
from .projection import ProjectionResult, attendance_counts, project, status_counts
from .csv_export import CsvExport

__all__ = [
    "NotificationCenter",
    "CollectionView",
    "DataSource",
    "SynchronizedCollectionCache",
    "OptimisticMutationCoordinator",
    "PendingMutation",
    "RefreshScheduler",
    "ProjectionResult",
    "attendance_counts",
    "project",
    "status_counts",
    "CsvExport",
]
