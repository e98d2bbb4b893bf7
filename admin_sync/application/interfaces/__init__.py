from .fallback_store import FallbackStore
from .remote_resource_client import RemoteResourceClient

__all__ = [
    "FallbackStore",
    "RemoteResourceClient",
]
