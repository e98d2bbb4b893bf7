"""HTTP infrastructure package."""

from .http_resource_client import HttpResourceClient

__all__ = ["HttpResourceClient"]
