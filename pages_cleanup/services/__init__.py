"""External service clients."""

from pages_cleanup.services.cloudflare import CloudflarePagesClient

__all__ = ["CloudflarePagesClient"]
