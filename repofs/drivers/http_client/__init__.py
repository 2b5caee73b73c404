"""HTTP client driver."""

from repofs.drivers.http_client.http_client import HttpClientDriver

__all__ = ["HttpClientDriver"]
