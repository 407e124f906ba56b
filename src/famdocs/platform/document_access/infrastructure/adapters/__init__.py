"""Transport adapters."""

from .httpx_transport import HttpxTransport
from .memory_backend import InMemoryDocumentBackend, RecordedRequest

__all__ = [
    "HttpxTransport",
    "InMemoryDocumentBackend",
    "RecordedRequest",
]
