"""Document access protocols."""

from .transport import Transport, TransportResponse
from .document_store import DocumentStore

__all__ = [
    "Transport",
    "TransportResponse",
    "DocumentStore",
]
