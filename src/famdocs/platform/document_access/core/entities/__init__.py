"""Document access entities."""

from .document_record import DocumentRecord
from .grant import Grant
from .grant_store import GrantStore

__all__ = [
    "DocumentRecord",
    "Grant",
    "GrantStore",
]
