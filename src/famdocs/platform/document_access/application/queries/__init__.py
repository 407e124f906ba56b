"""Document access queries.

Read operations following maximum separation - one query per file.
"""

from .get_document_access import DocumentAccess, GetDocumentAccessData, GetDocumentAccessQuery
from .list_grants import ListGrantsData, ListGrantsQuery

__all__ = [
    "DocumentAccess",
    "GetDocumentAccessData",
    "GetDocumentAccessQuery",
    "ListGrantsData",
    "ListGrantsQuery",
]
