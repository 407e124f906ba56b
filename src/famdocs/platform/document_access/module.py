"""Document access module wiring.

Builds one session's worth of collaborators - a ConcurrencyGuard shared by
the gateways, and the commands and queries on top of them.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Optional

from ...config import FamdocsSettings, get_settings
from .application.commands import (
    DeleteDocumentCommand,
    ReplaceDocumentFileCommand,
    RevokeGrantCommand,
    RevokeGrantsCommand,
    ShareDocumentCommand,
    UpdateDocumentCommand,
    UpdateGrantCommand,
)
from .application.queries import GetDocumentAccessQuery, ListGrantsQuery
from .application.services import ConcurrencyGuard, GrantUpsertEngine
from .core.protocols import Transport
from .infrastructure.adapters import HttpxTransport
from .infrastructure.gateways import DirectoryGateway, DocumentGateway

logger = logging.getLogger(__name__)


class DocumentAccessModule:
    """Collaborators for one view or session.

    The guard is per session: tokens recorded by one session's reads are
    never presented by another session's writes.
    """

    def __init__(self, transport: Transport, settings: Optional[FamdocsSettings] = None):
        """Initialize the module.

        Args:
            transport: Async request function to the document service
            settings: Settings; defaults to the cached environment settings
        """
        self._settings = settings or get_settings()
        self.transport = transport
        self.guard = ConcurrencyGuard.from_settings(self._settings)
        self.engine = GrantUpsertEngine.from_settings(self._settings)

        self.documents = DocumentGateway(transport, self.guard)
        self.directory = DirectoryGateway(transport, self.guard)

        self.get_document_access = GetDocumentAccessQuery(self.documents)
        self.list_grants = ListGrantsQuery(self.documents, self._settings)
        self.update_document = UpdateDocumentCommand(self.documents)
        self.replace_document_file = ReplaceDocumentFileCommand(self.documents)
        self.delete_document = DeleteDocumentCommand(self.documents)
        self.share_document = ShareDocumentCommand(self.documents, self.engine)
        self.update_grant = UpdateGrantCommand(self.documents)
        self.revoke_grant = RevokeGrantCommand(self.documents)
        self.revoke_grants = RevokeGrantsCommand(self.documents, self._settings.max_batch_size)

    @classmethod
    def from_settings(cls, settings: Optional[FamdocsSettings] = None) -> 'DocumentAccessModule':
        """Module over an ``HttpxTransport`` built from settings."""
        settings = settings or get_settings()
        logger.debug(f"Document access module for {settings.api_base_url}")
        return cls(HttpxTransport.from_settings(settings), settings)

    @property
    def settings(self) -> FamdocsSettings:
        return self._settings
