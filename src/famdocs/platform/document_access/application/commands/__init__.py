"""Document access commands.

Write operations following maximum separation - one command per file.
"""

from .update_document import UpdateDocumentCommand, UpdateDocumentData
from .replace_document_file import ReplaceDocumentFileCommand, ReplaceDocumentFileData
from .delete_document import DeleteDocumentCommand, DeleteDocumentData
from .share_document import ShareDocumentCommand, ShareDocumentData
from .update_grant import UpdateGrantCommand, UpdateGrantData
from .revoke_grant import RevokeGrantCommand, RevokeGrantData
from .revoke_grants import RevokeGrantsCommand, RevokeGrantsData

__all__ = [
    "UpdateDocumentCommand",
    "UpdateDocumentData",
    "ReplaceDocumentFileCommand",
    "ReplaceDocumentFileData",
    "DeleteDocumentCommand",
    "DeleteDocumentData",
    "ShareDocumentCommand",
    "ShareDocumentData",
    "UpdateGrantCommand",
    "UpdateGrantData",
    "RevokeGrantCommand",
    "RevokeGrantData",
    "RevokeGrantsCommand",
    "RevokeGrantsData",
]
