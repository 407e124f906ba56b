"""Document service gateways."""

from .error_mapping import parse_error_body, raise_for_response, validation_failed_from_pydantic
from .document_gateway import DocumentGateway
from .directory_gateway import DirectoryGateway

__all__ = [
    "parse_error_body",
    "raise_for_response",
    "validation_failed_from_pydantic",
    "DocumentGateway",
    "DirectoryGateway",
]
