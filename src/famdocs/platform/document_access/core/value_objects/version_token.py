"""Version token value object.

ONLY version token - represents the opaque ETag-like value a resource
snapshot carries, used as the If-Match precondition of the next write.

Following maximum separation architecture - one file = one purpose.
"""

import hmac
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Union

from .....utils import parse_iso_datetime


@dataclass(frozen=True)
class VersionToken:
    """Opaque version token for a resource snapshot.

    Two construction paths:
    - ``from_header``: the value supplied verbatim by the backing store
      (quotes and surrounding whitespace are stripped);
    - ``from_timestamp``: synthesized from the resource's last-modified
      instant as ``YYYYMMDDTHHMMSSZ`` (UTC, second precision).

    Both paths produce the same normalized string for the same instant, so
    a synthesized token compares equal to the store's own token.
    """

    value: str

    TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"
    TIMESTAMP_PATTERN = re.compile(r"^\d{8}T\d{6}Z$")

    def __post_init__(self):
        """Normalize and validate the token."""
        if not isinstance(self.value, str):
            raise ValueError(f"Version token must be a string, got {type(self.value).__name__}")

        normalized = self.normalize(self.value)
        if not normalized:
            raise ValueError("Version token cannot be empty")

        object.__setattr__(self, 'value', normalized)

    @staticmethod
    def normalize(raw: str) -> str:
        """Strip whitespace and one pair of surrounding double quotes.

        Weak validators keep their ``W/"..."`` form so they never compare
        equal to the strong token with the same opaque value.
        """
        text = raw.strip()
        if text[:2].upper() == "W/":
            opaque = VersionToken._strip_quotes(text[2:].strip())
            return f'W/"{opaque}"' if opaque else ""
        return VersionToken._strip_quotes(text)

    @staticmethod
    def _strip_quotes(text: str) -> str:
        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            text = text[1:-1]
        elif text.startswith('"') or text.endswith('"'):
            text = text.strip('"')
        return text.strip()

    @classmethod
    def from_header(cls, raw: Optional[str]) -> Optional['VersionToken']:
        """Build a token from a raw header value; blank or missing gives None."""
        if raw is None:
            return None
        normalized = cls.normalize(str(raw))
        if not normalized:
            return None
        return cls(normalized)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], name: str = "ETag") -> Optional['VersionToken']:
        """Find ``name`` in ``headers`` case-insensitively and build a token."""
        if not headers:
            return None
        wanted = name.lower()
        for key, raw in headers.items():
            if key.lower() == wanted:
                return cls.from_header(raw)
        return None

    @classmethod
    def from_timestamp(cls, instant: Union[datetime, str]) -> 'VersionToken':
        """Synthesize a token from a last-modified instant.

        Raises:
            ValueError: If the instant cannot be parsed
        """
        moment = parse_iso_datetime(instant)
        return cls(moment.strftime(cls.TIMESTAMP_FORMAT))

    @classmethod
    def coerce(cls, value: Union['VersionToken', str, None]) -> Optional['VersionToken']:
        """Accept a token, a raw string, or None."""
        if value is None or isinstance(value, VersionToken):
            return value
        return cls.from_header(value)

    @property
    def is_timestamp_format(self) -> bool:
        """Whether the token uses the timestamp-derived format."""
        return bool(self.TIMESTAMP_PATTERN.match(self.value))

    @property
    def is_weak(self) -> bool:
        return self.value.startswith('W/"')

    def matches(self, other: Union['VersionToken', str, None]) -> bool:
        """Compare against another token or raw header value."""
        candidate = self.coerce(other)
        if candidate is None:
            return False
        return hmac.compare_digest(self.value, candidate.value)

    def to_if_match(self) -> str:
        """Header value for an If-Match precondition (quoted)."""
        if self.is_weak:
            return self.value
        return f'"{self.value}"'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"VersionToken('{self.value}')"
