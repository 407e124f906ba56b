"""Grant page value object.

ONLY one page of a normalized grant listing.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities.grant import Grant


@dataclass(frozen=True)
class GrantPage:
    """A page of active grants, one per user."""

    items: List['Grant'] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20
    total_pages: int = 0
    next_page: Optional[str] = None
    prev_page: Optional[str] = None

    @property
    def has_next(self) -> bool:
        return self.next_page is not None or self.page < self.total_pages

    def user_ids(self) -> List[str]:
        return [grant.user_id for grant in self.items]
