"""DTOs for customer feedback on requests."""

from dataclasses import dataclass
from datetime import datetime

RATING_MIN = 1
RATING_MAX = 5


@dataclass(frozen=True)
class FeedbackResult:
    id: str
    request_id: str
    rating: int
    comment: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
