"""Customer feedback API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portal.application.dtos.feedback import RATING_MAX, RATING_MIN


class FeedbackBody(BaseModel):
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    comment: str | None = Field(default=None, max_length=2000)


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    rating: int
    comment: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
