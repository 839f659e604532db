"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``PriceQuoteRequestDTO``: attributes needed to price a draft order.
- ``CreateOrderDTO``: input for order creation.
- ``UpdateOrderDTO``: generic update, dispatched by actor capability.
- ``AdminUpdateDTO``: administrator-only fields.
- ``ReviewDTO``: post-completion rating and review.
"""

from __future__ import annotations

from datetime import datetime
from datetime import timezone as dt_timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import (
    ADMIN_NOTES_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    INSTRUCTIONS_MAX_LENGTH,
    PAGE_COUNT_MAX,
    PAGE_COUNT_MIN,
    RATING_MAX,
    RATING_MIN,
    REVIEW_MAX_LENGTH,
    STATUS_NOTE_MAX_LENGTH,
    SUBJECT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    CitationStyle,
    ComplexityLevel,
    EducationLevel,
    OrderStatus,
    TaskType,
    Urgency,
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class PriceQuoteRequestDTO(BaseModel):
    """Immutable DTO for price previews.

    ``urgency`` is only honoured when no ``deadline`` is supplied.
    """

    model_config = ConfigDict(frozen=True)

    education_level: EducationLevel
    task_type: TaskType
    page_count: int = Field(default=1, ge=PAGE_COUNT_MIN, le=PAGE_COUNT_MAX)
    complexity_level: ComplexityLevel = ComplexityLevel.STANDARD
    citation_style: CitationStyle = CitationStyle.NONE
    urgency: Optional[Urgency] = None
    deadline: Optional[datetime] = None

    @field_validator("deadline")
    @classmethod
    def deadline_is_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _aware(v)


class CreateOrderDTO(PriceQuoteRequestDTO):
    """Immutable DTO for order creation requests.

    ``deadline`` is required here; whether it lies in the future is checked
    by the service against its own clock.
    """

    subject: str = Field(min_length=1, max_length=SUBJECT_MAX_LENGTH)
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    additional_instructions: str = Field(default="", max_length=INSTRUCTIONS_MAX_LENGTH)
    number_of_sources: int = Field(default=0, ge=0)
    deadline: datetime

    @field_validator("subject", "title", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank.")
        return v


class AdminUpdateDTO(BaseModel):
    """Immutable DTO for administrator updates.

    ``progress`` is not range-checked: the order clamps it to ``[0, 100]``.
    """

    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None
    status_note: str = Field(default="", max_length=STATUS_NOTE_MAX_LENGTH)
    admin_notes: Optional[str] = Field(default=None, max_length=ADMIN_NOTES_MAX_LENGTH)
    progress: Optional[int] = None


class UpdateOrderDTO(AdminUpdateDTO):
    """Immutable DTO for the generic order update.

    All fields are optional. Only supplied fields are considered, and
    each must fall within the caller's capability.
    """

    additional_instructions: Optional[str] = Field(
        default=None, max_length=INSTRUCTIONS_MAX_LENGTH
    )

    def requested_fields(self) -> set[str]:
        """Names of the fields the caller actually asked to change."""
        requested = {
            name
            for name in ("status", "admin_notes", "progress", "additional_instructions")
            if getattr(self, name) is not None
        }
        if self.status_note:
            requested.add("status_note")
        return requested

    def to_admin_update(self) -> AdminUpdateDTO:
        return AdminUpdateDTO(
            status=self.status,
            status_note=self.status_note,
            admin_notes=self.admin_notes,
            progress=self.progress,
        )


class ReviewDTO(BaseModel):
    """Immutable DTO for post-completion feedback."""

    model_config = ConfigDict(frozen=True)

    rating: int = Field(ge=RATING_MIN, le=RATING_MAX)
    review: str = Field(default="", max_length=REVIEW_MAX_LENGTH)
