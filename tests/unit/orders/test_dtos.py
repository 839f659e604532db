"""Unit tests for order DTOs."""

from __future__ import annotations

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

import pytest
from pydantic import ValidationError

from modules.orders.dtos import (
    CreateOrderDTO,
    PriceQuoteRequestDTO,
    ReviewDTO,
    UpdateOrderDTO,
)
from tests.conftest import build_create_dto

pytestmark = pytest.mark.unit


class TestPriceQuoteRequestDTO:
    def test_defaults(self):
        dto = PriceQuoteRequestDTO(education_level="graduate", task_type="thesis")

        assert dto.page_count == 1
        assert dto.complexity_level == "standard"
        assert dto.citation_style == "none"
        assert dto.urgency is None
        assert dto.deadline is None

    @pytest.mark.parametrize("pages", [0, 201])
    def test_page_count_bounds(self, pages):
        with pytest.raises(ValidationError):
            PriceQuoteRequestDTO(education_level="phd", task_type="essay", page_count=pages)

    def test_unknown_education_level_rejected(self):
        with pytest.raises(ValidationError):
            PriceQuoteRequestDTO(education_level="kindergarten", task_type="essay")

    def test_naive_deadline_is_treated_as_utc(self):
        dto = PriceQuoteRequestDTO(
            education_level="phd",
            task_type="essay",
            deadline=datetime(2026, 6, 1, 9, 30),
        )

        assert dto.deadline == datetime(2026, 6, 1, 9, 30, tzinfo=dt_timezone.utc)


class TestCreateOrderDTO:
    def test_valid(self):
        dto = build_create_dto(subject="  Biology  ")

        assert dto.subject == "Biology"
        assert dto.number_of_sources == 0
        assert dto.additional_instructions == ""

    def test_deadline_required(self):
        data = build_create_dto().model_dump(exclude={"deadline"})

        with pytest.raises(ValidationError):
            CreateOrderDTO(**data)

    @pytest.mark.parametrize("field", ["subject", "title", "description"])
    def test_blank_text_rejected(self, field):
        with pytest.raises(ValidationError):
            build_create_dto(**{field: "   "})

    def test_negative_sources_rejected(self):
        with pytest.raises(ValidationError):
            build_create_dto(number_of_sources=-1)

    def test_past_deadline_accepted_by_dto(self):
        dto = build_create_dto(deadline=datetime.now(dt_timezone.utc) - timedelta(days=1))

        assert dto.deadline < datetime.now(dt_timezone.utc)

    def test_is_frozen(self):
        dto = build_create_dto()
        with pytest.raises(ValidationError):
            dto.title = "Changed"


class TestUpdateOrderDTO:
    def test_requested_fields_ignore_unset(self):
        assert UpdateOrderDTO().requested_fields() == set()

    def test_requested_fields(self):
        dto = UpdateOrderDTO(status="cancelled", status_note="bye", progress=0)

        assert dto.requested_fields() == {"status", "status_note", "progress"}

    def test_to_admin_update_drops_owner_fields(self):
        dto = UpdateOrderDTO(admin_notes="note", progress=30, additional_instructions="x")

        admin_dto = dto.to_admin_update()

        assert admin_dto.admin_notes == "note"
        assert admin_dto.progress == 30
        assert not hasattr(admin_dto, "additional_instructions")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            UpdateOrderDTO(status="archived")


class TestReviewDTO:
    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_bounds(self, rating):
        with pytest.raises(ValidationError):
            ReviewDTO(rating=rating)

    def test_review_length_limit(self):
        with pytest.raises(ValidationError):
            ReviewDTO(rating=5, review="x" * 1001)
