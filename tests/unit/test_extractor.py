"""Tests for surveydisco.extraction.extractor - LLM/pattern merge."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from surveydisco.extraction import FieldExtractor, LLMExtraction, build_contact, merge_fields
from surveydisco.extraction.patterns import extract_with_patterns
from surveydisco.models import ExtractedFields, ProjectStatus


class TestBuildContact:
    @pytest.mark.parametrize(
        "phone,email,expected",
        [
            ("404-555-1212", "a@b.com", "404-555-1212, a@b.com"),
            ("404-555-1212", "", "404-555-1212"),
            ("", "a@b.com", "a@b.com"),
            ("", "", ""),
        ],
    )
    def test_combinations(self, phone, email, expected):
        assert build_contact(phone, email) == expected


class TestMergeFields:
    def test_primary_value_always_wins(self):
        primary = LLMExtraction(client="Jane Doe", phone="770-111-2222")
        fallback = ExtractedFields(client="John Smith", phone="404-555-1212", email="j@x.com")

        merged = merge_fields(primary, fallback)

        assert merged.client == "Jane Doe"
        assert merged.phone == "770-111-2222"
        # fallback only fills the gaps
        assert merged.email == "j@x.com"

    def test_no_primary_uses_fallback(self):
        fallback = ExtractedFields(client="John Smith", area="5 acres")

        merged = merge_fields(None, fallback)

        assert merged == fallback

    def test_blank_primary_value_does_not_block_fallback(self):
        primary = LLMExtraction.model_validate({"client": "   ", "serviceType": "Survey"})
        fallback = ExtractedFields(client="John Smith", service_type="Boundary Survey")

        merged = merge_fields(primary, fallback)

        assert merged.client == "John Smith"
        assert merged.service_type == "Survey"


class TestFieldExtractor:
    @pytest.mark.asyncio
    async def test_llm_unavailable_marks_regex(self):
        llm = MagicMock()
        llm.extract = AsyncMock(return_value=None)
        text = "Call Bob Jones at 404-555-1212 about 12 Pine Road"

        result = await FieldExtractor(llm).extract(text)

        assert result.used_primary_extractor is False
        assert result.status == ProjectStatus.REGEX
        assert result.fields == extract_with_patterns(text)
        assert result.contact == "404-555-1212"

    @pytest.mark.asyncio
    async def test_llm_contribution_marks_new(self):
        llm = MagicMock()
        llm.extract = AsyncMock(
            return_value=LLMExtraction(client="Robert Jones", email="bob@jones.com")
        )

        result = await FieldExtractor(llm).extract("Call Bob Jones at 404-555-1212")

        assert result.used_primary_extractor is True
        assert result.status == ProjectStatus.NEW
        assert result.fields.client == "Robert Jones"
        assert result.fields.phone == "404-555-1212"
        assert result.contact == "404-555-1212, bob@jones.com"
