"""Field extraction: LLM first, pattern rules fill whatever is still empty."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from surveydisco.extraction.llm import LLMExtraction, LLMExtractor
from surveydisco.extraction.patterns import extract_with_patterns
from surveydisco.models import EXTRACTED_FIELD_NAMES, ExtractedFields, ProjectStatus

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    fields: ExtractedFields
    used_primary_extractor: bool

    @property
    def status(self) -> ProjectStatus:
        return ProjectStatus.NEW if self.used_primary_extractor else ProjectStatus.REGEX

    @property
    def contact(self) -> str:
        return build_contact(self.fields.phone, self.fields.email)


def build_contact(phone: str, email: str) -> str:
    """Phone then email, comma-separated, skipping whichever is empty."""
    return ", ".join(part for part in (phone, email) if part)


def merge_fields(primary: LLMExtraction | None, fallback: ExtractedFields) -> ExtractedFields:
    """Field-by-field merge; a non-empty primary value always wins."""
    merged = {}
    for name in EXTRACTED_FIELD_NAMES:
        primary_value = getattr(primary, name, None) if primary is not None else None
        merged[name] = primary_value or getattr(fallback, name)
    return ExtractedFields(**merged)


class FieldExtractor:
    def __init__(self, llm: LLMExtractor):
        self.llm = llm

    async def extract(self, text: str) -> ExtractionResult:
        primary = await self.llm.extract(text)
        fallback = extract_with_patterns(text)
        fields = merge_fields(primary, fallback)

        logger.info(
            "fields_extracted: primary=%s filled=%s",
            primary is not None,
            sorted(name for name in EXTRACTED_FIELD_NAMES if getattr(fields, name)),
        )
        return ExtractionResult(fields=fields, used_primary_extractor=primary is not None)
