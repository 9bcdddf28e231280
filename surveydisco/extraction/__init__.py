"""Free-text inquiry extraction."""

from surveydisco.extraction.extractor import (
    ExtractionResult,
    FieldExtractor,
    build_contact,
    merge_fields,
)
from surveydisco.extraction.llm import LLMExtraction, LLMExtractor
from surveydisco.extraction.patterns import extract_with_patterns

__all__ = [
    "ExtractionResult",
    "FieldExtractor",
    "LLMExtraction",
    "LLMExtractor",
    "build_contact",
    "extract_with_patterns",
    "merge_fields",
]
