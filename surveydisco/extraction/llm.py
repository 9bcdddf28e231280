"""LLM-backed structured extraction (OpenAI chat completions)."""

from __future__ import annotations

import json
import logging
from functools import cached_property
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from surveydisco.config import LLMConfig

logger = logging.getLogger(__name__)


class LLMExtraction(BaseModel):
    """Whatever the model returned, one independently-nullable field at a time.

    Non-string scalars are stringified; lists, objects and blank strings
    become ``None`` so a single bad field never poisons the others.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    client: str | None = None
    email: str | None = None
    phone: str | None = None
    prepared_for: str | None = Field(default=None, alias="preparedFor")
    address: str | None = None
    parcel: str | None = None
    area: str | None = None
    service_type: str | None = Field(default=None, alias="serviceType")
    cost_estimate: str | None = Field(default=None, alias="costEstimate")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str | None:
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value.strip() or None
        return None


class LLMExtractor:
    """Primary extractor. Returns ``None`` on any failure, never raises."""

    def __init__(self, config: LLMConfig, client: AsyncOpenAI | None = None):
        self.config = config
        self._client = client

    @property
    def available(self) -> bool:
        return self._client is not None or self.config.enabled

    @cached_property
    def system_prompt(self) -> str:
        return self.config.prompt_path.read_text(encoding="utf-8")

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.config.api_key)
        return self._client

    async def extract(self, text: str) -> LLMExtraction | None:
        if not self.available:
            logger.info("llm_extraction_skipped: OPENAI_API_KEY not configured")
            return None

        try:
            response = await self._get_client().chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": text},
                ],
                temperature=self.config.temperature,
                response_format={"type": "json_object"},
            )
        except (OpenAIError, OSError) as e:
            logger.error("llm_extraction_failed: %s", e)
            return None

        content = response.choices[0].message.content if response.choices else None
        return self.parse_response(content)

    @staticmethod
    def parse_response(content: str | None) -> LLMExtraction | None:
        if not content:
            logger.warning("llm_extraction_empty_response")
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("llm_extraction_invalid_json: %s", e)
            return None
        if not isinstance(data, dict):
            logger.warning("llm_extraction_not_an_object: %s", type(data).__name__)
            return None
        try:
            return LLMExtraction.model_validate(data)
        except ValidationError as e:
            logger.warning("llm_extraction_invalid_fields: %s", e)
            return None
