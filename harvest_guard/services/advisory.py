"""Optional generative advisory backed by the Gemini API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Protocol

import httpx

from harvest_guard.core.config import settings
from harvest_guard.core.exceptions import AdvisoryServiceFailure
from harvest_guard.models import CropBatch, Recommendation

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")

PROMPT_TEMPLATE = """You are an expert agricultural storage and crop risk assessment specialist. \
Give practical storage advice for the following crop batch.

Batch Information:
- Crop Type: {crop_type}
- Weight: {weight} kg
- Storage Type: {storage_type}
- Storage Location: {storage_location}
- Days in Storage: {days} days
- Moisture Level: {moisture}%
- Temperature: {temperature}°C

Respond in JSON format ONLY (no markdown, no extra text):
{{
  "recommendation": "Detailed English recommendation for the farmer",
  "recommendationBn": "বিস্তারিত বাংলা সুপারিশ"
}}
"""


class AdvisoryStrategy(Protocol):
    """Produces recommendation text from batch conditions."""

    async def advise(
        self,
        batch: CropBatch,
        moisture: float,
        temperature: float,
        days_in_storage: int,
    ) -> Recommendation:
        ...


class GeminiAdvisoryService:
    """Ask Gemini for free-text advice; raise AdvisoryServiceFailure on any problem."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_api_url).rstrip("/")
        self.timeout = timeout or settings.gemini_timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def advise(
        self,
        batch: CropBatch,
        moisture: float,
        temperature: float,
        days_in_storage: int,
    ) -> Recommendation:
        if not self.enabled:
            raise AdvisoryServiceFailure("Gemini API key not configured")

        prompt = PROMPT_TEMPLATE.format(
            crop_type=batch.crop_type,
            weight=batch.estimated_weight,
            storage_type=batch.storage_type or "unspecified",
            storage_location=batch.storage_location or settings.default_location,
            days=days_in_storage,
            moisture=round(moisture),
            temperature=round(temperature),
        )
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.3,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": 1024,
            },
        }
        url = f"{self.base_url}/{self.model}:generateContent"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, json=body, headers={"x-goog-api-key": self.api_key})
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as exc:
                logger.warning("Gemini advisory request failed: %s", exc)
                raise AdvisoryServiceFailure(f"Gemini request failed: {exc}") from exc
            except ValueError as exc:
                raise AdvisoryServiceFailure("Gemini returned a non-JSON body") from exc

        return self._parse(payload)

    def _parse(self, payload: dict[str, Any]) -> Recommendation:
        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AdvisoryServiceFailure("No response text from Gemini") from exc

        cleaned = _CODE_FENCE.sub("", str(text)).strip()
        try:
            advice = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            logger.debug("Unparseable Gemini output: %s", cleaned[:500])
            raise AdvisoryServiceFailure("Failed to parse Gemini response") from exc

        if not isinstance(advice, dict):
            raise AdvisoryServiceFailure("Gemini response is not a JSON object")
        english = advice.get("recommendation")
        bengali = advice.get("recommendationBn")
        if not isinstance(english, str) or not english.strip():
            raise AdvisoryServiceFailure("Gemini response has no recommendation")
        if not isinstance(bengali, str) or not bengali.strip():
            raise AdvisoryServiceFailure("Gemini response has no Bengali recommendation")

        return Recommendation(text=english.strip(), text_localized=bengali.strip(), source="advisory")


__all__ = ["AdvisoryStrategy", "GeminiAdvisoryService", "PROMPT_TEMPLATE"]
