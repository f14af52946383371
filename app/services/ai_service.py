import json
import logging
import re
from datetime import datetime
from typing import Dict, Optional, Sequence

import httpx

from app.core.config import settings
from app.schemas.summary import SummaryResult
from app.services.summary_builder import build_summary_prompt, calculate_week_stats

logger = logging.getLogger(__name__)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class AIServiceError(Exception):
    """Base class for every weekly summary generation failure."""


class AIConfigurationError(AIServiceError):
    pass


class AITransportError(AIServiceError):
    pass


class AIUpstreamError(AIServiceError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class AIResponseFormatError(AIServiceError):
    """The generated text is empty or contains no JSON object."""


class AIResponseParseError(AIServiceError):
    """A JSON object was found but could not be decoded."""


class AIService:
    DEFAULT_COMPARISON = "No comparison data yet."
    DEFAULT_SUGGESTIONS = "Keep up the training!"

    def __init__(
            self,
            api_key: Optional[str] = None,
            model: Optional[str] = None,
            base_url: Optional[str] = None,
            timeout: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT_SECONDS
        self._transport = transport

        logger.info(f"Gemini AI service initialized. API key: {'PRESENT' if self.api_key else 'NOT FOUND'}")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _make_gemini_request(self, prompt: str) -> str:
        if not self.api_key:
            raise AIConfigurationError("AI service is not configured: GEMINI_API_KEY is missing")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        logger.debug(f"Sending request to Gemini API ({self.model}), prompt: {prompt[:100]}...")

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    url,
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": self.api_key,
                    },
                    json={"contents": [{"parts": [{"text": prompt}]}]},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise AITransportError("Timed out connecting to Gemini API") from e
        except httpx.HTTPError as e:
            raise AITransportError(f"Error connecting to Gemini API: {e}") from e

        logger.info(f"Gemini API response status: {response.status_code}")

        if response.status_code != 200:
            error_msg = f"Gemini API error: {response.status_code}"
            try:
                error_data = response.json()
                error = error_data.get("error") if isinstance(error_data, dict) else None
                if isinstance(error, dict):
                    error_msg += f" - {error.get('message', '')}"
                elif error:
                    error_msg += f" - {error}"
            except ValueError:
                error_msg += f" - {response.text}"
            raise AIUpstreamError(response.status_code, error_msg)

        try:
            result = response.json()
            parts = result["candidates"][0]["content"]["parts"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AIResponseFormatError("Unexpected response format from Gemini API") from e

        if not isinstance(parts, list) or not all(isinstance(part, dict) for part in parts):
            raise AIResponseFormatError("Unexpected response format from Gemini API")
        return "".join(part.get("text", "") for part in parts)

    @classmethod
    def extract_summary_fields(cls, text: str) -> Dict[str, str]:
        """Pull the two summary texts out of the first-to-last brace span."""
        if not text or not text.strip():
            raise AIResponseFormatError("AI response is empty")

        match = JSON_OBJECT_RE.search(text)
        if not match:
            raise AIResponseFormatError("Failed to extract JSON from AI response")

        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.error(f"JSON parse error: {e}; response text: {text}")
            raise AIResponseParseError("Failed to parse AI response as JSON") from e

        if not isinstance(parsed, dict):
            raise AIResponseParseError("AI response JSON is not an object")

        comparison = parsed.get("comparison_with_last_week")
        suggestions = parsed.get("improvement_suggestions")
        return {
            "comparison_with_last_week": comparison if isinstance(comparison, str) and comparison else cls.DEFAULT_COMPARISON,
            "improvement_suggestions": suggestions if isinstance(suggestions, str) and suggestions else cls.DEFAULT_SUGGESTIONS,
        }

    async def generate_weekly_summary(
            self,
            current_week_entries: Sequence,
            last_week_entries: Optional[Sequence],
            week_start: str,
    ) -> SummaryResult:
        current_stats = calculate_week_stats(current_week_entries)
        last_week_stats = (
            calculate_week_stats(last_week_entries) if last_week_entries is not None else None
        )

        prompt = build_summary_prompt(current_week_entries, current_stats, last_week_stats)
        text = await self._make_gemini_request(prompt)
        fields = self.extract_summary_fields(text)

        return SummaryResult(
            week_start=week_start,
            total_duration=current_stats.total_duration,
            exercise_stats=current_stats.exercise_stats,
            comparison_with_last_week=fields["comparison_with_last_week"],
            improvement_suggestions=fields["improvement_suggestions"],
            generated_at=datetime.utcnow(),
        )


ai_service = AIService()
