"""
HTTP client for the persistence and AI summary endpoints.

Every failure (network error, non-2xx status, unexpected body) is raised
as ``GatewayError`` so callers have a single thing to catch.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from app.schemas.entry import ExerciseEntryRead, ExerciseFormData
from app.schemas.summary import SummaryResult, WeeklySummaryCreate, WeeklySummaryRead
from app.schemas.user_exercise import ExerciseCatalog, UserExerciseRead

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteGateway:
    def __init__(
            self,
            base_url: str = "http://localhost:8000/api/v1",
            access_token: Optional[str] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
            timeout: Optional[float] = None,
    ):
        self.access_token = access_token
        client_options: Dict[str, Any] = {"transport": transport}
        if timeout is not None:
            client_options["timeout"] = timeout
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), **client_options)

    async def __aenter__(self) -> "RemoteGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise GatewayError(f"Network error: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
            logger.error(f"{method} {path} returned {response.status_code}: {detail}")
            raise GatewayError(str(detail), status_code=response.status_code)

        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"Unexpected response body: {e}", status_code=response.status_code) from e

    def _read_token(self, response: httpx.Response) -> str:
        data = self._json(response)
        if not isinstance(data, dict) or not data.get("access_token"):
            raise GatewayError("Unexpected response body: access_token missing", status_code=response.status_code)
        return data["access_token"]

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise GatewayError(f"Unexpected response body: {e}") from e

    def _parse_entries(self, data: Any) -> List[ExerciseEntryRead]:
        if not isinstance(data, list):
            raise GatewayError("Unexpected response body: expected a list of entries")
        return [self._parse(ExerciseEntryRead, item) for item in data]

    # ---------------------------------------------------------------- auth

    async def login(self, email: str, password: str) -> None:
        response = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.access_token = self._read_token(response)

    async def register(self, email: str, password: str) -> None:
        response = await self._request("POST", "/auth/register", json={"email": email, "password": password})
        self.access_token = self._read_token(response)

    # ------------------------------------------------------------- entries

    async def list_entries(self, start: date, end: date) -> List[ExerciseEntryRead]:
        response = await self._request(
            "GET", "/entries", params={"start": start.isoformat(), "end": end.isoformat()}
        )
        return self._parse_entries(self._json(response))

    async def create_entries(self, form: ExerciseFormData) -> List[ExerciseEntryRead]:
        response = await self._request("POST", "/entries", json=form.model_dump(mode="json"))
        return self._parse_entries(self._json(response))

    async def replace_entries(self, entry_id: str, form: ExerciseFormData) -> List[ExerciseEntryRead]:
        response = await self._request("PUT", f"/entries/{entry_id}", json=form.model_dump(mode="json"))
        return self._parse_entries(self._json(response))

    async def get_entry_form(self, entry_id: str) -> ExerciseFormData:
        response = await self._request("GET", f"/entries/{entry_id}/form")
        return self._parse(ExerciseFormData, self._json(response))

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", f"/entries/{entry_id}")

    # ----------------------------------------------------------- summaries

    async def get_weekly_summary(self, week_start: date) -> Optional[WeeklySummaryRead]:
        response = await self._request("GET", f"/summaries/{week_start.isoformat()}")
        data = self._json(response)
        return self._parse(WeeklySummaryRead, data) if data is not None else None

    async def save_weekly_summary(self, summary: WeeklySummaryCreate) -> WeeklySummaryRead:
        response = await self._request("PUT", "/summaries", json=summary.model_dump(mode="json"))
        return self._parse(WeeklySummaryRead, self._json(response))

    async def generate_summary(self, request: Dict[str, Any]) -> SummaryResult:
        response = await self._request("POST", "/generate-summary", json=request)
        return self._parse(SummaryResult, self._json(response))

    # ----------------------------------------------------------- exercises

    async def get_exercises(self) -> ExerciseCatalog:
        response = await self._request("GET", "/exercises")
        return self._parse(ExerciseCatalog, self._json(response))

    async def add_exercise(self, exercise: str) -> UserExerciseRead:
        response = await self._request("POST", "/exercises", json={"exercise": exercise})
        return self._parse(UserExerciseRead, self._json(response))

    async def hide_preset(self, exercise: str) -> UserExerciseRead:
        response = await self._request("POST", "/exercises/hide", json={"exercise": exercise})
        return self._parse(UserExerciseRead, self._json(response))

    async def delete_exercise(self, exercise: str) -> None:
        await self._request("DELETE", f"/exercises/{quote(exercise, safe='')}")
