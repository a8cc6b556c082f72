"""HTTP client for the StudyHub backend."""

import os
from dataclasses import dataclass
from typing import List, Optional
import requests
from dotenv import load_dotenv

from studyhub.models.stats import WeeklyStats
from studyhub.models.task import Task
from studyhub.models.user import PublicUser, UserData

load_dotenv()

API_BASE_URL = os.getenv("STUDYHUB_API_BASE", "http://localhost:8787")
REQUEST_TIMEOUT_SEC = 10


class ApiError(Exception):
    """Non-2xx response from the backend."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass
class AuthResult:
    token: str
    user: PublicUser
    data: UserData


class StudyHubClient:
    """Thin client over the StudyHub REST API."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.token = token
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, payload: Optional[dict] = None, default_error: str = "Request failed") -> dict:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: If the backend answers with a non-2xx status
            requests.RequestException: On network failure
        """
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=payload,
            headers=self._headers(),
            timeout=REQUEST_TIMEOUT_SEC,
        )
        if not response.ok:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = None
            raise ApiError(response.status_code, detail if isinstance(detail, str) else default_error)
        return response.json() if response.content else {}

    def register(self, name: str, email: str, password: str) -> AuthResult:
        body = self._request("POST", "/api/auth/register", {"name": name, "email": email, "password": password})
        return self._auth_result(body)

    def login(self, email: str, password: str) -> AuthResult:
        body = self._request("POST", "/api/auth/login", {"email": email, "password": password})
        return self._auth_result(body)

    def me(self) -> PublicUser:
        body = self._request("GET", "/api/auth/me")
        return PublicUser.model_validate(body["user"])

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")

    def fetch_user_data(self) -> UserData:
        body = self._request("GET", "/api/user/data", default_error="Failed to fetch data")
        return UserData.model_validate(body.get("data") or {})

    def save_user_data(
        self,
        tasks: List[Task],
        stats: WeeklyStats,
        profile_image: Optional[str] = None,
        reminder_enabled: Optional[bool] = None,
        reminder_tone: Optional[str] = None,
    ) -> None:
        payload = UserData(
            tasks=tasks,
            stats=stats,
            profile_image=profile_image,
            reminder_enabled=bool(reminder_enabled),
            reminder_tone=reminder_tone,
        ).model_dump(mode="json", by_alias=True)
        if reminder_enabled is None:
            payload.pop("reminderEnabled")
        self._request("PUT", "/api/user/data", payload, default_error="Failed to save data")

    def _auth_result(self, body: dict) -> AuthResult:
        self.token = body["token"]
        return AuthResult(
            token=body["token"],
            user=PublicUser.model_validate(body["user"]),
            data=UserData.model_validate(body.get("data") or {}),
        )
