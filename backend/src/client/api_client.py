"""HTTP client for the Problem Desk API."""

import logging
import os
from typing import Any

import requests

from models.problem import Problem
from services.auth_service import AdminCredential

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:4000/api"
DEFAULT_TIMEOUT_SECONDS = 10


class ApiError(Exception):
    """A request to the API failed.

    `status_code` is None when the server could not be reached.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ProblemApiClient:
    """Thin wrapper over the problem endpoints.

    Failures are reported once; there is no retry policy.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.base_url = (
            base_url or os.environ.get("PROBLEM_DESK_API_URL", DEFAULT_API_URL)
        ).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: On a non-2xx response or a transport failure
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("API request %s %s failed: %s", method, url, e)
            raise ApiError(f"Request failed: {e}")

        if not response.ok:
            try:
                message = response.json().get("error") or f"HTTP {response.status_code}"
            except (ValueError, AttributeError):
                message = f"HTTP {response.status_code}"
            logger.error("API error %s %s: %s", method, url, message)
            raise ApiError(message, status_code=response.status_code)

        return response.json()

    # Public endpoints

    def health(self) -> dict:
        return self.request("GET", "/health")

    def get_problems(
        self,
        search: str | None = None,
        status: str | None = None,
        sort_by: str | None = None,
        limit: int | None = None,
    ) -> list[Problem]:
        """Fetch problems, passing only the filters that are set."""
        params = {}
        if search:
            params["search"] = search
        if status:
            params["status"] = status
        if sort_by:
            params["sortBy"] = sort_by
        if limit:
            params["limit"] = limit
        data = self.request("GET", "/problems", params=params)
        return [Problem(**item) for item in data]

    def submit_problem(
        self, email: str, problem: str, timestamp: str | None = None
    ) -> Problem:
        body = {"email": email, "problem": problem}
        if timestamp:
            body["timestamp"] = timestamp
        return Problem(**self.request("POST", "/problems", json=body))

    # Admin endpoints

    def verify_admin_login(self, password: str) -> AdminCredential:
        """Log in as admin.

        Returns:
            A credential holding the password and the issued session token

        Raises:
            ApiError: If the password is rejected (status 401)
        """
        result = self.request("POST", "/admin/login", json={"password": password})
        return AdminCredential(password=password, token=result.get("token"))

    def update_problem_status(
        self, problem_id: str, status: str, credential: AdminCredential
    ) -> Problem:
        body = {"status": status}
        data = self.request(
            "PATCH",
            f"/problems/{problem_id}",
            json=self._with_credential(body, credential),
            headers=self._auth_headers(credential),
        )
        return Problem(**data)

    def delete_problem(self, problem_id: str, credential: AdminCredential) -> Problem:
        """Delete a problem and return its prior content."""
        data = self.request(
            "DELETE",
            f"/problems/{problem_id}",
            json=self._with_credential({}, credential),
            headers=self._auth_headers(credential),
        )
        return Problem(**data["problem"])

    @staticmethod
    def _with_credential(body: dict, credential: AdminCredential) -> dict:
        # The password rides along with the token so an expired session
        # still authorizes.
        if not credential:
            raise ApiError("Not authenticated", status_code=401)
        if credential.password:
            body["adminPassword"] = credential.password
        return body

    @staticmethod
    def _auth_headers(credential: AdminCredential) -> dict[str, str]:
        if credential.token:
            return {"Authorization": f"Bearer {credential.token}"}
        return {}
