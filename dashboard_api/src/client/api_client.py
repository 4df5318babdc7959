from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """A request answered with a non-success envelope or an HTTP error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DashboardClient:
    """
    HTTP client for the dashboard API.

    Holds the bearer token returned by login() and attaches it to every request.
    A 401 answer means the session is over: the token is dropped and on_logout
    is called so the caller can send the user back to the login form.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        on_logout: Optional[Callable[[], None]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.token = token
        self.on_logout = on_logout
        self._http = httpx.Client(base_url=base_url.rstrip("/") + "/api", transport=transport, timeout=timeout)

    def __enter__(self) -> "DashboardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def logout(self) -> None:
        """Forget the token and notify the caller."""
        self.token = None
        if self.on_logout is not None:
            self.on_logout()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self._http.request(method, path, headers=headers, **kwargs)

        if response.status_code == 401:
            logger.info("Session rejected by the API, logging out")
            self.logout()

        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            raise ApiClientError(response.status_code, response.text or response.reason_phrase)

        if response.is_error or not body.get("success", False):
            raise ApiClientError(response.status_code, body.get("error") or "Request failed")
        return body

    # PUBLIC_INTERFACE
    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Authenticate and keep the token for later calls. Returns the public user."""
        body = self._request("POST", "/auth/login", json={"username": username, "password": password})
        self.token = body["data"]["token"]
        return body["data"]["user"]

    # PUBLIC_INTERFACE
    def get_clients(
        self,
        page: int = 1,
        limit: int = 10,
        sortBy: str = "societe_name",
        sortOrder: str = "asc",
        search: str = "",
        dateFrom: str = "",
        dateTo: str = "",
    ) -> Dict[str, Any]:
        """Return the paginated payload ({data, pagination})."""
        params = {
            "page": page,
            "limit": limit,
            "sortBy": sortBy,
            "sortOrder": sortOrder,
            "search": search,
            "dateFrom": dateFrom,
            "dateTo": dateTo,
        }
        return self._request("GET", "/clients", params=params)["data"]

    # PUBLIC_INTERFACE
    def get_client(self, client_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/clients/{client_id}")["data"]

    # PUBLIC_INTERFACE
    def get_dashboard_stats(self) -> Dict[str, str]:
        return self._request("GET", "/dashboard/stats")["data"]

    # PUBLIC_INTERFACE
    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")
