"""HTTP client for the programs API used by the admin dashboard.

The bearer credential travels with each call inside a ``RequestContext``; the
client keeps no session state of its own. A 401 response triggers the
caller's ``on_unauthorized`` hook before the error is raised.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx
from app.config import settings

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Unable to connect to server. Please check your connection."


class ApiError(Exception):
    def __init__(self, status_code: Optional[int], message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def messages(self) -> List[str]:
        """Every field message returned by the server, or the top-level message."""
        field_messages = [str(e.get("message")) for e in self.errors if e.get("message")]
        return field_messages or [self.message]


class ApiConnectionError(ApiError):
    def __init__(self, detail: str = ""):
        super().__init__(None, CONNECTION_ERROR_MESSAGE)
        self.detail = detail


@dataclass
class RequestContext:
    token: Optional[str] = None
    on_unauthorized: Optional[Callable[[], None]] = None


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[httpx.Client] = None,
    ):
        self._http = http or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=float(timeout or settings.API_TIMEOUT_SECONDS),
            headers={"Content-Type": "application/json"},
        )

    def close(self):
        self._http.close()

    def request(
        self,
        context: RequestContext,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {}
        if context.token:
            headers["Authorization"] = f"Bearer {context.token}"
        try:
            response = self._http.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("API timeout: %s %s", method, path)
            raise ApiConnectionError(str(exc)) from exc
        except httpx.TransportError as exc:
            logger.warning("API transport error: %s %s: %s", method, path, exc)
            raise ApiConnectionError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.status_code == 401 and context.on_unauthorized is not None:
            context.on_unauthorized()
        if response.is_error:
            logger.warning("API error: %s %s -> %s %s", method, path, response.status_code, body.get("message"))
            raise ApiError(
                response.status_code,
                str(body.get("message") or response.reason_phrase),
                body.get("errors"),
            )
        return body

    def list_public_programs(self, context: RequestContext) -> Dict[str, Any]:
        return self.request(context, "GET", "/api/programs")

    def list_admin_programs(
        self,
        context: RequestContext,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        status: str = "all",
    ) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, "search": search, "status": status}
        return self.request(context, "GET", "/api/programs/admin", params=params)

    def get_program(self, context: RequestContext, program_id: str) -> Dict[str, Any]:
        return self.request(context, "GET", f"/api/programs/{program_id}")

    def create_program(self, context: RequestContext, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request(context, "POST", "/api/programs", json=payload)

    def update_program(self, context: RequestContext, program_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request(context, "PUT", f"/api/programs/{program_id}", json=payload)

    def toggle_program_status(self, context: RequestContext, program_id: str) -> Dict[str, Any]:
        return self.request(context, "PATCH", f"/api/programs/{program_id}/toggle-status")

    def delete_program(self, context: RequestContext, program_id: str) -> Dict[str, Any]:
        return self.request(context, "DELETE", f"/api/programs/{program_id}")

    def reorder_programs(self, context: RequestContext, program_ids: List[str]) -> Dict[str, Any]:
        return self.request(context, "PATCH", "/api/programs/reorder", json={"programIds": program_ids})
