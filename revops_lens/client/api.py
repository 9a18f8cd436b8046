"""
REST API Client

Thin client for the dashboard backend. Every endpoint answers with the
envelope {success, data, error?, message?}; payloads are validated into
typed records here and nowhere else.

Endpoints:
- GET /api/user/me
- GET /api/metadata/scope-defaults
- GET /api/metadata/fields/{objectType}
- GET /api/accounts
- GET /api/opportunities
"""

import logging
from typing import Any, Mapping, Optional

import requests
from pydantic import BaseModel, ValidationError

from ..config.providers import HttpSessionProvider
from ..config.settings import ApiConfig, get_settings
from ..core.entities import Account, CurrentUser, FieldPermission, Opportunity
from ..filters.scope import OwnershipScope, parse_role_defaults
from ..query.sanitizer import validate_object_type

log = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """A request failed or the backend reported failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: str = "",
        error: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.error = error


class ApiResponse(BaseModel):
    """Response envelope."""
    success: bool = False
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None


class ApiClient:
    """
    Client for the dashboard backend.

    Uses one shared session; close it with `close()` or by using the
    client as a context manager.
    """

    def __init__(
        self,
        config: ApiConfig = None,
        session: requests.Session = None
    ):
        self.config = config or get_settings().api
        self._provider = HttpSessionProvider(self.config)
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = self._provider.get_session()
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        self._provider.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def get(self, path: str, params: Optional[Mapping[str, str]] = None) -> Any:
        """GET a path and return the envelope's `data`."""
        url = self.config.base_url.rstrip("/") + path
        log.debug("API Request: GET %s params=%s", path, dict(params or {}))

        try:
            response = self.session.get(
                url,
                params=dict(params or {}),
                timeout=self.config.timeout_seconds
            )
        except requests.RequestException as e:
            log.error("API Request Error: GET %s: %s", path, e)
            raise ApiError(f"GET {path} failed: {e}", url=url) from e

        log.debug("API Response: %s %s", response.status_code, path)
        envelope = self._decode(response, path, url)

        if not response.ok or not envelope.success:
            detail = envelope.error or envelope.message or response.reason
            log.warning("API Response Error: %s %s: %s", response.status_code, path, detail)
            raise ApiError(
                f"GET {path} returned {response.status_code}: {detail}",
                status_code=response.status_code,
                url=url,
                error=envelope.error
            )
        return envelope.data

    def _decode(self, response: requests.Response, path: str, url: str) -> ApiResponse:
        try:
            return ApiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ApiError(
                f"GET {path} returned a malformed body",
                status_code=response.status_code,
                url=url
            ) from e

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def get_current_user(self) -> CurrentUser:
        return CurrentUser.model_validate(self.get("/api/user/me"))

    def get_scope_defaults(self) -> dict[str, OwnershipScope]:
        data = self.get("/api/metadata/scope-defaults")
        if not isinstance(data, Mapping):
            raise ApiError("scope defaults payload is not an object")
        return parse_role_defaults(data)

    def get_field_permissions(self, object_type: str) -> dict[str, FieldPermission]:
        if not validate_object_type(object_type):
            raise ValueError(f"Invalid object type: {object_type!r}")
        data = self.get(f"/api/metadata/fields/{object_type}")
        if not isinstance(data, Mapping):
            raise ApiError(f"field permissions for {object_type} is not an object")
        return {name: FieldPermission.model_validate(perm) for name, perm in data.items()}

    def list_accounts(self, params: Optional[Mapping[str, str]] = None) -> list[Account]:
        return self._records("/api/accounts", params, Account)

    def list_opportunities(
        self,
        params: Optional[Mapping[str, str]] = None,
        include_closed: bool = False
    ) -> list[Opportunity]:
        params = dict(params or {})
        if include_closed:
            params["includeClosed"] = "true"
        return self._records("/api/opportunities", params, Opportunity)

    def _records(self, path: str, params, model) -> list:
        data = self.get(path, params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"GET {path} returned {type(data).__name__}, expected a list")
        try:
            return [model.model_validate(item) for item in data]
        except ValidationError as e:
            raise ApiError(f"GET {path} returned an invalid record: {e}") from e
