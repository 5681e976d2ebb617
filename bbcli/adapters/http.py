"""Authenticated HTTP access to the Bitbucket Cloud REST API.

HttpClient owns one requests.Session for the process. Every request is
bounded by a timeout, every non-2xx status becomes an ApiError subclass,
and list endpoints are walked through their ``next`` cursor.
"""

import json as jsonlib
import logging
from http import HTTPStatus
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from bbcli import __version__
from bbcli.credentials import Credential
from bbcli.errors import (
    ApiError,
    BadRequestError,
    ConflictError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
)
from bbcli.models import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

DEFAULT_BASE_URL = "https://api.bitbucket.org/2.0"
DEFAULT_TIMEOUT = 30
# Create and merge may run server-side hooks
LONG_TIMEOUT = 60
DEFAULT_LIMIT = 30
# Largest pagelen the list endpoints accept
MAX_PAGELEN = 50
USER_AGENT = f"bb-cli/{__version__}"


class Response(BaseModel):
    """Fully read HTTP response. Header names are lower-cased."""

    status_code: int
    headers: dict[str, str] = {}
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return jsonlib.loads(self.body)


def _status_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "unexpected status"


def _error_details(resp: Response) -> tuple[str, str]:
    """Message and detail from ``{"error": {"message", "detail"}}``."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip(), ""
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or ""), str(err.get("detail") or "")
        if isinstance(data.get("message"), str):
            return data["message"], ""
    return "", ""


def _retry_after(resp: Response) -> int | None:
    value = resp.headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def classify_error(resp: Response) -> ApiError:
    """Map a non-2xx response to its ApiError subclass."""
    status = resp.status_code
    message, detail = _error_details(resp)
    message = message or _status_phrase(status)
    text = f"API error {status}: {message}"
    if detail:
        text = f"{text} - {detail}"

    if status == 400:
        return BadRequestError(text, status_code=status, detail=detail)
    if status in (401, 403):
        return UnauthorizedError(text, status_code=status, detail=detail)
    if status == 404:
        return NotFoundError(text, status_code=status, detail=detail)
    if status == 409:
        return ConflictError(text, status_code=status, detail=detail)
    if status == 429:
        retry_after = _retry_after(resp)
        hint = f"Retry after {retry_after} seconds" if retry_after is not None else None
        return RateLimitedError(text, retry_after=retry_after, status_code=status, detail=detail, hint=hint)
    if status >= 500:
        return ServerError(text, status_code=status, detail=detail)
    return ApiError(text, status_code=status, detail=detail)


class HttpClient:
    """Session-backed client for the REST surface."""

    def __init__(
        self,
        credential: Credential,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Accept"] = "application/json"
        self._session.headers["User-Agent"] = USER_AGENT
        if credential.username:
            self._session.auth = (credential.username, credential.token)
        else:
            self._session.headers["Authorization"] = f"Bearer {credential.token}"

    @property
    def long_timeout(self) -> int:
        return max(self._timeout, LONG_TIMEOUT)

    def _url(self, path: str) -> str:
        if path.startswith(("https://", "http://")):
            return path
        return f"{self._base_url}{path}" if path.startswith("/") else f"{self._base_url}/{path}"

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> Response:
        """Send one request and return the fully read response.

        Raises:
            NetworkError: connection failure or timeout.
            ApiError: any non-2xx status (see classify_error).
        """
        url = self._url(path)
        logger.debug("%s %s params=%s", method, url, params)
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json if json else None,
                headers=headers,
                timeout=timeout or self._timeout,
            )
        except requests.Timeout as e:
            raise NetworkError(f"request timed out: {method} {url}") from e
        except requests.RequestException as e:
            raise NetworkError(f"request failed: {e}") from e

        response = Response(
            status_code=resp.status_code,
            headers={str(k).lower(): str(v) for k, v in (resp.headers or {}).items()},
            body=resp.content or b"",
        )
        if response.status_code >= 400:
            error = classify_error(response)
            logger.debug("%s %s failed: %s", method, url, error)
            raise error
        return response

    def get(self, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Response:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: dict[str, Any] | None = None, **kwargs: Any) -> Response:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: dict[str, Any] | None = None, **kwargs: Any) -> Response:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Response:
        return self.request("DELETE", path, **kwargs)

    @staticmethod
    def parse(response: Response, model: type[M]) -> M:
        """Decode the response body into model; MalformedResponseError on mismatch."""
        try:
            return model.model_validate_json(response.body)
        except ValidationError as e:
            raise MalformedResponseError(f"unexpected response from server: {e}", status_code=response.status_code) from e

    def paginate(
        self,
        path: str,
        model: type[T],
        params: dict[str, Any] | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[T]:
        """Collect up to limit items, following ``next`` links in order.

        Stops as soon as limit items are collected; later pages are never
        requested.
        """
        if limit <= 0:
            return []
        query: dict[str, Any] | None = dict(params or {})
        query.setdefault("pagelen", min(limit, MAX_PAGELEN))
        page_model = Page[model]  # type: ignore[valid-type]
        items: list[T] = []
        url: str | None = path
        while url:
            page = self.parse(self.get(url, params=query), page_model)
            for value in page.values:
                items.append(value)
                if len(items) >= limit:
                    return items
            # The next link carries its own query string
            url, query = page.next, None
        return items
