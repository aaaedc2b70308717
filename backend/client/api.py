import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from core.errors import NetworkError, error_for_status
from core.models import Task

logger = logging.getLogger(__name__)

DEFAULT_CSRF_HEADER = "X-CSRF-Token"
GENERIC_ERROR_MESSAGE = "Unexpected error"
MAX_ATTEMPTS = 2


class CsrfTokenCache:
    def __init__(self, token=None):
        self._lock = threading.Lock()
        self._token = token

    def get(self):
        with self._lock:
            return self._token

    def store(self, token):
        with self._lock:
            self._token = token
            return token

    def invalidate(self, stale=None):
        with self._lock:
            if stale is None or self._token == stale:
                self._token = None

    def refresh(self, fetch, stale=None):
        # concurrent 403s all pass the token they used; only the first fetches
        with self._lock:
            if self._token is not None and self._token != stale:
                return self._token
            self._token = fetch()
            return self._token


class RequestPipeline:
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        token_cache: Optional[CsrfTokenCache] = None,
        timeout: float = 10.0,
        csrf_header: str = DEFAULT_CSRF_HEADER,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        # the session keeps the cookie the CSRF secret is bound to
        self.session = session or requests.Session()
        self.token_cache = token_cache or CsrfTokenCache()
        self.timeout = timeout
        self.csrf_header = csrf_header

    def _url(self, endpoint):
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _request_token(self) -> str:
        try:
            response = self.session.request("GET", self._url("/csrf-token"), timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError("Could not obtain a CSRF token") from exc
        if not response.ok:
            raise NetworkError("Could not obtain a CSRF token")
        try:
            token = response.json()["csrfToken"]
        except (ValueError, KeyError, TypeError) as exc:
            raise NetworkError("Could not obtain a CSRF token") from exc
        return token

    def fetch_token(self, force: bool = False) -> str:
        if not force:
            cached = self.token_cache.get()
            if cached:
                return cached
        return self.token_cache.store(self._request_token())

    def send(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        requires_csrf_token: bool = False,
    ) -> Any:
        method = method.upper()
        url = self._url(endpoint)
        response = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            headers = {}
            token = None
            if requires_csrf_token:
                token = self.fetch_token()
                headers[self.csrf_header] = token
                headers["Content-Type"] = "application/json"

            try:
                response = self.session.request(
                    method, url, json=body, headers=headers, timeout=self.timeout
                )
            except requests.RequestException as exc:
                logger.warning("%s %s failed: %s", method, endpoint, exc)
                raise NetworkError() from exc

            if response.status_code == 403 and attempt < MAX_ATTEMPTS:
                logger.warning("%s %s rejected with 403, refreshing CSRF token", method, endpoint)
                self.token_cache.invalidate(token)
                self.token_cache.refresh(self._request_token, stale=token)
                continue
            break

        return self._handle(response)

    def _handle(self, response):
        if response.status_code == 204:
            return None
        if not response.ok:
            raise error_for_status(response.status_code, self._error_message(response))
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError("Malformed response from server") from exc

    @staticmethod
    def _error_message(response):
        try:
            body = response.json()
        except ValueError:
            return GENERIC_ERROR_MESSAGE
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return GENERIC_ERROR_MESSAGE


class TaskApi:
    def __init__(self, pipeline):
        self.pipeline = pipeline

    def ensure_csrf(self) -> str:
        return self.pipeline.fetch_token()

    def get_tasks(self) -> List[Task]:
        data = self.pipeline.send("/tasks", "GET")
        return [Task.model_validate(item) for item in data]

    def create_task(self, payload: Dict[str, Any]) -> Task:
        data = self.pipeline.send("/tasks", "POST", payload, requires_csrf_token=True)
        return Task.model_validate(data)

    def update_task(self, task_id: int, payload: Dict[str, Any]) -> Task:
        data = self.pipeline.send(f"/tasks/{task_id}", "PUT", payload, requires_csrf_token=True)
        return Task.model_validate(data)

    def delete_task(self, task_id: int) -> None:
        self.pipeline.send(f"/tasks/{task_id}", "DELETE", requires_csrf_token=True)


def build_api(config) -> TaskApi:
    return TaskApi(RequestPipeline(
        config.API_BASE_URL,
        timeout=config.REQUEST_TIMEOUT,
        csrf_header=config.CSRF_HEADER,
    ))
