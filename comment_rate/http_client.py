"""GitHub REST API client with retry logic and pagination."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
from loguru import logger
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import (
    DEFAULT_HEADERS,
    GITHUB_API_URL,
    MAX_RETRIES,
    PER_PAGE,
    REQUEST_TIMEOUT,
    RETRY_DELAY,
)
from .exceptions import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
)

RETRYABLE_EXCEPTIONS = (requests.Timeout, requests.ConnectionError)


def _rate_limit_reset(response: requests.Response) -> str:
    reset = response.headers.get("X-RateLimit-Reset")
    if not reset or not reset.isdigit():
        return "unknown"
    return datetime.fromtimestamp(int(reset), tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _error_message(response: requests.Response) -> str:
    """Best effort extraction of GitHub's ``message`` field."""
    try:
        payload = response.json()
    except ValueError:
        return response.reason or ""
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason or ""


class GitHubClient:
    """Authenticated GitHub REST client that stops on the first failed request."""

    def __init__(self, token: str, api_url: str = GITHUB_API_URL):
        if not token:
            raise AuthenticationError("A GitHub token is required.")

        self.api_url = api_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.session.headers["Authorization"] = f"token {token}"

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        """Translate HTTP failures into analyzer exceptions."""
        status_code = response.status_code
        if status_code < 400:
            return

        message = _error_message(response)
        if status_code == 401:
            logger.warning(f"Unauthorized (401): {url}")
            raise AuthenticationError(f"GitHub rejected the token (401): {message}")
        if status_code in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            logger.warning(f"Rate limited ({status_code}): {url}")
            raise RateLimitError(
                f"GitHub API rate limit exceeded; resets at {_rate_limit_reset(response)}"
            )
        if status_code == 404:
            logger.warning(f"Resource not found (404): {url}")
            raise NotFoundError(f"Not found or not accessible with this token: {url}")

        logger.warning(f"HTTP error ({status_code}): {url}")
        raise NetworkError(f"API request failed ({status_code}) for {url}: {message}")

    @retry(
        stop=stop_after_attempt(MAX_RETRIES),
        wait=wait_exponential(multiplier=RETRY_DELAY, max=60),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
    )
    def _send(self, url: str, **kwargs) -> requests.Response:
        logger.debug(f"Making GET request to: {url}")
        return self.session.get(url, timeout=REQUEST_TIMEOUT, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make a GET request, retrying transport errors only."""
        try:
            response = self._send(url, **kwargs)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise NetworkError(f"Request to {url} failed after {MAX_RETRIES} attempts: {cause}") from cause
        except requests.RequestException as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        self._raise_for_status(response, url)
        logger.debug(f"Successfully fetched: {url} (status: {response.status_code})")
        return response

    def get_json(self, url: str, **kwargs) -> Any:
        response = self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON in response from {url}") from e

    def get_paginated(self, url: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        """Fetch every page of a list endpoint by following ``Link: rel="next"``."""
        items: List[Any] = []
        page_params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE, **(params or {})}
        next_url: Optional[str] = url
        page = 0

        while next_url:
            page += 1
            response = self.get(next_url, params=page_params)
            try:
                payload = response.json()
            except ValueError as e:
                raise NetworkError(f"Invalid JSON in response from {next_url}") from e
            if not isinstance(payload, list):
                raise NetworkError(f"Expected a list from {next_url}, got {type(payload).__name__}")

            items.extend(payload)
            logger.debug(f"Retrieved {len(payload)} items from page {page} of {url}")

            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            page_params = None

        return items

    def get_authenticated_user(self) -> str:
        """Return the login of the token owner."""
        user = self.get_json(f"{self.api_url}/user")
        login = user.get("login") if isinstance(user, dict) else None
        if not login:
            raise AuthenticationError("Unable to get user login from API response")
        return login

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
