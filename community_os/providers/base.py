"""Shared HTTP plumbing for OpenAI-compatible providers.

BaseProvider owns a requests.Session carrying the bearer token and user
agent, and a single _make_request() that turns every failure mode into a
ProviderError subclass.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from community_os.logging import get_logger

from .exceptions import (
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)

logger = get_logger(__name__, component="provider")


class BaseProvider:
    """Base class for providers talking to an OpenAI-compatible REST API.

    Attributes:
        base_url: API root without trailing slash, e.g. "https://api.openai.com/v1"
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        timeout: int = 30,
        user_agent: str = "CommunityOS/1.0",
    ) -> None:
        """
        Raises:
            ProviderConfigurationError: If the API key is missing, the timeout is
                outside 5..300 seconds or user_agent is empty
        """
        if not api_key or not api_key.strip():
            raise ProviderConfigurationError(
                "OPENAI_API_KEY is not set; search and intro generation need it"
            )
        if not 5 <= timeout <= 300:
            raise ProviderConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise ProviderConfigurationError("user_agent cannot be empty")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Authorization": f"Bearer {api_key.strip()}",
                "Content-Type": "application/json",
            }
        )

    def _make_request(
        self,
        path: str,
        method: str = "POST",
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Call an API endpoint and return the decoded JSON body.

        Args:
            path: Endpoint path relative to base_url, e.g. "/embeddings"
            method: HTTP method
            json_data: JSON request body

        Raises:
            ProviderHTTPError: On 4xx/5xx status or a transport failure
            ProviderTimeoutError: On request timeout
            ProviderResponseError: On a body that is not a JSON object
        """
        url = f"{self.base_url}{path}"

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "provider.request.started",
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                json=json_data,
                timeout=self.timeout,
            )

            if response.status_code >= 400:
                is_retryable = response.status_code == 429 or response.status_code >= 500
                logger.log(
                    logging.WARNING if is_retryable else logging.ERROR,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "provider.request.retryable_error"
                        if is_retryable
                        else "provider.request.error",
                        "status_code": response.status_code,
                        "url": url,
                    },
                )
                raise ProviderHTTPError(
                    f"HTTP {response.status_code}: {_error_message(response)}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                data = response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={
                        "event": "provider.request.error",
                        "error_type": "JSONDecodeError",
                        "url": url,
                    },
                )
                raise ProviderResponseError(
                    f"Failed to parse JSON response from {url}: {e}"
                ) from e

            if not isinstance(data, dict):
                raise ProviderResponseError(
                    f"Expected a JSON object from {url}, got {type(data).__name__}"
                )

            logger.debug(
                "HTTP request succeeded",
                extra={
                    "event": "provider.request.succeeded",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            return data

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "provider.request.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise ProviderTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "provider.request.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise ProviderHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

    def _complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Tuple[str, Optional[int]]:
        """Run a chat completion.

        Returns:
            (content, tokens_used); content is stripped and may be empty
        """
        data = self._make_request(
            "/chat/completions",
            json_data={
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )

        try:
            content = data["choices"][0]["message"].get("content") or ""
        except (KeyError, IndexError, TypeError, AttributeError):
            content = ""

        usage = data.get("usage") or {}
        tokens_used = usage.get("total_tokens") or usage.get("completion_tokens")

        return content.strip(), tokens_used

    def close(self) -> None:
        self._session.close()


def _error_message(response: requests.Response) -> str:
    """Prefer the API's own error message over the bare HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or "Unknown error"

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return message
    return response.reason or "Unknown error"
