"""
HTTP execution service for sending proxied HTTP requests.

This service performs exactly one outbound request using httpx and
normalizes the outcome. Any HTTP response, whatever its status code, is a
successful execution; only failures below the HTTP layer raise.
"""

import json
import time
from typing import Any

import httpx

from ..exceptions import TimeoutError, TransportError, ValidationError
from ..schemas.execute import ExecutionResult
from ..utils.logging import get_logger
from .validation import normalize_method, require_url

logger = get_logger(__name__)


# Default timeout in milliseconds
DEFAULT_TIMEOUT_MS = 10_000


def parse_json_body(body: str | None, content_type: str | None) -> Any | None:
    """
    Try to parse response body as JSON if content type indicates JSON.

    Args:
        body: Response body string
        content_type: Content-Type header value

    Returns:
        Parsed JSON object or None if not JSON or parsing fails
    """
    if not body or not content_type:
        return None

    if "json" in content_type.lower():
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return None

    return None


def elapsed_since(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


class RequestExecutor:
    """
    Executes one outbound HTTP request per call.

    Requests are never retried. ``transport`` may be any httpx async
    transport and is mainly used to point the executor at a fake server.
    """

    def __init__(
        self,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.default_timeout_ms = default_timeout_ms
        self.transport = transport

    async def execute(
        self,
        method: Any,
        url: Any,
        headers: dict[str, str] | None = None,
        body: Any = None,
        timeout_ms: int | None = None
    ) -> ExecutionResult:
        """
        Execute an HTTP request and return the normalized response.

        Args:
            method: HTTP method, case-insensitive
            url: Target URL
            headers: Request headers
            body: Request body; strings and bytes are sent as-is, other
                values are sent as JSON
            timeout_ms: Request timeout in milliseconds

        Returns:
            ExecutionResult for any HTTP response, including 4xx and 5xx

        Raises:
            ValidationError: If method or url is missing or invalid
            TimeoutError: If the request exceeded the timeout
            TransportError: If the request failed without a response
        """
        method = normalize_method(method)
        url = require_url(url)
        timeout_ms = timeout_ms or self.default_timeout_ms

        # Prepare body
        content: str | bytes | None = None
        json_body: Any = None
        if isinstance(body, (str, bytes)):
            content = body
        elif body is not None:
            json_body = body

        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=timeout_ms / 1000,
                transport=self.transport
            ) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers or {},
                    content=content,
                    json=json_body
                )
        except httpx.TimeoutException as e:
            elapsed_ms = elapsed_since(start_time)
            logger.warning(
                "outbound_request_failed",
                method=method, url=url, error_type="timeout", elapsed_ms=elapsed_ms,
            )
            raise TimeoutError(
                detail=f"Request exceeded {timeout_ms} ms timeout",
                elapsed_ms=elapsed_ms
            ) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise ValidationError(f"url is invalid: {e}") from e
        except httpx.HTTPError as e:
            elapsed_ms = elapsed_since(start_time)
            logger.warning(
                "outbound_request_failed",
                method=method, url=url, error_type=type(e).__name__, elapsed_ms=elapsed_ms,
            )
            raise TransportError(detail=str(e) or type(e).__name__, elapsed_ms=elapsed_ms) from e

        elapsed_ms = elapsed_since(start_time)

        # Get response body
        response_body = response.text
        response_headers = dict(response.headers)
        content_type = response_headers.get("content-type", "")

        logger.info(
            "outbound_request_completed",
            method=method, url=url, status_code=response.status_code, elapsed_ms=elapsed_ms,
        )

        return ExecutionResult(
            status_code=response.status_code,
            status_text=response.reason_phrase or "",
            headers=response_headers,
            body=response_body,
            body_json=parse_json_body(response_body, content_type),
            elapsed_ms=elapsed_ms,
            response_size=len(response.content)
        )
