"""HTTP client - Sends one request and captures the response.

HttpClient is the default collaborator for ActionInvoker. It owns an
httpx.Client built from a ConnectionConfig and converts httpx responses into
Response models. Any object with a matching `execute` method can stand in for
it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import httpx

from resource_kit.config_loader import load_connection_config
from resource_kit.models import ConnectionConfig, HttpVerb, Response

logger = logging.getLogger(__name__)

# Content types whose payload is returned as text rather than bytes.
_TEXT_MARKERS = ("text/", "json", "xml", "x-www-form-urlencoded")


class HttpClientProtocol(Protocol):
    """What ActionInvoker needs from a client."""

    def execute(self, verb: HttpVerb | str, url: str, body: Any = None) -> Any:
        ...


class ClientError(Exception):
    """Base class for client errors."""


class RequestError(ClientError):
    """Raised when a request fails (connection error, timeout, etc.)."""


class HttpClient:
    """Executes single requests against one base URL.

    Usage:
        with HttpClient(ConnectionConfig(base_url="https://api.example.com")) as client:
            response = client.execute("GET", "/users")

    `transport` is passed to httpx.Client, which lets tests plug in
    httpx.MockTransport.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(**self._build_client_kwargs(config, transport))

    @classmethod
    def from_config_file(cls, config_path: Path) -> HttpClient:
        """Build a client from a YAML connection config file."""
        return cls(load_connection_config(config_path))

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _build_client_kwargs(
        self,
        config: ConnectionConfig,
        transport: httpx.BaseTransport | None,
    ) -> dict[str, Any]:
        """Build kwargs for httpx.Client including TLS configuration."""
        kwargs: dict[str, Any] = {
            "base_url": config.base_url,
            "headers": config.headers,
            "timeout": config.timeout,
        }

        # Client certificate (mTLS); the model guarantees cert and key come together
        if config.cert and config.key:
            kwargs["cert"] = (config.cert, config.key)

        if config.ca_bundle:
            kwargs["verify"] = config.ca_bundle
        elif not config.verify_ssl:
            kwargs["verify"] = False

        if transport is not None:
            kwargs["transport"] = transport

        return kwargs

    def execute(self, verb: HttpVerb | str, url: str, body: Any = None) -> Response:
        """Send one request and return the converted response.

        Args:
            verb: HTTP method.
            url: Path (with query string) relative to the base URL, or absolute.
            body: Request payload sent as-is; str or bytes. None sends no body.

        Returns:
            Response model.

        Raises:
            RequestError: If the request fails at the transport level.
        """
        method = HttpVerb.parse(verb).value
        logger.debug("%s %s", method, url)

        try:
            http_response = self._client.request(method=method, url=url, content=body)
        except httpx.TimeoutException as e:
            raise RequestError(f"Request timeout: {method} {url}: {e}") from e
        except httpx.ConnectError as e:
            raise RequestError(f"Connection error: {method} {url}: {e}") from e
        except httpx.RequestError as e:
            raise RequestError(f"Request error: {method} {url}: {e}") from e

        logger.debug("%s %s -> %d", method, url, http_response.status_code)
        return self._convert_response(http_response)

    def _convert_response(self, response: httpx.Response) -> Response:
        """Convert an httpx Response to a Response model.

        Text-like content types (and responses with no content type) are
        decoded to str; anything else, or undecodable text, stays as bytes.
        """
        headers: dict[str, list[str]] = {}
        for key, value in response.headers.multi_items():
            headers.setdefault(key.lower(), []).append(value)

        body: str | bytes | None = None
        if response.content:
            content_type = response.headers.get("content-type", "").lower()
            if not content_type or any(marker in content_type for marker in _TEXT_MARKERS):
                try:
                    body = response.content.decode(response.encoding or "utf-8")
                except (UnicodeDecodeError, LookupError):
                    body = response.content
            else:
                body = response.content

        return Response(
            status=response.status_code,
            headers=headers,
            body=body,
            url=str(response.request.url),
        )
