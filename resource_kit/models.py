"""Internal data models for resource-kit.

Pydantic v2 models for the objects that cross the client boundary (responses and
connection settings), plus the HTTP verb enumeration used by actions.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HttpVerb(str, Enum):
    """HTTP method an action issues."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: HttpVerb | str) -> HttpVerb:
        """Accept an enum member or a case-insensitive method name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP verb: {value!r}") from None


# =============================================================================
# HTTP Response Model
# =============================================================================


class Response(BaseModel):
    """One HTTP response as seen by action handlers.

    Header keys are lowercase. Header values are arrays for repeated headers.
    The body is text when it decodes cleanly, raw bytes otherwise.
    """

    model_config = ConfigDict(extra="forbid")

    status: int = Field(description="HTTP status code")
    headers: dict[str, list[str]] = Field(
        default_factory=dict, description="Response headers (lowercase keys, array values)"
    )
    body: str | bytes | None = Field(default=None, description="Raw response payload")
    url: str = Field(default="", description="URL the request was sent to")

    def header(self, name: str) -> str | None:
        """First value of a header, or None if absent."""
        values = self.headers.get(name.lower())
        return values[0] if values else None

    def json(self) -> Any:
        """Parse the body as JSON."""
        if self.body is None:
            raise ValueError("Response has no body")
        return json.loads(self.body)


# =============================================================================
# Connection Configuration Models
# =============================================================================


class ConnectionConfig(BaseModel):
    """Settings for the HTTP connection actions are executed against."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(description="Base URL all action paths are relative to")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers sent with every request (supports ${ENV_VAR} substitution)",
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify the server certificate")
    ca_bundle: str | None = Field(default=None, description="Path to a CA bundle file")
    cert: str | None = Field(default=None, description="Client certificate for mTLS")
    key: str | None = Field(default=None, description="Client private key for mTLS")

    @model_validator(mode="after")
    def check_cert_pair(self) -> Self:
        if (self.cert is None) != (self.key is None):
            raise ValueError("cert and key must be provided together")
        return self
