"""Thin Cloudflare API client for token provisioning (implements IPermissionCatalog, ITokenSink).

Covers the four user-token endpoints the tool needs: list permission
groups, create, verify and get. Every call is a blocking httpx request
bounded by the configured timeout; nothing is retried.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx

from cftoken.core.config import Settings
from cftoken.domain.entities.permission import PermissionCatalogEntry
from cftoken.domain.entities.token import (
    PermissionGroupSummary,
    TokenInspection,
    TokenPolicyInspection,
    TokenResult,
    TokenSpecification,
    TokenVerification,
    format_rfc3339,
)
from cftoken.domain.exceptions import CloudflareAPIError, InvalidArgument
from cftoken.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _log_request(request: httpx.Request) -> None:
    logger.debug("cloudflare request: %s %s", request.method, request.url)


def _timestamp(value: Any) -> str:
    """Normalize an API timestamp to RFC3339 UTC; blank stays blank."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return format_rfc3339(parsed)


class CloudflareClient:
    """Cloudflare REST client bound to one API token."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.cloudflare.com/client/v4",
        user_agent: str = "cftoken-cli",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": user_agent,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [_log_request]},
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, token: str | None = None, timeout: float | None = None
    ) -> CloudflareClient:
        """Build a client from settings; token/timeout override the configured values."""
        return cls(
            token or settings.require_api_token(),
            base_url=settings.cloudflare_api_base_url,
            user_agent=settings.user_agent,
            timeout=timeout or settings.request_timeout_seconds,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> CloudflareClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(
        self, operation: str, method: str, path: str, body: dict[str, Any] | None = None
    ) -> Any:
        """Perform a request and return the envelope's ``result``.

        Raises:
            CloudflareAPIError: Transport failure, non-2xx status, or success=false.
        """
        try:
            response = self._http.request(method, path, json=body)
        except httpx.HTTPError as e:
            raise CloudflareAPIError(operation, str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error or not isinstance(payload, dict) or not payload.get("success", False):
            api_errors = payload.get("errors") if isinstance(payload, dict) else None
            reason = _error_reason(api_errors) or f"HTTP {response.status_code}"
            logger.error("%s failed: status=%d reason=%s", operation, response.status_code, reason)
            raise CloudflareAPIError(operation, reason, response.status_code, api_errors)
        return payload.get("result")

    def list_permission_groups(self) -> list[PermissionCatalogEntry]:
        """Fetch all permission groups available to the current token."""
        result = self._request(
            "list permission groups", "GET", "/user/tokens/permission_groups"
        )
        if result is None:
            raise CloudflareAPIError(
                "list permission groups", "API returned an empty permission group response"
            )
        entries = []
        for item in result:
            meta = item.get("meta") or {}
            entries.append(
                PermissionCatalogEntry(
                    id=item.get("id", ""),
                    name=item.get("name", ""),
                    alias_key=meta.get("key", "") or "",
                    description=item.get("description") or meta.get("description") or "",
                    scopes=tuple(item.get("scopes") or ()),
                )
            )
        return entries

    def create_token(self, spec: TokenSpecification) -> TokenResult:
        """Create a token from a finished specification."""
        result = self._request("create token", "POST", "/user/tokens", spec.to_payload())
        if not result:
            raise CloudflareAPIError("create token", "API returned an empty response")
        return TokenResult(
            id=result.get("id", ""),
            name=result.get("name", ""),
            status=result.get("status", "") or "",
            value=result.get("value", "") or "",
            expires_on=_timestamp(result.get("expires_on")),
            zone_id=spec.zone_id,
            allowed_cidrs=spec.allowed_cidrs,
        )

    def verify_token(self) -> TokenVerification:
        """Return metadata about the token this client authenticates with."""
        result = self._request("verify token", "GET", "/user/tokens/verify")
        if not result:
            raise CloudflareAPIError(
                "verify token", "API returned an empty token verification response"
            )
        return TokenVerification(
            id=result.get("id", ""),
            status=result.get("status", "") or "",
            expires_on=_timestamp(result.get("expires_on")),
            not_before=_timestamp(result.get("not_before")),
        )

    def describe_token(self, token_id: str) -> TokenInspection:
        """Fetch a token by ID and summarise its permissions and restrictions."""
        if not token_id.strip():
            raise InvalidArgument("token ID is required", argument="token_id")
        operation = f"get token {token_id}"
        token = self._request(operation, "GET", f"/user/tokens/{token_id}")
        if not token:
            raise CloudflareAPIError(operation, "API returned an empty token response")

        request_ip = (token.get("condition") or {}).get("request_ip") or {}
        policies = tuple(
            TokenPolicyInspection(
                effect=policy.get("effect", "") or "",
                permission_groups=tuple(
                    PermissionGroupSummary(
                        id=group.get("id", ""),
                        name=group.get("name", "") or "",
                        key=(group.get("meta") or {}).get("key", "") or "",
                    )
                    for group in policy.get("permission_groups") or ()
                ),
                resources=tuple(sorted(flatten_resources(policy.get("resources") or {}))),
            )
            for policy in token.get("policies") or ()
        )
        return TokenInspection(
            id=token.get("id", ""),
            name=token.get("name", "") or "",
            status=token.get("status", "") or "",
            expires_on=_timestamp(token.get("expires_on")),
            not_before=_timestamp(token.get("not_before")),
            allowed_cidrs=tuple(sorted(request_ip.get("in") or ())),
            denied_cidrs=tuple(sorted(request_ip.get("not_in") or ())),
            policies=policies,
        )


def flatten_resources(resources: dict[str, Any]) -> list[str]:
    """Flatten flat or nested resource maps into 'key=value' strings.

    Flat: {"zone.X": "*"} -> ["zone.X=*"]. Nested: {"account.A": {"zone.*": "*"}}
    -> ["account.A.zone.*=*"]. Empty values/maps yield the bare key.
    """
    out: list[str] = []
    for key, value in resources.items():
        if isinstance(value, dict):
            if not value:
                out.append(key)
            for inner_key, inner_value in value.items():
                out.append(f"{key}.{inner_key}={inner_value}")
        elif value in ("", None):
            out.append(key)
        else:
            out.append(f"{key}={value}")
    return out


def _error_reason(api_errors: Any) -> str:
    if not isinstance(api_errors, list):
        return ""
    messages = []
    for err in api_errors:
        if isinstance(err, dict):
            code = err.get("code")
            message = err.get("message", "")
            messages.append(f"{message} (code {code})" if code is not None else message)
        else:
            messages.append(str(err))
    return "; ".join(m for m in messages if m)
