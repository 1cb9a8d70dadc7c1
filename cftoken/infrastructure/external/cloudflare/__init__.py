"""Cloudflare API client."""

from cftoken.infrastructure.external.cloudflare.client import (
    CloudflareClient,
    flatten_resources,
)

__all__ = ["CloudflareClient", "flatten_resources"]
