"""cftoken: provision narrowly-scoped Cloudflare API tokens for a zone."""

__version__ = "0.1.0"
