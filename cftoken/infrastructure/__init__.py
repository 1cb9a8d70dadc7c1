"""Infrastructure: configuration files and the Cloudflare API client."""
