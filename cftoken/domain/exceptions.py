"""Domain exceptions for cftoken.

Every failure the resolution engine can raise. All are fatal from the
engine's point of view; the CLI maps them to a one-line error and a
non-zero exit status. Each carries enough context in ``details`` to
diagnose the problem without re-running in verbose mode.
"""

from typing import Any


class CftokenException(Exception):
    """Base exception for all cftoken errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. offending literal, path).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class MalformedCIDR(CftokenException):
    """Raised when an allow-list entry does not parse as an IPv4/IPv6 CIDR."""

    def __init__(self, cidr: str, reason: str) -> None:
        super().__init__(
            f"invalid CIDR {cidr!r}: {reason}",
            "MALFORMED_CIDR",
            {"cidr": cidr, "reason": reason},
        )


class NoCIDRsConfigured(CftokenException):
    """Raised when no usable allow-list remains and restriction is not disabled."""

    def __init__(self, explicit: bool = False) -> None:
        if explicit:
            message = (
                "no allowed CIDRs provided; use --allow-cidrs to specify one or more ranges"
            )
        else:
            message = (
                "no allowed CIDRs configured; set --allow-cidrs or add "
                "default_allowed_cidrs to config.json"
            )
        super().__init__(message, "NO_CIDRS_CONFIGURED", {"explicit": explicit})


class NoPermissionsSpecified(CftokenException):
    """Raised when permission resolution receives no inputs."""

    def __init__(self) -> None:
        super().__init__("no permission groups specified", "NO_PERMISSIONS_SPECIFIED")


class PermissionNotFound(CftokenException):
    """Raised when a permission input matches no catalog entry."""

    def __init__(self, permission: str) -> None:
        super().__init__(
            f"permission group {permission!r} not found; rerun with "
            "--list-permissions to inspect available values",
            "PERMISSION_NOT_FOUND",
            {"permission": permission},
        )


class NoTemplateSource(CftokenException):
    """Raised when neither a template file nor an inline template is given."""

    def __init__(self) -> None:
        super().__init__(
            "either template_file or template_inline must be specified",
            "NO_TEMPLATE_SOURCE",
        )


class TemplateReadError(CftokenException):
    """Raised when a template file cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"read template file {path}: {reason}",
            "TEMPLATE_READ_ERROR",
            {"path": path, "reason": reason},
        )


class TemplateSyntaxInvalid(CftokenException):
    """Raised when a template fails to parse or execute."""

    def __init__(self, template_name: str, reason: str) -> None:
        super().__init__(
            f"render template {template_name}: {reason}",
            "TEMPLATE_SYNTAX_INVALID",
            {"template": template_name, "reason": reason},
        )


class TemplateOutputInvalid(CftokenException):
    """Raised when rendered template text is not a JSON array of policies.

    The rendered text is kept in the message and in ``details`` so template
    logic bugs can be debugged from the error alone.
    """

    def __init__(self, rendered: str, reason: str) -> None:
        super().__init__(
            f"parse rendered template as policies: {reason}\n"
            f"Rendered content:\n{rendered}",
            "TEMPLATE_OUTPUT_INVALID",
            {"rendered": rendered, "reason": reason},
        )


class InvalidPolicyEffect(CftokenException):
    """Raised when a policy effect is neither 'allow' nor 'deny'."""

    def __init__(self, effect: str) -> None:
        super().__init__(
            f"invalid policy effect {effect!r}; must be 'allow' or 'deny'",
            "INVALID_POLICY_EFFECT",
            {"effect": effect},
        )


class ZoneNotFound(CftokenException):
    """Raised when a zone name is not present in the zone table."""

    def __init__(self, zone_name: str) -> None:
        super().__init__(
            f"zone {zone_name!r} not found in configured zones",
            "ZONE_NOT_FOUND",
            {"zone": zone_name},
        )


class MissingZoneIdentifier(CftokenException):
    """Raised when neither a zone ID nor a zone name was supplied."""

    def __init__(self) -> None:
        super().__init__(
            "missing zone identifier: provide via --zone-id or --zone",
            "MISSING_ZONE_IDENTIFIER",
        )


class MissingTokenPrefix(CftokenException):
    """Raised when no token name source is available."""

    def __init__(self) -> None:
        super().__init__(
            "missing token prefix: provide via --token-prefix or use --zone with a named zone",
            "MISSING_TOKEN_PREFIX",
        )


class InvalidConfiguration(CftokenException):
    """Raised when the configuration file cannot be read or fails validation."""

    def __init__(self, message: str, path: str | None = None) -> None:
        details = {"path": path} if path else {}
        super().__init__(message, "INVALID_CONFIGURATION", details)


class InvalidArgument(CftokenException):
    """Raised when a command-line argument is malformed or conflicts with another."""

    def __init__(self, message: str, argument: str | None = None) -> None:
        details = {"argument": argument} if argument else {}
        super().__init__(message, "INVALID_ARGUMENT", details)


class CloudflareAPIError(CftokenException):
    """Raised when a Cloudflare API call fails (transport, HTTP status, or API error)."""

    def __init__(
        self,
        operation: str,
        reason: str,
        status_code: int | None = None,
        api_errors: list[Any] | None = None,
    ) -> None:
        details: dict[str, Any] = {"operation": operation, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        if api_errors:
            details["api_errors"] = api_errors
        super().__init__(f"{operation}: {reason}", "CLOUDFLARE_API_ERROR", details)
