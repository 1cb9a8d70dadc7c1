"""Domain layer: entities, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from cftoken.domain.exceptions import (
    CftokenException,
    CloudflareAPIError,
    InvalidArgument,
    InvalidConfiguration,
    InvalidPolicyEffect,
    MalformedCIDR,
    MissingTokenPrefix,
    MissingZoneIdentifier,
    NoCIDRsConfigured,
    NoPermissionsSpecified,
    NoTemplateSource,
    PermissionNotFound,
    TemplateOutputInvalid,
    TemplateReadError,
    TemplateSyntaxInvalid,
    ZoneNotFound,
)

__all__ = [
    "CftokenException",
    "CloudflareAPIError",
    "InvalidArgument",
    "InvalidConfiguration",
    "InvalidPolicyEffect",
    "MalformedCIDR",
    "MissingTokenPrefix",
    "MissingZoneIdentifier",
    "NoCIDRsConfigured",
    "NoPermissionsSpecified",
    "NoTemplateSource",
    "PermissionNotFound",
    "TemplateOutputInvalid",
    "TemplateReadError",
    "TemplateSyntaxInvalid",
    "ZoneNotFound",
]
