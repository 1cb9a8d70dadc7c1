"""Pydantic schemas for configuration files and rendered policy documents."""

from cftoken.schemas.config_file import ConfigFileSchema, ZoneEntrySchema, ZoneRecordSchema
from cftoken.schemas.policy import (
    PermissionGroupSchema,
    PolicyDocumentSchema,
    PolicyListAdapter,
)

__all__ = [
    "ConfigFileSchema",
    "PermissionGroupSchema",
    "PolicyDocumentSchema",
    "PolicyListAdapter",
    "ZoneEntrySchema",
    "ZoneRecordSchema",
]
