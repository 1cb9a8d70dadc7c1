"""Schemas for the on-disk configuration files (config.json, zones.json)."""

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cftoken.shared.utils.datetime import parse_duration


def _clean_list(values: list[str] | None) -> list[str]:
    """Trim entries and drop blanks."""
    return [v.strip() for v in values or [] if v and v.strip()]


def _parse_ttl(value: Any) -> timedelta | None:
    if value is None or isinstance(value, timedelta):
        return value
    if not isinstance(value, str):
        raise ValueError("ttl must be a duration string such as '8h' or '30m'")
    if not value.strip():
        return None
    return parse_duration(value)


class ZoneRecordSchema(BaseModel):
    """Extended zone entry as written in config.json / zones.json."""

    model_config = ConfigDict(extra="forbid")

    zone_id: str = Field(..., min_length=1)
    permissions: list[str] = Field(default_factory=list)
    allowed_cidrs: list[str] = Field(default_factory=list)
    ttl: timedelta | None = None
    template_file: str | None = None
    template_inline: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)
    inherit_defaults: bool = False

    @field_validator("zone_id")
    @classmethod
    def strip_zone_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("zone_id must not be blank")
        return value

    @field_validator("permissions", "allowed_cidrs", mode="before")
    @classmethod
    def clean_lists(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return _clean_list([str(v) for v in value])
        return value

    @field_validator("ttl", mode="before")
    @classmethod
    def parse_ttl(cls, value: Any) -> timedelta | None:
        return _parse_ttl(value)

    @field_validator("template_file", "template_inline")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def validate_template_source(self) -> "ZoneRecordSchema":
        """A zone may reference a template file or an inline template, not both."""
        if self.template_file and self.template_inline:
            raise ValueError("set only one of template_file and template_inline")
        return self


# A zone entry is either a bare zone ID or an extended record.
ZoneEntrySchema = str | ZoneRecordSchema


class ConfigFileSchema(BaseModel):
    """Top-level config.json: global defaults plus an optional zones map."""

    model_config = ConfigDict(extra="ignore")

    default_permissions: list[str] = Field(default_factory=list)
    default_allowed_cidrs: list[str] = Field(default_factory=list)
    default_ttl: timedelta | None = None
    zones: dict[str, ZoneEntrySchema] = Field(default_factory=dict)

    @field_validator("default_permissions", "default_allowed_cidrs", mode="before")
    @classmethod
    def clean_lists(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return _clean_list([str(v) for v in value])
        return value

    @field_validator("default_ttl", mode="before")
    @classmethod
    def parse_ttl(cls, value: Any) -> timedelta | None:
        return _parse_ttl(value)
