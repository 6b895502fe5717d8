"""
Pydantic models for the versioning configuration section.

Key features:
- frozen=True: version entries are immutable once loaded
- keys accepted in snake_case, camelCase or PascalCase ("sunsetDate", "SunsetDate")
- status parsed case-insensitively
- naive timestamps are interpreted as UTC

Only shapes are checked here. Cross-entry invariants (exactly one default version,
semantic version format) are enforced by VersionRegistry.validate() so that every
violation surfaces as the same ConfigurationError.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.naming import to_snake_case
from .status import DEFAULT_STATUSES, SUNSET_STATUSES, VersionStatus


_INT_COMPONENT = re.compile(r"[+-]?\d+")


def parse_version_component(part: str) -> Optional[int]:
    """Parse one dot-separated version component, or None if it is not an integer."""
    text = part.strip()
    if not _INT_COMPONENT.fullmatch(text):
        return None
    return int(text)


def is_valid_semantic_version(version: str) -> bool:
    """True for 1-3 dot-separated integer components ("1", "1.2", "1.2.3")."""
    parts = version.split(".")
    if not 1 <= len(parts) <= 3:
        return False
    return all(parse_version_component(p) is not None for p in parts)


def _normalize_keys(data: Any) -> Any:
    if isinstance(data, dict):
        return {to_snake_case(k) if isinstance(k, str) else k: v for k, v in data.items()}
    return data


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        populate_by_name=True,
        extra='ignore',
    )

    @model_validator(mode='before')
    @classmethod
    def normalize_keys(cls, data):
        return _normalize_keys(data)


class VersionInfo(_SettingsModel):
    """
    One configured API version.

    `name` is the only identity key ("v1") and must match the group that request
    handlers are registered under. major/minor/patch are derived from
    `semantic_version` on access, never stored.
    """
    name: str = ""
    semantic_version: str = Field(
        default="",
        validation_alias=AliasChoices("semantic_version", "version"),
    )
    status: VersionStatus = VersionStatus.INTERNAL
    deprecation_date: Optional[datetime] = None
    sunset_date: Optional[datetime] = None
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator('name', 'semantic_version', mode='before')
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, v):
        return VersionStatus.parse(v)

    @field_validator('deprecation_date', 'sunset_date', mode='before')
    @classmethod
    def date_to_midnight(cls, v):
        # YAML loads unquoted 2026-12-31 as a date
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        return v

    @field_validator('deprecation_date', 'sunset_date')
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def _component(self, index: int, fallback: int) -> int:
        parts = self.semantic_version.split(".")
        if index >= len(parts):
            return 0
        value = parse_version_component(parts[index])
        return fallback if value is None else value

    @property
    def major(self) -> int:
        """Major component; 1 when it cannot be parsed."""
        return self._component(0, fallback=1)

    @property
    def minor(self) -> int:
        return self._component(1, fallback=0)

    @property
    def patch(self) -> int:
        return self._component(2, fallback=0)

    @property
    def sort_key(self):
        return (self.major, self.minor, self.patch)

    @property
    def is_deprecated(self) -> bool:
        return self.status == VersionStatus.DEPRECATED

    @property
    def is_sunset(self) -> bool:
        return self.status in SUNSET_STATUSES

    @property
    def is_default_candidate(self) -> bool:
        return self.status in DEFAULT_STATUSES


class ServerInfo(_SettingsModel):
    """A server entry shown by the documentation UI."""
    url: str
    description: Optional[str] = None


class DocsSettings(_SettingsModel):
    """
    Display options for the documentation UI.

    Opaque pass-through: nothing here changes runtime behaviour.
    """
    title: str = "API"
    theme: str = "none"
    layout: str = "modern"
    servers: List[ServerInfo] = Field(default_factory=list)


class VersioningSettings(_SettingsModel):
    """The complete versioning section: version entries plus documentation options."""
    versions: List[VersionInfo] = Field(
        default_factory=list,
        validation_alias=AliasChoices("versions"),
    )
    docs: DocsSettings = Field(
        default_factory=DocsSettings,
        validation_alias=AliasChoices("docs", "scalar"),
    )
