"""
API version lifecycle stages.

Stages are ordered from least to most mature, then through retirement:

    internal -> preview -> alpha -> beta -> {active|current}
             -> legacy -> deprecated -> {sunset|retired|obsolete}

Status is operator-set configuration. Nothing in the runtime transitions a version
from one stage to the next; middleware and documentation branch on the groupings below.
"""

from enum import Enum
from typing import FrozenSet


class VersionStatus(str, Enum):
    """Declared lifecycle stage of an API version."""
    INTERNAL = "internal"
    PREVIEW = "preview"
    ALPHA = "alpha"
    BETA = "beta"
    ACTIVE = "active"
    CURRENT = "current"
    LEGACY = "legacy"
    DEPRECATED = "deprecated"
    SUNSET = "sunset"
    RETIRED = "retired"
    OBSOLETE = "obsolete"

    @classmethod
    def parse(cls, value) -> "VersionStatus":
        """Parse a status name case-insensitively ("Active", "ACTIVE", "active")."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid version status: {value!r}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Invalid version status: {value!r} (allowed: {allowed})"
            ) from None

    @property
    def display_name(self) -> str:
        """Operator-facing name, e.g. "Active"."""
        return self.name.title()

    @property
    def header_value(self) -> str:
        """Lower-case name used in the X-API-Version-Status header."""
        return self.value


# Two names, one meaning: the recommended default version
DEFAULT_STATUSES: FrozenSet[VersionStatus] = frozenset({
    VersionStatus.ACTIVE,
    VersionStatus.CURRENT,
})

# Three names, one meaning: end-of-life, requests are rejected with 410
SUNSET_STATUSES: FrozenSet[VersionStatus] = frozenset({
    VersionStatus.SUNSET,
    VersionStatus.RETIRED,
    VersionStatus.OBSOLETE,
})

# Versions excluded from active_versions()
INACTIVE_STATUSES: FrozenSet[VersionStatus] = frozenset({
    VersionStatus.LEGACY,
    VersionStatus.DEPRECATED,
}) | SUNSET_STATUSES
