"""
Requested-version parsing.

Clients send the version in a request header as "1", "1.0", "1.2.3" or with a
leading "v" ("v2"). Lookup in the registry is always by major version: a request
for "2.1" resolves to the entry named "v2".
"""

import re
from dataclasses import dataclass
from typing import Optional


_REQUESTED_VERSION = re.compile(r"^[vV]?(\d+)(?:\.(\d+))?(?:\.(\d+))?$")


@dataclass(frozen=True)
class RequestedVersion:
    """A parsed version header value."""
    raw: str
    major: int
    minor: Optional[int] = None
    patch: Optional[int] = None

    @property
    def registry_key(self) -> str:
        return version_key(self.major)

    def __str__(self) -> str:
        parts = [str(self.major)]
        if self.minor is not None:
            parts.append(str(self.minor))
        if self.patch is not None:
            parts.append(str(self.patch))
        return ".".join(parts)


def version_key(major: int) -> str:
    """Registry key convention for a major version: 2 -> "v2"."""
    return f"v{major}"


def parse_requested_version(raw: Optional[str]) -> Optional[RequestedVersion]:
    """
    Parse a version header value.

    Returns:
        RequestedVersion, or None if the value is empty or malformed
    """
    if raw is None:
        return None
    text = raw.strip()
    match = _REQUESTED_VERSION.match(text)
    if not match:
        return None
    major, minor, patch = match.groups()
    return RequestedVersion(
        raw=text,
        major=int(major),
        minor=int(minor) if minor is not None else None,
        patch=int(patch) if patch is not None else None,
    )
