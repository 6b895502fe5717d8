"""
Version Registry - single source of truth for configured API versions.

The registry is built once at process start and is read-only afterwards, so the
per-request middleware can consult it from any number of concurrent requests
without locking.

Invariants (checked eagerly in the constructor, violation is fatal):
- At least one version has status active/current
- At most one version has status active/current
- Every version has a non-empty name and semantic version
- Every semantic version has 1-3 integer components
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .models import DocsSettings, VersionInfo, VersioningSettings, is_valid_semantic_version
from .status import INACTIVE_STATUSES, VersionStatus


logger = logging.getLogger('api.versioning')


DEFAULT_VERSION_DESCRIPTION = (
    "Default API version. Configure the apiVersioning section to customize API versions."
)


class ConfigurationError(RuntimeError):
    """Invalid versioning configuration. The process must not serve traffic."""


def _synthetic_default() -> VersionInfo:
    return VersionInfo(
        name="v1",
        semantic_version="1.0.0",
        status=VersionStatus.ACTIVE,
        title="API",
        description=DEFAULT_VERSION_DESCRIPTION,
    )


class VersionRegistry:
    """
    Ordered, immutable collection of VersionInfo plus documentation display options.

    Args:
        versions: Configured versions in operator order. An empty list is replaced by
            a single synthetic v1 / 1.0.0 / active entry.
        docs: Documentation UI options (pass-through)

    Raises:
        ConfigurationError: If any invariant is violated
    """

    def __init__(
        self,
        versions: Iterable[VersionInfo] = (),
        docs: Optional[DocsSettings] = None,
    ):
        configured = tuple(versions)
        if not configured:
            logger.warning("No API versions configured, using default v1 (1.0.0, active)")
            configured = (_synthetic_default(),)

        self._versions: Tuple[VersionInfo, ...] = configured
        self._docs = docs or DocsSettings()
        self.validate()

        logger.info(
            "Loaded %d API version(s): %s (default: %s)",
            len(self._versions),
            ", ".join(f"{v.name}={v.semantic_version}/{v.status.value}" for v in self._versions),
            self.default_version().name,
        )

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def from_settings(cls, settings: VersioningSettings) -> "VersionRegistry":
        return cls(settings.versions, settings.docs)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "VersionRegistry":
        """
        Build a registry from a raw configuration mapping.

        Malformed entries (unknown status, unparsable dates) are reported as
        ConfigurationError, same as invariant violations.
        """
        try:
            settings = VersioningSettings.model_validate(dict(data or {}))
        except ValidationError as e:
            logger.error("Invalid API versioning configuration: %s", e)
            raise ConfigurationError(f"Invalid API versioning configuration: {e}") from e
        return cls.from_settings(settings)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def versions(self) -> Tuple[VersionInfo, ...]:
        return self._versions

    @property
    def docs(self) -> DocsSettings:
        return self._docs

    def __iter__(self):
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def active_versions(self) -> List[VersionInfo]:
        """Versions not in legacy, deprecated or the sunset family, in configured order."""
        return [v for v in self._versions if v.status not in INACTIVE_STATUSES]

    def inactive_versions(self) -> List[VersionInfo]:
        return [v for v in self._versions if v.status in INACTIVE_STATUSES]

    def default_version(self) -> VersionInfo:
        """
        The recommended version for clients that do not ask for one.

        This is the active/current entry. If invariants were bypassed and there is
        none, falls back to the first active-class version.

        Raises:
            ConfigurationError: If no active-class version exists
        """
        active = self.active_versions()
        for version in active:
            if version.is_default_candidate:
                return version
        if active:
            return active[0]
        raise ConfigurationError("No active version defined in configuration")

    def lookup(self, name: Optional[str]) -> Optional[VersionInfo]:
        """Case-insensitive exact match on name, or None."""
        if not name:
            return None
        key = name.casefold()
        for version in self._versions:
            if version.name.casefold() == key:
                return version
        return None

    def documents_listing(self) -> List[VersionInfo]:
        """Versions newest first: major, then minor, then patch, all descending."""
        return sorted(self._versions, key=lambda v: v.sort_key, reverse=True)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check all invariants. Never partially applies: the registry is unusable
        if this raises.

        Raises:
            ConfigurationError: On the first violated invariant
        """
        defaults = [v for v in self._versions if v.is_default_candidate]
        problem = None

        if not defaults:
            problem = "At least one version must have 'Active' or 'Current' status"
        elif len(defaults) > 1:
            names = ", ".join(v.name or "<unnamed>" for v in defaults)
            problem = f"Only one version can have 'Active' or 'Current' status (found: {names})"
        elif any(not v.name.strip() for v in self._versions):
            problem = "Version name cannot be empty"
        elif any(not v.semantic_version.strip() for v in self._versions):
            problem = "Version cannot be empty"
        else:
            invalid = [v.semantic_version for v in self._versions
                       if not is_valid_semantic_version(v.semantic_version)]
            if invalid:
                problem = (
                    "Versions must follow semantic versioning format (Major.Minor.Patch), "
                    f"e.g., '1.0.0' (invalid: {', '.join(invalid)})"
                )

        if problem:
            logger.error("API versioning configuration error: %s", problem)
            raise ConfigurationError(problem)

    def summary(self) -> List[Dict[str, Any]]:
        """Plain-dict view of the configured versions (CLI and diagnostics)."""
        default_name = self.default_version().name
        return [
            {
                "name": v.name,
                "version": v.semantic_version,
                "status": v.status.value,
                "default": v.name == default_name,
                "deprecationDate": v.deprecation_date.isoformat() if v.deprecation_date else None,
                "sunsetDate": v.sunset_date.isoformat() if v.sunset_date else None,
            }
            for v in self._versions
        ]


RegistrySource = Union[VersionRegistry, VersioningSettings, Mapping[str, Any], None]


def build_registry(source: RegistrySource) -> VersionRegistry:
    """Accept a registry, parsed settings, or a raw mapping and return a registry."""
    if isinstance(source, VersionRegistry):
        return source
    if isinstance(source, VersioningSettings):
        return VersionRegistry.from_settings(source)
    return VersionRegistry.from_mapping(source)
