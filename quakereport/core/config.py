"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quakereport.core.formatter import DEFAULT_TIER_COLORS, MagnitudeTier


# USGS FDSN Event Web Service query endpoint
USGS_REQUEST_URL = "https://earthquake.usgs.gov/fdsnws/event/1/query"

# Values the USGS service accepts for orderby
ORDER_BY_CHOICES = ("time", "time-asc", "magnitude", "magnitude-asc")


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.
    min_magnitude and order_by are passed through to the query as-is.

    Attributes:
        base_url: USGS query endpoint
        min_magnitude: Minimum magnitude to fetch, as a string
        order_by: Sort order requested from USGS
        limit: Maximum number of events to fetch
        request_timeout: HTTP timeout in seconds
        timezone: "UTC", "local" or an IANA timezone for date/time display
        connectivity_host: Host probed before fetching
        connectivity_port: Port probed before fetching
        tier_colors: Display color per magnitude tier
    """
    base_url: str = USGS_REQUEST_URL
    min_magnitude: str = "6"
    order_by: str = "magnitude"
    limit: int = 10
    request_timeout: int = 30
    timezone: str = "UTC"
    connectivity_host: str = "earthquake.usgs.gov"
    connectivity_port: int = 443
    tier_colors: dict[MagnitudeTier, str] = field(
        default_factory=lambda: dict(DEFAULT_TIER_COLORS)
    )


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def _is_known_timezone(name: str) -> bool:
    if name.upper() == "UTC" or name.lower() == "local":
        return True
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Query values are opaque to the application, so odd ones only
    produce warnings; the USGS service is the final judge.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.base_url:
        errors.append(ValidationError(
            field="base_url",
            message="Base URL must not be empty",
        ))

    if config.limit <= 0:
        errors.append(ValidationError(
            field="limit",
            message=f"Limit must be positive, got {config.limit}",
        ))

    if config.request_timeout <= 0:
        errors.append(ValidationError(
            field="request_timeout",
            message=f"Request timeout must be positive, got {config.request_timeout}",
        ))

    try:
        float(config.min_magnitude)
    except ValueError:
        errors.append(ValidationError(
            field="min_magnitude",
            message=f"min_magnitude '{config.min_magnitude}' is not a number",
            severity="warning",
        ))

    if config.order_by not in ORDER_BY_CHOICES:
        errors.append(ValidationError(
            field="order_by",
            message=(
                f"order_by '{config.order_by}' is not one of "
                f"{', '.join(ORDER_BY_CHOICES)}"
            ),
            severity="warning",
        ))

    if not _is_known_timezone(config.timezone):
        errors.append(ValidationError(
            field="timezone",
            message=f"Unknown timezone '{config.timezone}', UTC will be used",
            severity="warning",
        ))

    missing_tiers = [t for t in MagnitudeTier if t not in config.tier_colors]
    if missing_tiers:
        errors.append(ValidationError(
            field="tier_colors",
            message=(
                "No color for "
                f"{', '.join(t.name for t in missing_tiers)}, defaults will be used"
            ),
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
