"""Configuration system for secure-random.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (SECURE_RANDOM_*) -> .env file -> field defaults.

Overrides are applied via resolve_config() which creates a new config
instance without mutating the defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from secure_random.exceptions import ConfigValidationError

LOG_LEVELS: frozenset[str] = frozenset({"none", "summary", "full"})

# All known config field names (populated after class definition).
_ALL_FIELDS: frozenset[str] = frozenset()


class SecureRandomConfig(BaseSettings):
    """Configuration for secure-random.

    Resolution order: init kwargs -> env vars (SECURE_RANDOM_*) -> .env file -> defaults.

    The config is read once per manager. Every thread served by a manager
    builds its own entropy source from the same (immutable) settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SECURE_RANDOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Entropy source ---

    entropy_source_type: str = Field(
        default="system",
        description="Registered entropy source built for each thread: 'system', 'device'",
    )
    device_path: str = Field(
        default="/dev/urandom",
        description="Character device read by the 'device' entropy source",
    )

    # --- Logging ---

    log_level: str = Field(
        default="summary",
        description="Lifecycle logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Keep all lifecycle events in memory for analysis",
    )


# Populate _ALL_FIELDS now that the class is defined.
_ALL_FIELDS = frozenset(SecureRandomConfig.model_fields.keys())


def validate_overrides(overrides: dict[str, Any]) -> None:
    """Validate override keys and values without creating a config.

    Args:
        overrides: Mapping of field name to new value.

    Raises:
        ConfigValidationError: If a key is unknown or ``log_level`` is not
            one of ``'none'``, ``'summary'``, ``'full'``.
    """
    for key in overrides:
        if key not in _ALL_FIELDS:
            available = ", ".join(sorted(_ALL_FIELDS))
            raise ConfigValidationError(
                f"Unknown config field: '{key}'. Available: {available}"
            )
    if "log_level" in overrides:
        check_log_level(overrides["log_level"])


def check_log_level(level: Any) -> None:
    """Reject log levels other than ``'none'``, ``'summary'`` and ``'full'``.

    Raises:
        ConfigValidationError: If *level* is not a known log level.
    """
    if level not in LOG_LEVELS:
        raise ConfigValidationError(
            f"Invalid log_level {level!r}; expected one of {sorted(LOG_LEVELS)}"
        )


def resolve_config(
    defaults: SecureRandomConfig,
    overrides: dict[str, Any] | None,
) -> SecureRandomConfig:
    """Create a new config instance merging defaults with overrides.

    Args:
        defaults: The base configuration loaded from environment.
        overrides: Field values replacing those in *defaults*.

    Returns:
        A new SecureRandomConfig with overrides applied, or *defaults*
        itself when there is nothing to override.

    Raises:
        ConfigValidationError: If any key is unknown or a value fails
            type validation.
    """
    if not overrides:
        return defaults

    validate_overrides(overrides)

    # model_copy(update=...) skips validation, so string "true" would not
    # be coerced to bool. model_validate runs the full validator.
    merged = defaults.model_dump()
    merged.update(overrides)
    try:
        return SecureRandomConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
