"""Shared configuration validation helpers."""

from __future__ import annotations

PROVIDER_MODES = {"auto", "openai", "offline", "mock"}


def require_positive_int(value: int, field_name: str) -> int:
    """Validate a positive integer input and return it."""
    if value <= 0:
        raise ValueError(f"{field_name} must be greater than zero.")
    return value


def validate_choice(value: str, field_name: str, allowed: set[str]) -> str:
    """Validate that a string value is within a set of allowed options."""
    if value not in allowed:
        options = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {options}.")
    return value


def validate_provider_mode(value: str) -> str:
    """Validate provider mode option."""
    return validate_choice(value.strip().lower(), "provider", PROVIDER_MODES)
