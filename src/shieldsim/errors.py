from __future__ import annotations

from typing import List, Optional

from jsonschema import ValidationError


class ShieldSimError(Exception):
    """Base error for the simulator's configuration and catalog layers."""


class ConfigError(ShieldSimError):
    """Raised when simulator settings cannot be read or hold invalid values."""


class CatalogValidationError(ShieldSimError):
    """Raised when a catalog document fails schema validation."""

    def __init__(self, message: str, errors: Optional[List[ValidationError]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            path = "/".join(str(p) for p in e.path) or "<root>"
            parts.append(f" - at {path}: {e.message}")
        return "\n".join(parts)


class UnknownPresetError(ShieldSimError, KeyError):
    """Raised when a preset or item name is not present in the catalog."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown catalog entry"
