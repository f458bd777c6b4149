"""Unified exception hierarchy for PyWire.

All framework exceptions inherit from PyWireException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: invalid or inconsistent configuration values
- InfrastructureException: filesystem, subprocess and import failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PyWireException(Exception):
    """Base exception for all PyWire errors.

    Carries an optional error code and context dict for structured error data.
    Catch PyWireException to handle all framework errors, or catch specific
    subclasses for targeted handling.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "AUTOWIRING_DUPLICATE_ID").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PyWireException):
    """A configuration value is missing, malformed or unsupported."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(PyWireException):
    """Infrastructure failures: filesystem, external processes, module imports."""
