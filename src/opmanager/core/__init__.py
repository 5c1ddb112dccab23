"""
Core primitives for op-manager: errors, logging, settings and the event
substrate that managers and operations are built on.

Modules
-------
errors      Typed error hierarchy (admission vs. contract violations)
events      Synchronous EventEmitter with owner-bound listeners
logging     structlog configuration and logger access
settings    pydantic-settings configuration (OPMANAGER_*)
"""

from opmanager.core.errors import (
    AdmissionError,
    ConfigError,
    ContractViolationError,
    ErrorCategory,
    ErrorContext,
    InvalidTransitionError,
    OpManagerError,
    UnknownEventError,
)
from opmanager.core.events import EventEmitter, Listener, OwnedListener
from opmanager.core.logging import configure_logging, get_logger

__all__ = [
    "AdmissionError",
    "ConfigError",
    "ContractViolationError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidTransitionError",
    "OpManagerError",
    "UnknownEventError",
    "EventEmitter",
    "Listener",
    "OwnedListener",
    "configure_logging",
    "get_logger",
]
