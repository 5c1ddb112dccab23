"""
Structured error types for op-manager.

Two very different kinds of failure flow through the coordinator, and the
error hierarchy keeps them apart:

- **Admission errors** are raised internally while a manager evaluates a
  request. They never escape ``request()``; the manager converts them into a
  REFUSE event carrying the error message as the reason.
- **Contract violations** are programmer errors in a collaborator (calling the
  completion callback twice, releasing an operation that is not managed,
  subscribing to an undeclared event). They are raised immediately and are
  never caught by the coordinator.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                       OpManagerError                          │
        │               (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ConfigError          ContractViolationError   AdmissionError │
        │  (CONFIG)             (CONTRACT)               (ADMISSION)    │
        │                            │                        │         │
        │                  InvalidTransitionError    NotAllowedError    │
        │                  UnknownEventError         NotProcessableError│
        │                                            AlreadyStartedError│
        │                                            AlreadyAcceptedError
        │                                            AlreadyRefusedError│
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = NotProcessableError()
    >>> error.message
    'The operation is not processable.'
    >>> error.category
    <ErrorCategory.ADMISSION: 'ADMISSION'>

    >>> error = ContractViolationError("The operation is not managed.")
    >>> error.with_context(manager="ExclusiveManager").to_dict()["context"]
    {'manager': 'ExclusiveManager'}

Tags:
    error-handling, exception-hierarchy, admission, contract, op-manager
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging.

    Attributes:
        CONFIG: Invalid construction arguments or settings
        CONTRACT: A collaborator broke the lifecycle contract (a bug)
        ADMISSION: A request was refused by the admission procedure
        INTERNAL: Unexpected state inside the coordinator
        UNKNOWN: Uncategorized errors
    """

    CONFIG = "CONFIG"
    CONTRACT = "CONTRACT"
    ADMISSION = "ADMISSION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        manager: Class name of the manager involved
        operation: Class name (or repr) of the operation involved
        event: Lifecycle event being handled, if any
        status: Operation status at the time of the error
        metadata: Additional key-value pairs
    """

    manager: str | None = None
    operation: str | None = None
    event: str | None = None
    status: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["manager", "operation", "event", "status"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class OpManagerError(Exception):
    """
    Base exception for all op-manager errors.

    Subclasses set ``default_category`` (and, for the admission family,
    ``default_message``) so callers rarely pass anything but a message.

    Examples:
        >>> error = OpManagerError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> try:
        ...     raise KeyError("kind")
        ... except KeyError as e:
        ...     error = OpManagerError("Lookup failed", cause=e)
        >>> error.cause
        KeyError('kind')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> OpManagerError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ContractViolationError("Not running").with_context(
                operation="FetchOperation", status="done"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(OpManagerError):
    """Invalid construction arguments (e.g. an empty list of allowed kinds)."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# CONTRACT VIOLATIONS (programmer errors, never caught)
# =============================================================================


class ContractViolationError(OpManagerError):
    """A collaborator broke the lifecycle contract."""

    default_category = ErrorCategory.CONTRACT


class InvalidTransitionError(ContractViolationError):
    """Raised when an illegal status transition is attempted (e.g. done → running)."""

    def __init__(self, current: str, target: str, enum_name: str = "OperationStatus") -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid {enum_name} transition: {current} → {target}")


class UnknownEventError(ContractViolationError):
    """Raised when subscribing to or triggering an event the emitter never declared."""

    def __init__(self, event: Any, emitter: str) -> None:
        self.event = event
        super().__init__(f"{emitter} does not declare the event {event!r}.")


# =============================================================================
# ADMISSION ERRORS (converted into REFUSE reasons)
# =============================================================================


class AdmissionError(OpManagerError):
    """
    An operation failed the admission procedure.

    Raised inside ``AbstractManager.request`` and turned into a REFUSE event
    whose reason is ``message``. ``_prepare`` hooks may raise it to veto an
    admission.
    """

    default_category = ErrorCategory.ADMISSION
    default_message = "The request has been refused."

    def __init__(self, message: str | None = None, **kwargs: Any):
        super().__init__(message or self.default_message, **kwargs)


class NotAllowedError(AdmissionError):
    """The operation belongs to another manager or its kind is not allowed."""

    default_message = "The operation is not allowed."


class NotProcessableError(AdmissionError):
    """The manager's policy rejects the operation given the active set."""

    default_message = "The operation is not processable."


class AlreadyStartedError(AdmissionError):
    """The operation is no longer idle."""

    default_message = "The operation has already started."


class AlreadyAcceptedError(AdmissionError):
    """The operation is already in the active set."""

    default_message = "The operation has already been accepted."


class AlreadyRefusedError(AdmissionError):
    """The operation was refused before and no longer listens to its manager."""

    default_message = "The operation has already been refused."


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "OpManagerError",
    "ConfigError",
    "ContractViolationError",
    "InvalidTransitionError",
    "UnknownEventError",
    "AdmissionError",
    "NotAllowedError",
    "NotProcessableError",
    "AlreadyStartedError",
    "AlreadyAcceptedError",
    "AlreadyRefusedError",
]
