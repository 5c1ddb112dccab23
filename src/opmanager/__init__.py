"""
op-manager - admission-controlled operation lifecycles.

A manager decides whether an operation may start, tracks the operations
that are running, and broadcasts ACCEPT / REFUSE / RUN / DONE / RELEASE for
each of them. Operations run, complete, and relay those events on
themselves.

    from opmanager import AbstractOperation, SerialManager

    class Sync(AbstractOperation):
        kind = "sync"

        def _process(self, done):
            done("ok")

    manager = SerialManager([Sync.kind])
    Sync(manager).request()
"""

__version__ = "0.1.0"

from opmanager.core.errors import (
    AdmissionError,
    ConfigError,
    ContractViolationError,
    OpManagerError,
)
from opmanager.lifecycle import (
    AbstractManager,
    AbstractOperation,
    ExclusiveManager,
    LifecycleEvent,
    OperationStatus,
    PermissiveManager,
    SerialManager,
)

__all__ = [
    "__version__",
    "AdmissionError",
    "ConfigError",
    "ContractViolationError",
    "OpManagerError",
    "AbstractManager",
    "AbstractOperation",
    "ExclusiveManager",
    "LifecycleEvent",
    "OperationStatus",
    "PermissiveManager",
    "SerialManager",
]
