"""
Admission-controlled operation lifecycle.

Modules
-------
enums       LifecycleEvent, OperationStatus and the status transition rules
emitter     LifecycleEmitter: the on_<event> / on_<event>_owned surface
manager     AbstractManager: admission procedure and active-operation registry
operation   AbstractOperation: idle → running → done state machine
policies    PermissiveManager, SerialManager, ExclusiveManager
protocols   Structural contracts for collaborators
"""

from opmanager.lifecycle.emitter import LifecycleEmitter
from opmanager.lifecycle.enums import (
    LIFECYCLE_EVENTS,
    STATUS_TRANSITIONS,
    LifecycleEvent,
    OperationStatus,
    validate_transition,
)
from opmanager.lifecycle.manager import AbstractManager
from opmanager.lifecycle.operation import AbstractOperation, DoneCallback
from opmanager.lifecycle.policies import ExclusiveManager, PermissiveManager, SerialManager
from opmanager.lifecycle.protocols import ManagerProtocol, OperationProtocol, Subscribable

__all__ = [
    "LifecycleEmitter",
    "LIFECYCLE_EVENTS",
    "STATUS_TRANSITIONS",
    "LifecycleEvent",
    "OperationStatus",
    "validate_transition",
    "AbstractManager",
    "AbstractOperation",
    "DoneCallback",
    "ExclusiveManager",
    "PermissiveManager",
    "SerialManager",
    "ManagerProtocol",
    "OperationProtocol",
    "Subscribable",
]
