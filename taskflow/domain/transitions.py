from __future__ import annotations

from enum import Enum

from .entities import Caller, TaskEntity
from .enums import TaskStatus


class Gate(Enum):
    OWNER = "owner"
    MANAGER = "manager"


class TransitionOutcome(Enum):
    ALLOWED = "allowed"
    ILLEGAL = "illegal"
    UNAUTHORIZED = "unauthorized"


TRANSITIONS: dict[tuple[TaskStatus, TaskStatus], Gate] = {
    (TaskStatus.CREATED, TaskStatus.IN_PROGRESS): Gate.OWNER,
    (TaskStatus.IN_PROGRESS, TaskStatus.RESOLVED): Gate.OWNER,
    (TaskStatus.RESOLVED, TaskStatus.IN_PROGRESS): Gate.MANAGER,
    (TaskStatus.RESOLVED, TaskStatus.DONE): Gate.MANAGER,
}


def gate_for(current: TaskStatus, requested: TaskStatus) -> Gate | None:
    return TRANSITIONS.get((current, requested))


def is_owner(caller: Caller, task: TaskEntity) -> bool:
    return caller.id is not None and caller.id == task.employee_id


def passes_gate(gate: Gate, caller: Caller, task: TaskEntity) -> bool:
    if gate is Gate.OWNER:
        return is_owner(caller, task)
    return caller.is_manager


def evaluate(task: TaskEntity, requested: TaskStatus, caller: Caller) -> TransitionOutcome:
    gate = gate_for(task.status, requested)
    if gate is None:
        return TransitionOutcome.ILLEGAL
    if not passes_gate(gate, caller, task):
        return TransitionOutcome.UNAUTHORIZED
    return TransitionOutcome.ALLOWED
