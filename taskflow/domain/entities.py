from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import MANAGER_ROLES, Priority, Role, TaskStatus


@dataclass(frozen=True)
class EmployeeEntity:
    id: int | None
    name: str
    surname: str
    email: str
    role: Role
    is_deleted: bool = False


@dataclass(frozen=True)
class TaskEntity:
    id: int | None
    title: str
    description: str
    priority: Priority
    status: TaskStatus
    employee_id: Optional[int]


@dataclass(frozen=True)
class TaskWorkflowEntry:
    id: int | None
    task_id: int
    status: TaskStatus
    updated_at: datetime
    updated_by: int


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as handed over by whatever fronts the engine.

    ``id`` is informational only. Ownership is decided by the employee resolved
    by ``email``, and that employee's role is added to ``roles``.
    """

    id: int | None
    email: str
    roles: frozenset[Role] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Caller:
    """A principal resolved to its employee record."""

    employee: EmployeeEntity
    roles: frozenset[Role]

    @property
    def id(self) -> int | None:
        return self.employee.id

    @property
    def is_manager(self) -> bool:
        return bool(self.roles & MANAGER_ROLES)


@dataclass(frozen=True)
class TaskWorkflowPayload:
    task_id: int
    status: TaskStatus


@dataclass(frozen=True)
class TaskWorkflowView:
    id: int | None
    task_id: int
    status: TaskStatus
    updated_at: datetime
    updated_by_id: int
    updated_by_email: str | None
