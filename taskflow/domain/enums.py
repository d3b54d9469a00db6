from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    DONE = "DONE"


class Priority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Role(StrEnum):
    EMPLOYEE = "EMPLOYEE"
    HEAD_MANAGER = "HEAD_MANAGER"
    HR_MANAGER = "HR_MANAGER"


MANAGER_ROLES = frozenset({Role.HEAD_MANAGER, Role.HR_MANAGER})
