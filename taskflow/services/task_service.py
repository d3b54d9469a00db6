from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from taskflow.domain.entities import Principal, TaskEntity, TaskWorkflowEntry
from taskflow.domain.enums import Priority, Role, TaskStatus
from taskflow.domain.errors import BadRequestError, NotFoundError
from taskflow.infra.models import utcnow
from taskflow.infra.unit_of_work import SqlAlchemyUnitOfWork

from .identity import resolve_caller

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "priority")


class TaskService:
    def __init__(
        self,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork],
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def get_task(self, task_id: int) -> TaskEntity:
        with self._uow_factory() as uow:
            task = uow.tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task with id {task_id} was not found!")
        return task

    def create_task(self, principal: Principal | None, data: dict | None) -> TaskEntity:
        if not data:
            raise BadRequestError("Task input must not be null!")
        employee_id = data.get("employee_id")
        if employee_id is None:
            raise BadRequestError("Employee ID must not be null!")
        title = self._normalize_title(data.get("title"))
        priority = self._normalize_priority(data.get("priority", Priority.MEDIUM))

        with self._uow_factory() as uow:
            assignee = uow.employees.get_active(employee_id)
            if assignee is None:
                raise NotFoundError(f"Employee with ID {employee_id} doesn't exist!")
            if assignee.role is Role.HEAD_MANAGER:
                raise BadRequestError("Cannot assign tasks to HEAD_MANAGER.")

            caller = resolve_caller(uow.employees, principal)
            task = uow.tasks.add(
                TaskEntity(
                    id=None,
                    title=title,
                    description=data.get("description") or "",
                    priority=priority,
                    status=TaskStatus.CREATED,
                    employee_id=assignee.id,
                )
            )
            uow.workflows.add(
                TaskWorkflowEntry(
                    id=None,
                    task_id=task.id,
                    status=TaskStatus.CREATED,
                    updated_at=self._clock(),
                    updated_by=caller.id,
                )
            )
            uow.commit()

        logger.info("Task %s created for employee %s by %s", task.id, assignee.id, caller.id)
        return task

    def update_task(self, task_id: int, data: dict | None) -> TaskEntity:
        if not data:
            raise BadRequestError("Task input must not be null")
        if "status" in data:
            raise BadRequestError("Task status can only be changed through the workflow")
        unknown = set(data) - set(EDITABLE_FIELDS)
        if unknown:
            raise BadRequestError(f"Unsupported task fields: {', '.join(sorted(unknown))}")

        changes = dict(data)
        if "title" in changes:
            changes["title"] = self._normalize_title(changes["title"])
        if "description" in changes:
            changes["description"] = changes["description"] or ""
        if "priority" in changes:
            changes["priority"] = self._normalize_priority(changes["priority"])

        with self._uow_factory() as uow:
            task = uow.tasks.get(task_id, for_update=True)
            if task is None:
                raise NotFoundError(f"Task with id {task_id} was not found!")
            task = uow.tasks.save(replace(task, **changes))
            uow.commit()
        return task

    def delete_task(self, task_id: int) -> TaskEntity:
        with self._uow_factory() as uow:
            task = uow.tasks.get(task_id, for_update=True)
            if task is None:
                raise NotFoundError(f"Task with ID {task_id} doesn't exist!")
            history = uow.workflows.list_by_task_id(task_id)
            uow.workflows.delete_all(history)
            uow.tasks.delete(task_id)
            uow.commit()

        logger.info("Task %s deleted with %d workflow entries", task_id, len(history))
        return task

    @staticmethod
    def _normalize_title(value: object) -> str:
        title = str(value or "").strip()
        if not title:
            raise BadRequestError("Task title must not be empty")
        return title

    @staticmethod
    def _normalize_priority(value: object) -> Priority:
        if isinstance(value, Priority):
            return value
        try:
            return Priority(str(value).upper())
        except ValueError as exc:
            raise BadRequestError(f"Unknown priority {value!r}") from exc
