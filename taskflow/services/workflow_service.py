from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from taskflow.domain.entities import (
    Caller,
    EmployeeEntity,
    Principal,
    TaskEntity,
    TaskWorkflowEntry,
    TaskWorkflowPayload,
    TaskWorkflowView,
)
from taskflow.domain.enums import TaskStatus
from taskflow.domain.errors import BadRequestError, NotFoundError
from taskflow.domain.transitions import Gate, TransitionOutcome, evaluate, gate_for, is_owner
from taskflow.infra.models import utcnow
from taskflow.infra.notifications import NotificationSink
from taskflow.infra.unit_of_work import SqlAlchemyUnitOfWork

from .identity import resolve_caller

logger = logging.getLogger(__name__)


class TaskWorkflowService:
    def __init__(
        self,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork],
        notifier: NotificationSink,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._clock = clock

    def set_status(self, principal: Principal | None, payload: TaskWorkflowPayload) -> TaskWorkflowPayload:
        if payload is None or payload.status is None:
            raise BadRequestError("Task workflow input must not be null")
        try:
            requested = TaskStatus(payload.status)
        except ValueError as exc:
            raise BadRequestError(f"Unknown task status {payload.status!r}") from exc

        with self._uow_factory() as uow:
            task = uow.tasks.get(payload.task_id, for_update=True)
            if task is None:
                raise NotFoundError(f"Task with id {payload.task_id} was not found!")

            caller = resolve_caller(uow.employees, principal)
            previous = task.status
            self._check_transition(task, requested, caller)

            task = uow.tasks.save(replace(task, status=requested))
            uow.workflows.add(
                TaskWorkflowEntry(
                    id=None,
                    task_id=task.id,
                    status=requested,
                    updated_at=self._next_timestamp(uow, task.id),
                    updated_by=caller.id,
                )
            )
            owner = uow.employees.get_active(task.employee_id) if task.employee_id is not None else None
            uow.commit()

        logger.info(
            "Task %s moved %s -> %s by employee %s",
            task.id,
            previous.value,
            requested.value,
            caller.id,
        )
        if gate_for(previous, requested) is Gate.MANAGER:
            self._notify_owner(owner, task, previous)
        return TaskWorkflowPayload(task_id=task.id, status=task.status)

    def list_workflow_history(self, principal: Principal | None, task_id: int) -> list[TaskWorkflowView]:
        with self._uow_factory() as uow:
            task = uow.tasks.get(task_id)
            if task is None:
                raise NotFoundError(f"Task with id {task_id} was not found!")

            caller = resolve_caller(uow.employees, principal)
            if not (is_owner(caller, task) or caller.is_manager):
                logger.warning("Employee %s denied history of task %s", caller.id, task_id)
                raise BadRequestError("Only the task owner or a manager can view its workflow")

            entries = uow.workflows.list_by_task_id(task_id)
            emails: dict[int, str | None] = {}
            for entry in entries:
                if entry.updated_by not in emails:
                    employee = uow.employees.get(entry.updated_by)
                    emails[entry.updated_by] = employee.email if employee else None
            return [_to_view(entry, emails[entry.updated_by]) for entry in entries]

    def _check_transition(self, task: TaskEntity, requested: TaskStatus, caller: Caller) -> None:
        outcome = evaluate(task, requested, caller)
        if outcome is TransitionOutcome.ALLOWED:
            return
        logger.warning(
            "Rejected transition %s -> %s on task %s by employee %s (%s)",
            task.status.value,
            requested.value,
            task.id,
            caller.id,
            outcome.value,
        )
        if outcome is TransitionOutcome.ILLEGAL:
            raise BadRequestError(
                f"Cannot move task from {task.status.value} to {requested.value}",
                outcome=outcome,
            )
        raise BadRequestError(
            f"You are not allowed to move task from {task.status.value} to {requested.value}",
            outcome=outcome,
        )

    def _next_timestamp(self, uow: SqlAlchemyUnitOfWork, task_id: int) -> datetime:
        now = self._clock()
        last = uow.workflows.latest_for_task(task_id)
        if last is not None and last.updated_at > now:
            return last.updated_at
        return now

    def _notify_owner(self, owner: EmployeeEntity | None, task: TaskEntity, previous: TaskStatus) -> None:
        if owner is None:
            logger.info("Task %s has no active owner, skipping notification", task.id)
            return
        try:
            self._notifier.send(
                owner.email,
                "Task status updated",
                f"Task '{task.title}' was moved from {previous.value} to {task.status.value}.",
            )
        except Exception:  # noqa: BLE001
            logger.exception("Failed to notify %s about task %s", owner.email, task.id)


def _to_view(entry: TaskWorkflowEntry, updated_by_email: str | None) -> TaskWorkflowView:
    return TaskWorkflowView(
        id=entry.id,
        task_id=entry.task_id,
        status=entry.status,
        updated_at=entry.updated_at,
        updated_by_id=entry.updated_by,
        updated_by_email=updated_by_email,
    )
