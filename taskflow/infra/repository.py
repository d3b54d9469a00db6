from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from taskflow.domain.entities import EmployeeEntity, TaskEntity, TaskWorkflowEntry
from taskflow.domain.enums import Priority, Role, TaskStatus

from .models import EmployeeModel, TaskModel, TaskWorkflowModel


def _to_employee(model: EmployeeModel) -> EmployeeEntity:
    return EmployeeEntity(
        id=model.id,
        name=model.name,
        surname=model.surname,
        email=model.email,
        role=Role(model.role),
        is_deleted=model.is_deleted,
    )


def _to_task(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        priority=Priority(model.priority),
        status=TaskStatus(model.status),
        employee_id=model.employee_id,
    )


def _to_entry(model: TaskWorkflowModel) -> TaskWorkflowEntry:
    return TaskWorkflowEntry(
        id=model.id,
        task_id=model.task_id,
        status=TaskStatus(model.status),
        updated_at=model.updated_at,
        updated_by=model.updated_by,
    )


def select_task(task_id: int, for_update: bool = False) -> Select:
    stmt = select(TaskModel).where(TaskModel.id == task_id)
    if for_update:
        stmt = stmt.with_for_update()
    return stmt


class EmployeeRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, employee_id: int) -> Optional[EmployeeEntity]:
        employee = self._session.get(EmployeeModel, employee_id)
        return _to_employee(employee) if employee else None

    def get_active(self, employee_id: int) -> Optional[EmployeeEntity]:
        stmt = select(EmployeeModel).where(
            EmployeeModel.id == employee_id,
            EmployeeModel.is_deleted.is_(False),
        )
        employee = self._session.scalars(stmt).first()
        return _to_employee(employee) if employee else None

    def find_by_email_and_not_deleted(self, email: str) -> Optional[EmployeeEntity]:
        stmt = select(EmployeeModel).where(
            EmployeeModel.email == email,
            EmployeeModel.is_deleted.is_(False),
        )
        employee = self._session.scalars(stmt).first()
        return _to_employee(employee) if employee else None

    def add(self, employee: EmployeeEntity) -> EmployeeEntity:
        model = EmployeeModel(
            name=employee.name,
            surname=employee.surname,
            email=employee.email,
            role=employee.role.value,
            is_deleted=employee.is_deleted,
        )
        self._session.add(model)
        self._session.flush()
        return _to_employee(model)


class TaskRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, task_id: int, for_update: bool = False) -> Optional[TaskEntity]:
        task = self._session.scalars(select_task(task_id, for_update)).first()
        return _to_task(task) if task else None

    def add(self, task: TaskEntity) -> TaskEntity:
        model = TaskModel(
            title=task.title,
            description=task.description,
            priority=task.priority.value,
            status=task.status.value,
            employee_id=task.employee_id,
        )
        self._session.add(model)
        self._session.flush()
        return _to_task(model)

    def save(self, task: TaskEntity) -> TaskEntity:
        model = self._session.get(TaskModel, task.id)
        if model is None:
            raise LookupError(f"Task {task.id} is not persisted")
        model.title = task.title
        model.description = task.description
        model.priority = task.priority.value
        model.status = task.status.value
        model.employee_id = task.employee_id
        self._session.flush()
        return _to_task(model)

    def delete(self, task_id: int) -> None:
        task = self._session.get(TaskModel, task_id)
        if not task:
            return
        self._session.delete(task)
        self._session.flush()


class TaskWorkflowRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_by_task_id(self, task_id: int) -> list[TaskWorkflowEntry]:
        stmt = (
            select(TaskWorkflowModel)
            .where(TaskWorkflowModel.task_id == task_id)
            .order_by(TaskWorkflowModel.id.asc())
        )
        return [_to_entry(entry) for entry in self._session.scalars(stmt)]

    def latest_for_task(self, task_id: int) -> Optional[TaskWorkflowEntry]:
        stmt = (
            select(TaskWorkflowModel)
            .where(TaskWorkflowModel.task_id == task_id)
            .order_by(TaskWorkflowModel.id.desc())
            .limit(1)
        )
        entry = self._session.scalars(stmt).first()
        return _to_entry(entry) if entry else None

    def add(self, entry: TaskWorkflowEntry) -> TaskWorkflowEntry:
        model = TaskWorkflowModel(
            task_id=entry.task_id,
            status=entry.status.value,
            updated_at=entry.updated_at,
            updated_by=entry.updated_by,
        )
        self._session.add(model)
        self._session.flush()
        return _to_entry(model)

    def delete_all(self, entries: Iterable[TaskWorkflowEntry]) -> None:
        ids = [entry.id for entry in entries if entry.id is not None]
        if not ids:
            return
        self._session.execute(delete(TaskWorkflowModel).where(TaskWorkflowModel.id.in_(ids)))
        self._session.flush()
