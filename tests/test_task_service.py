from __future__ import annotations

from datetime import datetime

import pytest

from taskflow.domain.enums import Priority, Role, TaskStatus
from taskflow.domain.errors import AuthError, BadRequestError, NotFoundError
from taskflow.services.task_service import TaskService

from fakes import as_principal

NOW = datetime(2026, 1, 15, 12, 0)


@pytest.fixture()
def service(store) -> TaskService:
    return TaskService(store.uow, clock=lambda: NOW)


def test_create_task_starts_in_created_with_history(service, store, owner, head) -> None:
    task = service.create_task(
        as_principal(head),
        {"title": "Onboard intern", "description": "Laptop and access", "priority": "high", "employee_id": owner.id},
    )

    assert task.status is TaskStatus.CREATED
    assert task.priority is Priority.HIGH
    assert task.employee_id == owner.id
    assert [(e.task_id, e.status, e.updated_by, e.updated_at) for e in store.workflows] == [
        (task.id, TaskStatus.CREATED, head.id, NOW)
    ]


def test_create_task_rejects_head_manager_assignee(service, store, head, hr) -> None:
    with pytest.raises(BadRequestError):
        service.create_task(as_principal(hr), {"title": "Plan", "employee_id": head.id})
    assert store.tasks == {}


def test_create_task_requires_existing_assignee(service, store, head) -> None:
    gone = store.add_employee("gone@example.com", Role.EMPLOYEE, is_deleted=True)

    with pytest.raises(NotFoundError):
        service.create_task(as_principal(head), {"title": "Plan", "employee_id": gone.id})
    with pytest.raises(NotFoundError):
        service.create_task(as_principal(head), {"title": "Plan", "employee_id": 12345})


@pytest.mark.parametrize(
    "data",
    [None, {}, {"title": "No assignee"}, {"title": "  ", "employee_id": 1}, {"title": "x", "employee_id": 1, "priority": "urgent"}],
)
def test_create_task_rejects_malformed_input(service, owner, head, data) -> None:
    with pytest.raises(BadRequestError):
        service.create_task(as_principal(head), data)


def test_create_task_needs_known_caller(service, owner) -> None:
    with pytest.raises(AuthError):
        service.create_task(None, {"title": "Plan", "employee_id": owner.id})


def test_update_task_edits_fields_but_not_status(service, store, make_task) -> None:
    task = make_task(TaskStatus.IN_PROGRESS)

    updated = service.update_task(task.id, {"title": "Prepare annual report", "priority": Priority.LOW})

    assert updated.title == "Prepare annual report"
    assert updated.priority is Priority.LOW
    assert updated.status is TaskStatus.IN_PROGRESS
    assert store.workflows == []

    with pytest.raises(BadRequestError):
        service.update_task(task.id, {"status": TaskStatus.DONE})


def test_update_missing_task_is_not_found(service) -> None:
    with pytest.raises(NotFoundError):
        service.update_task(404, {"title": "x"})


def test_delete_task_purges_history(service, store, owner, head) -> None:
    kept = service.create_task(as_principal(head), {"title": "Keep", "employee_id": owner.id})
    dropped = service.create_task(as_principal(head), {"title": "Drop", "employee_id": owner.id})

    service.delete_task(dropped.id)

    assert list(store.tasks) == [kept.id]
    assert [e.task_id for e in store.workflows] == [kept.id]
    with pytest.raises(NotFoundError):
        service.get_task(dropped.id)
    with pytest.raises(NotFoundError):
        service.delete_task(dropped.id)


@pytest.mark.parametrize("title", [None, "", "   "])
def test_update_task_rejects_blank_title(service, store, make_task, title) -> None:
    task = make_task(TaskStatus.CREATED)

    with pytest.raises(BadRequestError):
        service.update_task(task.id, {"title": title})

    assert store.tasks[task.id].title == "Prepare report"


def test_update_task_trims_title_and_clears_description(service, make_task) -> None:
    task = make_task(TaskStatus.CREATED)

    updated = service.update_task(task.id, {"title": "  Prepare summary  ", "description": None})

    assert updated.title == "Prepare summary"
    assert updated.description == ""
