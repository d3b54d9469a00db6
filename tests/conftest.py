from __future__ import annotations

import os

# A developer .env or .env.<APP_ENV> must never point the suite at a real database
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest  # noqa: E402

from taskflow.domain.entities import EmployeeEntity, TaskEntity  # noqa: E402
from taskflow.domain.enums import Priority, Role, TaskStatus  # noqa: E402

from fakes import FakeStore, RecordingSink  # noqa: E402


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def owner(store: FakeStore) -> EmployeeEntity:
    return store.add_employee("owner@example.com", Role.EMPLOYEE)


@pytest.fixture()
def colleague(store: FakeStore) -> EmployeeEntity:
    return store.add_employee("colleague@example.com", Role.EMPLOYEE)


@pytest.fixture()
def head(store: FakeStore) -> EmployeeEntity:
    return store.add_employee("head@example.com", Role.HEAD_MANAGER)


@pytest.fixture()
def hr(store: FakeStore) -> EmployeeEntity:
    return store.add_employee("hr@example.com", Role.HR_MANAGER)


@pytest.fixture()
def make_task(store: FakeStore, owner: EmployeeEntity):
    def _make(status: TaskStatus = TaskStatus.CREATED, employee: EmployeeEntity | None = None) -> TaskEntity:
        assignee = employee or owner
        return store.add_task(
            TaskEntity(
                id=None,
                title="Prepare report",
                description="Quarterly numbers",
                priority=Priority.HIGH,
                status=status,
                employee_id=assignee.id,
            )
        )

    return _make
