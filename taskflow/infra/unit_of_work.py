from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.orm import Session

from .db import SessionLocal
from .repository import EmployeeRepository, TaskRepository, TaskWorkflowRepository

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """One session, one transaction. Rolled back unless ``commit()`` was called."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.employees = EmployeeRepository(self._session)
        self.tasks = TaskRepository(self._session)
        self.workflows = TaskWorkflowRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                logger.debug("Rolling back unit of work after %s", exc_type.__name__)
            self.rollback()
        finally:
            self._session.close()
            self._session = None

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
