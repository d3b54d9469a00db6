from __future__ import annotations

import argparse
import logging
import sys

from taskflow.config import SETTINGS
from taskflow.domain.entities import Principal, TaskWorkflowPayload
from taskflow.domain.errors import TaskflowError
from taskflow.infra.db import create_schema, init_db
from taskflow.infra.logging import setup_logging
from taskflow.infra.notifications import BackgroundNotificationSink, build_notification_sink
from taskflow.infra.unit_of_work import SqlAlchemyUnitOfWork
from taskflow.services.workflow_service import TaskWorkflowService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskflow", description="Task workflow engine")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables on the configured database")

    set_status = sub.add_parser("set-status", help="move a task to another status")
    set_status.add_argument("--as", dest="caller", required=True, help="caller email")
    set_status.add_argument("task_id", type=int)
    set_status.add_argument("status")

    history = sub.add_parser("history", help="show the workflow history of a task")
    history.add_argument("--as", dest="caller", required=True, help="caller email")
    history.add_argument("task_id", type=int)
    return parser


def run(args: argparse.Namespace, service: TaskWorkflowService) -> int:
    if args.command == "init-db":
        create_schema()
        print("Schema created")
        return 0

    principal = Principal(id=None, email=args.caller)
    if args.command == "set-status":
        result = service.set_status(
            principal,
            TaskWorkflowPayload(task_id=args.task_id, status=args.status.upper()),
        )
        print(f"Task {result.task_id}: {result.status.value}")
        return 0

    for entry in service.list_workflow_history(principal, args.task_id):
        print(
            f"{entry.updated_at:%Y-%m-%d %H:%M:%S}  {entry.status.value:<12} "
            f"{entry.updated_by_email or entry.updated_by_id}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.error("Database is not reachable: %s", exc)
        print(f"DB error: {exc}", file=sys.stderr)
        return 2

    notifier = build_notification_sink(SETTINGS)
    service = TaskWorkflowService(SqlAlchemyUnitOfWork, notifier)
    try:
        return run(args, service)
    except TaskflowError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    finally:
        # pending notifications are flushed before the process exits
        if isinstance(notifier, BackgroundNotificationSink):
            notifier.close()


if __name__ == "__main__":
    sys.exit(main())
