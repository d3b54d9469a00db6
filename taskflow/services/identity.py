from __future__ import annotations

from taskflow.domain.entities import Caller, Principal
from taskflow.domain.errors import AuthError
from taskflow.infra.repository import EmployeeRepository


def resolve_caller(employees: EmployeeRepository, principal: Principal | None) -> Caller:
    if principal is None:
        raise AuthError("No authenticated principal")
    if not isinstance(principal, Principal):
        raise AuthError(f"Unsupported principal type: {type(principal).__name__}")
    email = (principal.email or "").strip()
    if not email:
        raise AuthError("Principal carries no email")

    employee = employees.find_by_email_and_not_deleted(email)
    if employee is None:
        raise AuthError(f"No active employee for principal {email}")
    return Caller(employee=employee, roles=frozenset(principal.roles) | {employee.role})
