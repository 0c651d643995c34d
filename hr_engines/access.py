"""
hr_engines.access -- Role-based visibility of approval requests.

Responsibility:
    Narrow a request list to what the acting principal may see:

    * admin     -- everything, restricted to ``company_access`` (or else
                   ``department_access``) when either is set;
    * manager   -- own requests plus direct reports' requests;
    * employee  -- own requests only.

    Optional equality filters on status, employee and current approver
    role are applied afterwards.

Architecture position:
    Engines -- pure, zero I/O.

Failure modes:
    - EmployeeRecordNotFoundError for a non-admin principal with no
      linked employee record.
"""

from __future__ import annotations

from collections.abc import Iterable

from hr_kernel.domain.approval import (
    AccessLevel,
    ApprovalRequest,
    ApproverRole,
    Principal,
    RequestStatus,
)
from hr_kernel.domain.employee import Employee
from hr_kernel.exceptions import EmployeeRecordNotFoundError


def _principal_employee(
    principal: Principal,
    employees: Iterable[Employee],
) -> Employee | None:
    for employee in employees:
        if principal.employee_id and employee.id == principal.employee_id:
            return employee
        if principal.email and employee.email == principal.email:
            return employee
    return None


def access_level_for(
    principal: Principal,
    employees: Iterable[Employee],
) -> AccessLevel:
    """Effective access level: admins stay admin, anyone with reports is a manager."""
    if principal.is_admin:
        return AccessLevel.ADMIN
    employees = list(employees)
    me = _principal_employee(principal, employees)
    if me is None:
        raise EmployeeRecordNotFoundError(principal.user_id)
    if any(e.manager_id == me.id for e in employees):
        return AccessLevel.MANAGER
    return AccessLevel.EMPLOYEE


def filter_accessible_requests(
    requests: Iterable[ApprovalRequest],
    employees: Iterable[Employee],
    principal: Principal,
    *,
    status: RequestStatus | str | None = None,
    employee_id: str | None = None,
    current_approver_role: ApproverRole | str | None = None,
) -> list[ApprovalRequest]:
    """Requests ``principal`` may see, optionally narrowed by equality filters."""
    employees = list(employees)

    if principal.is_admin:
        visible = list(requests)
        if principal.company_access:
            allowed = {e.id for e in employees if e.company_id in principal.company_access}
            visible = [r for r in visible if r.employee_id in allowed]
        elif principal.department_access:
            allowed = {e.id for e in employees if e.department in principal.department_access}
            visible = [r for r in visible if r.employee_id in allowed]
    else:
        me = _principal_employee(principal, employees)
        if me is None:
            raise EmployeeRecordNotFoundError(principal.user_id)
        allowed = {me.id} | {e.id for e in employees if e.manager_id == me.id}
        visible = [r for r in requests if r.employee_id in allowed]

    if status is not None:
        wanted_status = RequestStatus(status)
        visible = [r for r in visible if r.status == wanted_status]
    if employee_id is not None:
        visible = [r for r in visible if r.employee_id == employee_id]
    if current_approver_role is not None:
        wanted_role = ApproverRole(current_approver_role)
        visible = [r for r in visible if r.current_approver_role == wanted_role]
    return visible
