"""
Typed Exception Hierarchy for the HR Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the front-end orchestration layer, notification toasts, API
responses) must be able to tell a "no payroll for that month" failure
apart from "you are not the approver for this stage" without parsing
message text.

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        report = compute_gosi_report(employees, payrolls, "2025-03")
    except NoPayrollDataError as e:
        show_alert(code=e.code, month=e.month)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    HRKernelError (base)
    |
    +-- GOSIError
    |   +-- NoPayrollDataError
    |   +-- InvalidReportMonthError
    |
    +-- ApprovalError
    |   +-- StageMismatchError
    |   +-- RejectionReasonRequiredError
    |   +-- RequestNotPendingError
    |   +-- InvalidRequestStateError
    |   +-- UnknownRequestTypeError
    |   +-- RequestNotFoundError
    |
    +-- AccessError
        +-- UnauthorizedActionError
        +-- NotDirectManagerError
        +-- EmployeeRecordNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                       | When Raised
-----------|----------------------------|------------------------------------------
GOSI       | NO_PAYROLL_DATA            | No payroll records for requested month
           | INVALID_REPORT_MONTH       | Month is not ``YYYY-MM``
-----------|----------------------------|------------------------------------------
Approval   | STAGE_MISMATCH             | Actor role != current_approver_role
           | REJECTION_REASON_REQUIRED  | Reject decision without comments
           | REQUEST_NOT_PENDING        | Decision on a terminal request
           | INVALID_REQUEST_STATE      | Status / approver role inconsistent
           | UNKNOWN_REQUEST_TYPE       | No approval chain for request type
           | REQUEST_NOT_FOUND          | Request ID not in the entity store
-----------|----------------------------|------------------------------------------
Access     | UNAUTHORIZED_ACTION        | Principal may not act at that stage
           | NOT_DIRECT_MANAGER         | Manager stage acted on by non-manager
           | EMPLOYEE_RECORD_NOT_FOUND  | Principal or requester has no employee record

All validation errors are raised BEFORE any state is changed.
"""


class HRKernelError(Exception):
    """
    Base exception for all HR kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "HR_KERNEL_ERROR"


# GOSI-related exceptions


class GOSIError(HRKernelError):
    """Base exception for GOSI calculation errors."""

    code: str = "GOSI_ERROR"


class NoPayrollDataError(GOSIError):
    """
    No payroll records matched the requested month.

    A zero-valued report is never produced in this case.
    """

    code: str = "NO_PAYROLL_DATA"

    def __init__(self, month: str, company_id: str | None = None):
        self.month = month
        self.company_id = company_id
        scope = f" for company {company_id}" if company_id else ""
        super().__init__(f"No payroll data found for {month}{scope}")


class InvalidReportMonthError(GOSIError):
    """Report month is not in ``YYYY-MM`` format."""

    code: str = "INVALID_REPORT_MONTH"

    def __init__(self, month: object):
        self.month = month
        super().__init__(f"Month must be in YYYY-MM format, got {month!r}")


# Approval-related exceptions


class ApprovalError(HRKernelError):
    """Base exception for approval routing errors."""

    code: str = "APPROVAL_ERROR"


class StageMismatchError(ApprovalError):
    """Acting role does not match the stage the request is awaiting."""

    code: str = "STAGE_MISMATCH"

    def __init__(
        self,
        request_id: str,
        actor_role: str,
        current_approver_role: str | None,
    ):
        self.request_id = request_id
        self.actor_role = actor_role
        self.current_approver_role = current_approver_role
        super().__init__(
            f"Request {request_id} is awaiting '{current_approver_role}', "
            f"not '{actor_role}'"
        )


class RejectionReasonRequiredError(ApprovalError):
    """A rejection was attempted without comments."""

    code: str = "REJECTION_REASON_REQUIRED"

    def __init__(self, request_id: str, stage: str):
        self.request_id = request_id
        self.stage = stage
        super().__init__(
            f"Comments are required to reject request {request_id} at stage '{stage}'"
        )


class RequestNotPendingError(ApprovalError):
    """Decision attempted on a request that already reached a terminal status."""

    code: str = "REQUEST_NOT_PENDING"

    def __init__(self, request_id: str, status: str):
        self.request_id = request_id
        self.status = status
        super().__init__(f"Request {request_id} is {status}, not pending")


class InvalidRequestStateError(ApprovalError):
    """Request status and current approver role are inconsistent."""

    code: str = "INVALID_REQUEST_STATE"

    def __init__(self, request_id: str, reason: str):
        self.request_id = request_id
        self.reason = reason
        super().__init__(f"Request {request_id} is in an invalid state: {reason}")


class UnknownRequestTypeError(ApprovalError):
    """No approval chain is registered for the request type."""

    code: str = "UNKNOWN_REQUEST_TYPE"

    def __init__(self, request_type: str):
        self.request_type = request_type
        super().__init__(f"No approval chain registered for request type '{request_type}'")


class RequestNotFoundError(ApprovalError):
    """Request ID does not exist in the entity store."""

    code: str = "REQUEST_NOT_FOUND"

    def __init__(self, request_type: str, request_id: str):
        self.request_type = request_type
        self.request_id = request_id
        super().__init__(f"{request_type} request not found: {request_id}")


# Access-related exceptions


class AccessError(HRKernelError):
    """Base exception for principal authorization errors."""

    code: str = "ACCESS_ERROR"


class UnauthorizedActionError(AccessError):
    """Principal is not permitted to perform the action."""

    code: str = "UNAUTHORIZED_ACTION"

    def __init__(self, action: str, user_id: str | None = None, reason: str = ""):
        self.action = action
        self.user_id = user_id
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Not authorized to {action}{detail}")


class NotDirectManagerError(AccessError):
    """Manager-stage decision by someone other than the requester's manager."""

    code: str = "NOT_DIRECT_MANAGER"

    def __init__(self, request_id: str, actor_employee_id: str | None, manager_id: str | None):
        self.request_id = request_id
        self.actor_employee_id = actor_employee_id
        self.manager_id = manager_id
        super().__init__(
            f"Only the direct manager can approve/reject request {request_id}"
        )


class EmployeeRecordNotFoundError(AccessError):
    """Employee record for the principal or the requester could not be found."""

    code: str = "EMPLOYEE_RECORD_NOT_FOUND"

    def __init__(self, reference: str | None):
        self.reference = reference
        super().__init__(f"Employee record not found: {reference}")
