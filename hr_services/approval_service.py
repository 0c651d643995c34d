"""
hr_services.approval_service -- Approval decisions against the entity store.

Responsibility:
    Thin orchestration around the pure approval router: submit new
    leave/loan/travel requests, record approve/reject decisions, and list
    the requests a principal may see or act on.

Architecture position:
    Services.  May import hr_kernel, hr_config and hr_engines.  All
    routing decisions are delegated to ``hr_engines.approval_routing``.

Invariants enforced:
    - The request is re-read from the store immediately before every
      decision; the router never acts on a caller-held copy.
    - Manager-stage decisions are accepted only from the requester's
      direct manager.
    - HR / finance / senior-management decisions are accepted only from
      admin principals.
    - Each decision is written back with a single ``update`` call on the
      request.  Final approval of a leave request additionally charges the
      requested days to the employee's ``LeaveBalance`` for the year.
    - Listings skip (and log) stored records whose routing state cannot
      be reconstructed, so one bad record never hides the rest.

Failure modes:
    - UnauthorizedActionError: no principal, or role outside the
      principal's authorized stages.
    - RequestNotFoundError: request ID not in the store.
    - NotDirectManagerError / EmployeeRecordNotFoundError: manager check.
    - Router errors (StageMismatchError, RejectionReasonRequiredError,
      RequestNotPendingError) propagate unchanged; nothing is written.
"""

from __future__ import annotations

from typing import Any

from hr_config import get_active_config
from hr_config.schema import ApprovalRoutingConfig
from hr_kernel.domain.approval import (
    REQUEST_AMOUNT_FIELDS,
    ApprovalDecision,
    ApprovalRequest,
    ApproverRole,
    Principal,
    RequestStatus,
    RequestType,
)
from hr_kernel.domain.clock import Clock, SystemClock
from hr_kernel.domain.collaborators import EntityStore, SessionResolver
from hr_kernel.domain.employee import Employee
from hr_kernel.domain.leave import LeaveBalance
from hr_kernel.domain.values import to_decimal
from hr_kernel.exceptions import (
    EmployeeRecordNotFoundError,
    InvalidRequestStateError,
    NotDirectManagerError,
    RequestNotFoundError,
    UnauthorizedActionError,
)
from hr_kernel.logging_config import LogContext, get_logger
from hr_engines.access import filter_accessible_requests
from hr_engines.approval_routing import (
    advance,
    authorized_stages,
    is_awaiting_role,
    pending_for_role,
    recover_approval_chain,
    submit_request,
)
from hr_engines.leave_balance import apply_approved_leave

logger = get_logger("services.approval")

EMPLOYEE_ENTITY = "Employee"
LEAVE_BALANCE_ENTITY = "LeaveBalance"


class ApprovalService:
    """Submits requests and records approval decisions."""

    def __init__(
        self,
        store: EntityStore,
        sessions: SessionResolver,
        clock: Clock | None = None,
        config: ApprovalRoutingConfig | None = None,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self._clock = clock or SystemClock()
        self._config = config or get_active_config().approvals

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _principal(self, action: str) -> Principal:
        principal = self._sessions.current_principal()
        if principal is None:
            raise UnauthorizedActionError(action, reason="no signed-in user")
        return principal

    def _parse(self, request_type: RequestType, data: dict[str, Any]) -> ApprovalRequest:
        fallback = None
        if not data.get("approval_chain"):
            amount_field = REQUEST_AMOUNT_FIELDS.get(request_type)
            amount = to_decimal(data.get(amount_field)) if amount_field else None
            fallback = recover_approval_chain(
                request_type, amount, data.get("current_approver_role"), self._config
            )
        return ApprovalRequest.from_entity(request_type, data, fallback_chain=fallback)

    def _fetch(self, request_type: RequestType, request_id: str) -> dict[str, Any]:
        records = self._store.collection(request_type.entity_name).list({"id": request_id})
        if not records:
            raise RequestNotFoundError(request_type.value, request_id)
        return records[0]

    def _load_all(self, request_type: RequestType) -> list[ApprovalRequest]:
        """Every parseable request; inconsistent records are logged and skipped."""
        requests: list[ApprovalRequest] = []
        for data in self._store.collection(request_type.entity_name).list():
            try:
                requests.append(self._parse(request_type, data))
            except InvalidRequestStateError as exc:
                logger.warning(
                    "approval_request_unreadable",
                    extra={
                        "request_type": request_type.value,
                        "record_id": exc.request_id,
                        "reason": exc.reason,
                    },
                )
        return requests

    def _charge_leave_balance(self, request: ApprovalRequest, data: dict[str, Any]) -> None:
        days = to_decimal(data.get("total_days"))
        filters = {
            "employee_id": request.employee_id,
            "leave_type": data.get("leave_type"),
            "year": self._clock.today().year,
        }
        balances = self._store.collection(LEAVE_BALANCE_ENTITY).list(filters)
        if days is None or not balances:
            logger.warning(
                "leave_balance_not_updated",
                extra={**filters, "total_days": days, "balance_found": bool(balances)},
            )
            return

        balance = apply_approved_leave(LeaveBalance.from_entity(balances[0]), days)
        self._store.collection(LEAVE_BALANCE_ENTITY).update(
            balance.id, balance.to_entity_fields()
        )
        logger.info(
            "leave_balance_charged",
            extra={
                "balance_id": balance.id,
                "total_days": days,
                "remaining": balance.remaining,
            },
        )

    def _employees(self, filters: dict[str, Any] | None = None) -> list[Employee]:
        records = self._store.collection(EMPLOYEE_ENTITY).list(filters)
        return [Employee.from_entity(data) for data in records]

    def _actor_employee_id(self, principal: Principal) -> str | None:
        if principal.employee_id:
            return principal.employee_id
        if principal.email:
            matches = self._employees({"email": principal.email})
            if matches:
                return matches[0].id
        return None

    def _check_direct_manager(self, principal: Principal, request: ApprovalRequest) -> None:
        requesters = self._employees({"id": request.employee_id})
        if not requesters:
            raise EmployeeRecordNotFoundError(request.employee_id)
        manager_id = requesters[0].manager_id
        actor_id = self._actor_employee_id(principal)
        if actor_id is None or actor_id != manager_id:
            raise NotDirectManagerError(request.request_id, actor_id, manager_id)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def submit(self, request_type: RequestType | str, data: dict[str, Any]) -> ApprovalRequest:
        """Create a pending request on behalf of the signed-in employee.

        ``data`` carries the request's own fields (dates, amounts,
        purpose); routing fields are filled in here.
        """
        request_type = RequestType(request_type)
        principal = self._principal(f"submit {request_type.value} requests")
        employee_id = data.get("employee_id") or principal.employee_id
        if not employee_id:
            raise EmployeeRecordNotFoundError(principal.user_id)
        if not principal.is_admin and str(employee_id) != principal.employee_id:
            raise UnauthorizedActionError(
                f"submit {request_type.value} requests for another employee",
                principal.user_id,
            )

        amount_field = REQUEST_AMOUNT_FIELDS.get(request_type)
        amount = to_decimal(data.get(amount_field)) if amount_field else None

        # The store assigns the id, so the routing fields are built first.
        draft = submit_request("", request_type, str(employee_id), amount, config=self._config)
        created = self._store.collection(request_type.entity_name).create(
            {**data, "employee_id": str(employee_id), **draft.to_entity_fields()}
        )
        request = self._parse(request_type, created)
        logger.info(
            "approval_request_created",
            extra={
                "request_id": request.request_id,
                "request_type": request_type.value,
                "employee_id": request.employee_id,
                "current_approver_role": request.current_approver_role.value,
            },
        )
        return request

    def decide(
        self,
        request_type: RequestType | str,
        request_id: str,
        decision: ApprovalDecision | str,
        actor_role: ApproverRole | str,
        comments: str | None = None,
    ) -> ApprovalRequest:
        """Record the signed-in principal's decision at ``actor_role``'s stage."""
        request_type = RequestType(request_type)
        role = ApproverRole(actor_role)
        principal = self._principal(f"act at the {role.value} stage")

        if role not in authorized_stages(principal, self._config):
            raise UnauthorizedActionError(
                f"act at the {role.value} stage",
                principal.user_id,
                reason=f"{principal.access_level.value} users cannot act at this stage",
            )

        with LogContext.bind(actor_id=principal.user_id, request_id=request_id):
            data = self._fetch(request_type, request_id)
            request = self._parse(request_type, data)
            if role == ApproverRole.MANAGER and is_awaiting_role(request, role):
                self._check_direct_manager(principal, request)

            updated = advance(
                request,
                decision,
                role,
                comments,
                decided_on=self._clock.today(),
                decided_by=principal.email or principal.user_id,
            )
            self._store.collection(request_type.entity_name).update(
                request_id, updated.to_entity_fields()
            )
            if (
                request_type == RequestType.LEAVE
                and updated.status == RequestStatus.APPROVED
            ):
                self._charge_leave_balance(updated, data)
            logger.info(
                "approval_decision_recorded",
                extra={
                    "request_type": request_type.value,
                    "decision": ApprovalDecision(decision).value,
                    "stage": role.value,
                    "status": updated.status.value,
                    "next_approver_role": (
                        updated.current_approver_role.value
                        if updated.current_approver_role else None
                    ),
                },
            )
            return updated

    def list_requests(
        self,
        request_type: RequestType | str,
        **filters: Any,
    ) -> list[ApprovalRequest]:
        """Requests of ``request_type`` visible to the signed-in principal."""
        request_type = RequestType(request_type)
        principal = self._principal(f"list {request_type.value} requests")
        return filter_accessible_requests(
            self._load_all(request_type),
            self._employees(),
            principal,
            **filters,
        )

    def pending_for(
        self,
        request_type: RequestType | str,
        actor_role: ApproverRole | str,
    ) -> list[ApprovalRequest]:
        """Pending requests surfaced in ``actor_role``'s approval queue."""
        role = ApproverRole(actor_role)
        principal = self._principal(f"view the {role.value} queue")
        if role not in authorized_stages(principal, self._config):
            raise UnauthorizedActionError(f"view the {role.value} queue", principal.user_id)

        requests = pending_for_role(self.list_requests(request_type), role, self._config)
        if role == ApproverRole.MANAGER:
            # Only direct reports' requests await this principal as manager.
            actor_id = self._actor_employee_id(principal)
            reports = {e.id for e in self._employees() if actor_id and e.manager_id == actor_id}
            requests = [r for r in requests if r.employee_id in reports]
        return requests
