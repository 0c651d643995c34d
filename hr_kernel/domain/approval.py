"""
Approval domain types (``hr_kernel.domain.approval``).

Responsibility
--------------
Pure value objects for multi-stage approval routing of leave, loan and
travel requests.  Defines the closed role/status/decision enums shared by
the router, the access filter and the services, the immutable request
snapshot, and its mapping to and from the entity store's flat
``{stage}_status`` / ``{stage}_approval_date`` / ``{stage}_comments`` shape.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``hr_config``, ``hr_engines`` or ``hr_services``.

Invariants enforced
-------------------
* While ``status == pending``, ``current_approver_role`` names exactly one
  role of the request's ``approval_chain``.
* ``current_approver_role`` is ``None`` iff the status is terminal.
* ``approval_chain`` is fixed when the request is submitted and travels
  with the record; it is never recomputed from a later amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from hr_kernel.domain.values import to_decimal
from hr_kernel.exceptions import InvalidRequestStateError


# =========================================================================
# Enumerations
# =========================================================================


class RequestType(str, Enum):
    """Request kinds routed through an approval chain."""

    LEAVE = "leave"
    LOAN = "loan"
    TRAVEL = "travel"

    @property
    def entity_name(self) -> str:
        """Entity-store collection holding this request type."""
        return _ENTITY_NAMES[self]


_ENTITY_NAMES = {
    RequestType.LEAVE: "LeaveRequest",
    RequestType.LOAN: "LoanRequest",
    RequestType.TRAVEL: "TravelRequest",
}


class ApproverRole(str, Enum):
    """Approval stages; each names the role whose decision is awaited."""

    MANAGER = "manager"
    HR = "hr"
    FINANCE = "finance"
    SENIOR_MANAGEMENT = "senior_management"


class RequestStatus(str, Enum):
    """Request lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_REQUEST_STATUSES: frozenset[RequestStatus] = frozenset({
    RequestStatus.APPROVED,
    RequestStatus.REJECTED,
    RequestStatus.COMPLETED,
    RequestStatus.CANCELLED,
})


class StageStatus(str, Enum):
    """Per-stage audit status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    NOT_REQUIRED = "not_required"


class ApprovalDecision(str, Enum):
    """Decision types that an approver can make."""

    APPROVE = "approve"
    REJECT = "reject"


class AccessLevel(str, Enum):
    """Access level of the acting principal."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


# Every stage a request type can ever pass through, in order.
REQUEST_STAGE_ROLES: dict[RequestType, tuple[ApproverRole, ...]] = {
    RequestType.LEAVE: (ApproverRole.MANAGER, ApproverRole.HR),
    RequestType.TRAVEL: (ApproverRole.MANAGER, ApproverRole.FINANCE),
    RequestType.LOAN: (
        ApproverRole.MANAGER,
        ApproverRole.HR,
        ApproverRole.SENIOR_MANAGEMENT,
    ),
}

# Entity field holding the routed amount, where the type has one.
REQUEST_AMOUNT_FIELDS: dict[RequestType, str] = {
    RequestType.LOAN: "amount_requested",
    RequestType.TRAVEL: "estimated_cost",
}

# Terminal marker written by older records instead of a null role.
_LEGACY_TERMINAL_ROLES = frozenset({"", "completed"})


# =========================================================================
# Request records
# =========================================================================


@dataclass(frozen=True)
class StageRecord:
    """Audit trail of one approval stage. Immutable."""

    role: ApproverRole
    status: StageStatus | None = None
    approval_date: date | None = None
    comments: str = ""
    decided_by: str | None = None


@dataclass(frozen=True)
class ApprovalRequest:
    """Immutable snapshot of a leave, loan or travel request's routing state."""

    request_id: str
    request_type: RequestType
    employee_id: str
    approval_chain: tuple[ApproverRole, ...]
    status: RequestStatus = RequestStatus.PENDING
    current_approver_role: ApproverRole | None = None
    amount: Decimal | None = None
    stages: tuple[StageRecord, ...] = ()
    rejection_reason: str | None = None

    def __post_init__(self) -> None:
        if not self.approval_chain:
            raise InvalidRequestStateError(self.request_id, "approval chain is empty")
        if self.status == RequestStatus.PENDING:
            if self.current_approver_role not in self.approval_chain:
                raise InvalidRequestStateError(
                    self.request_id,
                    f"pending request awaits '{_value(self.current_approver_role)}', "
                    f"which is not in chain {[r.value for r in self.approval_chain]}",
                )
        elif (
            self.status in TERMINAL_REQUEST_STATUSES
            and self.current_approver_role is not None
        ):
            raise InvalidRequestStateError(
                self.request_id,
                f"{self.status.value} request still names approver "
                f"'{self.current_approver_role.value}'",
            )

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def stage(self, role: ApproverRole) -> StageRecord | None:
        for record in self.stages:
            if record.role == role:
                return record
        return None

    def to_entity_fields(self) -> dict[str, Any]:
        """Flatten to the entity store's field layout for ``update``."""
        fields: dict[str, Any] = {
            "status": self.status.value,
            "current_approver_role": _value(self.current_approver_role),
            "approval_chain": [role.value for role in self.approval_chain],
            "rejection_reason": self.rejection_reason,
        }
        for record in self.stages:
            prefix = record.role.value
            fields[f"{prefix}_status"] = _value(record.status)
            fields[f"{prefix}_approval_date"] = (
                record.approval_date.isoformat() if record.approval_date else None
            )
            fields[f"{prefix}_comments"] = record.comments
            fields[f"{prefix}_approved_by"] = record.decided_by
        return fields

    @classmethod
    def from_entity(
        cls,
        request_type: RequestType,
        data: dict[str, Any],
        *,
        fallback_chain: tuple[ApproverRole, ...] | None = None,
    ) -> ApprovalRequest:
        """Parse an entity-store request record.

        ``fallback_chain`` is used only for records written before the
        chain was persisted.
        """
        request_id = str(data["id"])
        raw_chain = data.get("approval_chain")
        if raw_chain:
            chain = tuple(ApproverRole(role) for role in raw_chain)
        elif fallback_chain:
            chain = tuple(fallback_chain)
        else:
            raise InvalidRequestStateError(request_id, "record carries no approval chain")

        raw_role = data.get("current_approver_role")
        if raw_role is None or raw_role in _LEGACY_TERMINAL_ROLES:
            current = None
        else:
            current = ApproverRole(raw_role)

        amount_field = REQUEST_AMOUNT_FIELDS.get(request_type)
        amount = to_decimal(data.get(amount_field)) if amount_field else None

        stages = tuple(
            _parse_stage(role, data) for role in REQUEST_STAGE_ROLES[request_type]
        )
        return cls(
            request_id=request_id,
            request_type=request_type,
            employee_id=str(data["employee_id"]),
            approval_chain=chain,
            status=RequestStatus(data.get("status") or RequestStatus.PENDING.value),
            current_approver_role=current,
            amount=amount,
            stages=stages,
            rejection_reason=data.get("rejection_reason"),
        )


def _parse_stage(role: ApproverRole, data: dict[str, Any]) -> StageRecord:
    prefix = role.value
    raw_status = data.get(f"{prefix}_status")
    raw_date = data.get(f"{prefix}_approval_date")
    if isinstance(raw_date, str) and raw_date:
        approval_date = date.fromisoformat(raw_date[:10])
    elif isinstance(raw_date, date):
        approval_date = raw_date
    else:
        approval_date = None
    return StageRecord(
        role=role,
        status=StageStatus(raw_status) if raw_status else None,
        approval_date=approval_date,
        comments=data.get(f"{prefix}_comments") or "",
        decided_by=data.get(f"{prefix}_approved_by"),
    )


def _value(member: Enum | None) -> Any:
    return member.value if member is not None else None


# =========================================================================
# Acting principal
# =========================================================================


@dataclass(frozen=True)
class Principal:
    """The signed-in user acting on requests, as resolved by the session."""

    user_id: str
    access_level: AccessLevel
    email: str | None = None
    employee_id: str | None = None
    company_access: tuple[str, ...] = ()
    department_access: tuple[str, ...] = ()

    @property
    def is_admin(self) -> bool:
        return self.access_level == AccessLevel.ADMIN
