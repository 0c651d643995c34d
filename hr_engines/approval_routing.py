"""
hr_engines.approval_routing -- Pure multi-stage approval stage router.

Responsibility:
    Decide whether a leave, loan or travel request is awaiting a given
    role, and compute the request's next state after an approve/reject
    decision.  One chain table drives all three request types.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only hr_kernel domain types and hr_config schema dataclasses.

Invariants enforced:
    - Chains: leave = manager -> hr; travel = manager -> finance;
      loan = manager -> hr, plus senior_management when the amount
      exceeds ``loan_senior_management_threshold``.
    - The chain is fixed at submission and carried on the request; a
      later change to the amount never reroutes it.
    - ``advance`` acts only when the actor role equals the request's
      ``current_approver_role``; no other role may act, even one that
      can see the stage in its list.
    - Inputs are never mutated; a new frozen request is returned.
    - Purity: the decision date is passed in, never read from a clock.

Failure modes:
    - RequestNotPendingError: decision on a terminal request.
    - StageMismatchError: actor role is not the awaited role.
    - RejectionReasonRequiredError: reject without comments.
    - UnknownRequestTypeError: request type has no chain.
    All are raised before any new state is built.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from decimal import Decimal

from hr_config.schema import ApprovalRoutingConfig
from hr_kernel.domain.approval import (
    REQUEST_STAGE_ROLES,
    ApprovalDecision,
    ApprovalRequest,
    ApproverRole,
    Principal,
    RequestStatus,
    RequestType,
    StageRecord,
    StageStatus,
)
from hr_kernel.exceptions import (
    RejectionReasonRequiredError,
    RequestNotPendingError,
    StageMismatchError,
    UnknownRequestTypeError,
)
from hr_kernel.logging_config import get_logger
from hr_engines.tracer import traced_engine

logger = get_logger("engines.approval_routing")


BASE_APPROVAL_CHAINS: dict[RequestType, tuple[ApproverRole, ...]] = {
    RequestType.LEAVE: (ApproverRole.MANAGER, ApproverRole.HR),
    RequestType.TRAVEL: (ApproverRole.MANAGER, ApproverRole.FINANCE),
    RequestType.LOAN: (ApproverRole.MANAGER, ApproverRole.HR),
}

HIGH_VALUE_LOAN_STAGE = ApproverRole.SENIOR_MANAGEMENT


def _coerce_request_type(request_type: RequestType | str) -> RequestType:
    try:
        return RequestType(request_type)
    except ValueError:
        raise UnknownRequestTypeError(str(request_type)) from None


def determine_approval_chain(
    request_type: RequestType | str,
    amount: Decimal | None = None,
    config: ApprovalRoutingConfig | None = None,
) -> tuple[ApproverRole, ...]:
    """Ordered approval chain for a new request.

    Loans above the threshold get a final senior-management stage.
    """
    config = config or ApprovalRoutingConfig()
    request_type = _coerce_request_type(request_type)
    try:
        chain = BASE_APPROVAL_CHAINS[request_type]
    except KeyError:
        raise UnknownRequestTypeError(request_type.value) from None

    if (
        request_type == RequestType.LOAN
        and amount is not None
        and amount > config.loan_senior_management_threshold
    ):
        chain = chain + (HIGH_VALUE_LOAN_STAGE,)
    return chain


def recover_approval_chain(
    request_type: RequestType | str,
    amount: Decimal | None = None,
    current_approver_role: ApproverRole | str | None = None,
    config: ApprovalRoutingConfig | None = None,
) -> tuple[ApproverRole, ...]:
    """Chain for a stored request that predates ``approval_chain``.

    Starts from ``determine_approval_chain`` and adds the stage the record
    is waiting on if today's thresholds would have skipped it (older loans
    escalated at the threshold itself).
    """
    request_type = _coerce_request_type(request_type)
    chain = determine_approval_chain(request_type, amount, config)
    try:
        current = ApproverRole(current_approver_role)
    except ValueError:
        # null, blank or the legacy "completed" marker
        return chain
    if current in chain:
        return chain
    return tuple(
        role for role in REQUEST_STAGE_ROLES[request_type]
        if role in chain or role == current
    )


def submit_request(
    request_id: str,
    request_type: RequestType | str,
    employee_id: str,
    amount: Decimal | None = None,
    *,
    config: ApprovalRoutingConfig | None = None,
) -> ApprovalRequest:
    """Build a new pending request awaiting the first stage of its chain.

    Stages the request type can route through but this request will skip
    are marked ``not_required``.
    """
    request_type = _coerce_request_type(request_type)
    chain = determine_approval_chain(request_type, amount, config)

    stages: list[StageRecord] = []
    for role in REQUEST_STAGE_ROLES[request_type]:
        if role == chain[0]:
            stages.append(StageRecord(role=role, status=StageStatus.PENDING))
        elif role in chain:
            stages.append(StageRecord(role=role))
        else:
            stages.append(StageRecord(role=role, status=StageStatus.NOT_REQUIRED))

    request = ApprovalRequest(
        request_id=request_id,
        request_type=request_type,
        employee_id=employee_id,
        approval_chain=chain,
        status=RequestStatus.PENDING,
        current_approver_role=chain[0],
        amount=amount,
        stages=tuple(stages),
    )
    logger.info(
        "approval_request_submitted",
        extra={
            "request_id": request_id,
            "request_type": request_type.value,
            "approval_chain": [r.value for r in chain],
        },
    )
    return request


def is_awaiting_role(request: ApprovalRequest, role: ApproverRole | str) -> bool:
    """True iff the request is pending and awaits exactly ``role``."""
    try:
        role = ApproverRole(role)
    except ValueError:
        return False
    return request.is_pending and request.current_approver_role == role


def visible_stages(
    role: ApproverRole | str,
    config: ApprovalRoutingConfig | None = None,
) -> frozenset[ApproverRole]:
    """Stages surfaced in ``role``'s pending list (hr also sees senior management)."""
    config = config or ApprovalRoutingConfig()
    return config.visible_stages(ApproverRole(role))


def pending_for_role(
    requests: Iterable[ApprovalRequest],
    role: ApproverRole | str,
    config: ApprovalRoutingConfig | None = None,
) -> list[ApprovalRequest]:
    """Pending requests whose current stage is visible to ``role``."""
    stages = visible_stages(role, config)
    return [
        r for r in requests
        if r.is_pending and r.current_approver_role in stages
    ]


def authorized_stages(
    principal: Principal,
    config: ApprovalRoutingConfig | None = None,
) -> frozenset[ApproverRole]:
    """Stages a principal may act at.

    Anyone may act at the manager stage (the caller still checks they are
    the requester's direct manager).  Only admins act at the HR, finance
    and senior-management stages.
    """
    config = config or ApprovalRoutingConfig()
    if principal.is_admin:
        return config.admin_stages | {ApproverRole.MANAGER}
    return frozenset({ApproverRole.MANAGER})


def _with_stage(
    stages: tuple[StageRecord, ...],
    record: StageRecord,
) -> tuple[StageRecord, ...]:
    if any(s.role == record.role for s in stages):
        return tuple(record if s.role == record.role else s for s in stages)
    return stages + (record,)


@traced_engine("approval_routing", "1.0", fingerprint_fields=("decision", "actor_role"))
def advance(
    request: ApprovalRequest,
    decision: ApprovalDecision | str,
    actor_role: ApproverRole | str,
    comments: str | None = None,
    *,
    decided_on: date,
    decided_by: str | None = None,
) -> ApprovalRequest:
    """Apply an approve/reject decision at the request's current stage.

    Args:
        request: The request as freshly read by the caller.
        decision: ``approve`` or ``reject``.
        actor_role: Role the actor is acting as; must equal
            ``request.current_approver_role``.
        comments: Mandatory for rejection, optional for approval.
        decided_on: Date recorded as the stage's approval date.
        decided_by: Identity recorded on the stage (e.g. email).

    Returns:
        The request's new state.  The input is unchanged.
    """
    decision = ApprovalDecision(decision)
    current = request.current_approver_role

    if not request.is_pending:
        raise RequestNotPendingError(request.request_id, request.status.value)
    if not is_awaiting_role(request, actor_role):
        raise StageMismatchError(
            request.request_id,
            str(getattr(actor_role, "value", actor_role)),
            current.value if current else None,
        )

    stage_role = ApproverRole(actor_role)
    comments = (comments or "").strip()

    if decision == ApprovalDecision.REJECT:
        if not comments:
            raise RejectionReasonRequiredError(request.request_id, stage_role.value)
        stages = _with_stage(
            request.stages,
            StageRecord(
                role=stage_role,
                status=StageStatus.REJECTED,
                approval_date=decided_on,
                comments=comments,
                decided_by=decided_by,
            ),
        )
        updated = replace(
            request,
            status=RequestStatus.REJECTED,
            current_approver_role=None,
            stages=stages,
            rejection_reason=comments,
        )
        logger.info(
            "approval_request_rejected",
            extra={
                "request_id": request.request_id,
                "request_type": request.request_type.value,
                "stage": stage_role.value,
            },
        )
        return updated

    stages = _with_stage(
        request.stages,
        StageRecord(
            role=stage_role,
            status=StageStatus.APPROVED,
            approval_date=decided_on,
            comments=comments,
            decided_by=decided_by,
        ),
    )
    position = request.approval_chain.index(stage_role)

    if position == len(request.approval_chain) - 1:
        updated = replace(
            request,
            status=RequestStatus.APPROVED,
            current_approver_role=None,
            stages=stages,
        )
        logger.info(
            "approval_request_approved",
            extra={
                "request_id": request.request_id,
                "request_type": request.request_type.value,
                "final_stage": stage_role.value,
            },
        )
        return updated

    next_role = request.approval_chain[position + 1]
    stages = _with_stage(stages, StageRecord(role=next_role, status=StageStatus.PENDING))
    updated = replace(request, current_approver_role=next_role, stages=stages)
    logger.info(
        "approval_request_advanced",
        extra={
            "request_id": request.request_id,
            "request_type": request.request_type.value,
            "from_stage": stage_role.value,
            "to_stage": next_role.value,
        },
    )
    return updated
