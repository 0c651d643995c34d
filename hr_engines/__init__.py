"""
Module: hr_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines: GOSI contributions, GOSI report text, approval
    stage routing, and request visibility.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import hr_kernel domain types and hr_config schema dataclasses.
    MUST NOT import hr_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in by the caller.
    - Decimal-only arithmetic for money.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from hr_engines.gosi import compute_gosi_report
    from hr_engines.approval_routing import advance, is_awaiting_role
"""

from hr_engines.access import access_level_for, filter_accessible_requests
from hr_engines.approval_routing import (
    BASE_APPROVAL_CHAINS,
    advance,
    authorized_stages,
    determine_approval_chain,
    is_awaiting_role,
    pending_for_role,
    recover_approval_chain,
    submit_request,
    visible_stages,
)
from hr_engines.gosi import (
    cap_contribution_base,
    classify_nationality,
    compute_contribution_line,
    compute_gosi_report,
    contribution_due_date,
)
from hr_engines.gosi_report import render_gosi_report_text
from hr_engines.leave_balance import apply_approved_leave

__all__ = [
    "access_level_for",
    "filter_accessible_requests",
    "BASE_APPROVAL_CHAINS",
    "advance",
    "authorized_stages",
    "determine_approval_chain",
    "is_awaiting_role",
    "pending_for_role",
    "recover_approval_chain",
    "submit_request",
    "visible_stages",
    "cap_contribution_base",
    "classify_nationality",
    "compute_contribution_line",
    "compute_gosi_report",
    "contribution_due_date",
    "render_gosi_report_text",
    "apply_approved_leave",
]
