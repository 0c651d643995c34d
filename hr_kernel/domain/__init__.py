"""
Pure domain layer.

This module contains pure value objects with NO dependencies on:
- The entity store
- Time/clock (except the injectable Clock itself)
- I/O

All domain objects are immutable and deterministic.
"""

from hr_kernel.domain.approval import (
    REQUEST_AMOUNT_FIELDS,
    REQUEST_STAGE_ROLES,
    TERMINAL_REQUEST_STATUSES,
    AccessLevel,
    ApprovalDecision,
    ApprovalRequest,
    ApproverRole,
    Principal,
    RequestStatus,
    RequestType,
    StageRecord,
    StageStatus,
)
from hr_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from hr_kernel.domain.collaborators import EntityCollection, EntityStore, SessionResolver
from hr_kernel.domain.employee import (
    Employee,
    PayrollRecord,
    is_saudi_nationality,
    parse_flag,
)
from hr_kernel.domain.gosi import GOSIContributionLine, GOSIReport, NationalityClass
from hr_kernel.domain.leave import LeaveBalance
from hr_kernel.domain.values import round_money, to_decimal

__all__ = [
    "REQUEST_AMOUNT_FIELDS",
    "REQUEST_STAGE_ROLES",
    "TERMINAL_REQUEST_STATUSES",
    "AccessLevel",
    "ApprovalDecision",
    "ApprovalRequest",
    "ApproverRole",
    "Principal",
    "RequestStatus",
    "RequestType",
    "StageRecord",
    "StageStatus",
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EntityCollection",
    "EntityStore",
    "SessionResolver",
    "Employee",
    "PayrollRecord",
    "is_saudi_nationality",
    "parse_flag",
    "GOSIContributionLine",
    "GOSIReport",
    "NationalityClass",
    "LeaveBalance",
    "round_money",
    "to_decimal",
]
