"""
hr_engines.leave_balance -- Charge approved leave against a balance.

Pure, zero I/O.  Called once a leave request reaches final approval: the
request's days move from ``pending`` into ``used`` and come off
``remaining``.  ``pending`` never drops below zero; ``remaining`` may go
negative when leave was granted beyond the entitlement.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from hr_kernel.domain.leave import LeaveBalance
from hr_kernel.domain.values import ZERO


def apply_approved_leave(balance: LeaveBalance, days: Decimal) -> LeaveBalance:
    """New balance after ``days`` of approved leave.

    Raises:
        ValueError: ``days`` is negative.
    """
    if days < 0:
        raise ValueError(f"Approved leave days cannot be negative, got {days}")
    return replace(
        balance,
        used=balance.used + days,
        remaining=balance.remaining - days,
        pending=max(balance.pending - days, ZERO),
    )
