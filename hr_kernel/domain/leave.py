"""
Leave balance value object (``hr_kernel.domain.leave``).

One ``LeaveBalance`` entity per employee, leave type and calendar year,
holding ``used`` / ``remaining`` / ``pending`` day counts.  Day counts are
``Decimal`` because half days exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from hr_kernel.domain.values import ZERO, to_decimal


@dataclass(frozen=True)
class LeaveBalance:
    id: str
    employee_id: str
    leave_type: str
    year: int
    used: Decimal = ZERO
    remaining: Decimal = ZERO
    pending: Decimal = ZERO

    @classmethod
    def from_entity(cls, data: dict[str, Any]) -> LeaveBalance:
        return cls(
            id=str(data["id"]),
            employee_id=str(data["employee_id"]),
            leave_type=str(data["leave_type"]),
            year=int(data["year"]),
            used=to_decimal(data.get("used")) or ZERO,
            remaining=to_decimal(data.get("remaining")) or ZERO,
            pending=to_decimal(data.get("pending")) or ZERO,
        )

    def to_entity_fields(self) -> dict[str, Any]:
        """Day counts for ``update``; whole numbers are written as ``int``."""
        return {
            "used": _as_number(self.used),
            "remaining": _as_number(self.remaining),
            "pending": _as_number(self.pending),
        }


def _as_number(days: Decimal) -> int | str:
    if days == days.to_integral_value():
        return int(days)
    return str(days)
