"""
GOSI report value objects (``hr_kernel.domain.gosi``).

Responsibility
--------------
Frozen result types produced by the GOSI contribution calculator: one
line per contributing employee and the monthly aggregate report.

Invariants enforced
-------------------
* Line items keep full ``Decimal`` precision.
* Report monetary fields are rounded to 2 decimal places.
* ``total_contribution == total_employee_contribution + total_employer_contribution``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


class NationalityClass(str, Enum):
    """Contribution class an employee falls under."""

    SAUDI = "saudi"
    NON_SAUDI = "non_saudi"


@dataclass(frozen=True)
class GOSIContributionLine:
    """Contributions for one employee in one month (full precision)."""

    employee_id: str
    nationality_class: NationalityClass
    gosi_base: Decimal
    employee_share: Decimal
    employer_share: Decimal
    hazards: Decimal
    saned: Decimal
    employee_name: str = ""
    employee_number: str | None = None
    national_id: str | None = None
    gosi_number: str | None = None
    nationality: str | None = None

    @property
    def is_saudi(self) -> bool:
        return self.nationality_class == NationalityClass.SAUDI

    @property
    def total(self) -> Decimal:
        return self.employee_share + self.employer_share + self.hazards


@dataclass(frozen=True)
class GOSIReport:
    """Monthly GOSI contribution report."""

    report_month: str
    total_employees: int
    saudi_employees: int
    non_saudi_employees: int
    total_wages: Decimal
    total_employee_contribution: Decimal
    total_employer_contribution: Decimal
    occupational_hazards: Decimal
    saned_contribution: Decimal
    total_contribution: Decimal
    due_date: date
    company_id: str | None = None
    employee_details: tuple[GOSIContributionLine, ...] = ()
    unmatched_employee_ids: tuple[str, ...] = ()
    not_applicable_employee_ids: tuple[str, ...] = ()

    @property
    def saudi_details(self) -> tuple[GOSIContributionLine, ...]:
        return tuple(line for line in self.employee_details if line.is_saudi)

    @property
    def non_saudi_details(self) -> tuple[GOSIContributionLine, ...]:
        return tuple(line for line in self.employee_details if not line.is_saudi)

    def to_entity_fields(self) -> dict[str, Any]:
        """Record persisted to the ``GOSIReport`` entity collection."""
        return {
            "report_month": self.report_month,
            "company_id": self.company_id,
            "report_type": "monthly_contribution",
            "total_employees": self.total_employees,
            "saudi_employees": self.saudi_employees,
            "non_saudi_employees": self.non_saudi_employees,
            "total_wages": str(self.total_wages),
            "total_employee_contribution": str(self.total_employee_contribution),
            "total_employer_contribution": str(self.total_employer_contribution),
            "total_contribution": str(self.total_contribution),
            "occupational_hazards": str(self.occupational_hazards),
            "saned_contribution": str(self.saned_contribution),
            "status": "generated",
            "due_date": self.due_date.isoformat(),
            "payment_status": "pending",
            "unmatched_employee_ids": list(self.unmatched_employee_ids),
        }
