"""
Employee and payroll value objects (``hr_kernel.domain.employee``).

Responsibility
--------------
Frozen snapshots of the Employee and Payroll entities as fetched from the
entity store, reduced to the fields the GOSI calculator and the approval
router read.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Nationality is compared case-insensitively; blank/missing is non-Saudi.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from hr_kernel.domain.values import ZERO, to_decimal

SAUDI_NATIONALITIES: frozenset[str] = frozenset({"saudi arabia", "saudi"})


_TRUE_STRINGS = frozenset({"true", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "0"})


def parse_flag(value: Any, default: bool) -> bool:
    """Read a boolean entity field that may arrive as a bool, 0/1 or a string.

    ``None`` and blank strings give ``default`` (records that predate the
    field).

    Raises:
        ValueError: for any other value.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().casefold()
        if not text:
            return default
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"Cannot read {value!r} as a boolean flag")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


@dataclass(frozen=True)
class Employee:
    """An employee record as relevant to GOSI and approval routing."""

    id: str
    nationality: str | None = None
    gosi_applicable: bool = True
    basic_salary: Decimal | None = None
    gross_salary: Decimal | None = None
    manager_id: str | None = None
    first_name: str = ""
    last_name: str = ""
    employee_number: str | None = None
    national_id: str | None = None
    gosi_number: str | None = None
    email: str | None = None
    company_id: str | None = None
    department: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_entity(cls, data: dict[str, Any]) -> Employee:
        """Build from an entity-store ``Employee`` record."""
        return cls(
            id=str(data["id"]),
            nationality=data.get("nationality"),
            gosi_applicable=parse_flag(data.get("gosi_applicable"), default=True),
            basic_salary=to_decimal(data.get("basic_salary")),
            gross_salary=to_decimal(data.get("gross_salary")),
            manager_id=_optional_str(data.get("manager_id")),
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            employee_number=_optional_str(data.get("employee_id")),
            national_id=_optional_str(data.get("national_id")),
            gosi_number=_optional_str(data.get("gosi_number")),
            email=data.get("email"),
            company_id=_optional_str(data.get("company_id")),
            department=data.get("department"),
        )


def is_saudi_nationality(
    nationality: str | None,
    saudi_values: frozenset[str] = SAUDI_NATIONALITIES,
) -> bool:
    """True iff the case-folded nationality is one of ``saudi_values``."""
    if not nationality:
        return False
    return nationality.strip().casefold() in saudi_values


@dataclass(frozen=True)
class PayrollRecord:
    """A monthly payroll record; only the GOSI-relevant figures."""

    employee_id: str
    month: str
    gosi_calculation_base: Decimal | None = None
    gross_salary: Decimal | None = None
    basic_salary: Decimal | None = None
    id: str | None = None

    @property
    def contribution_base_input(self) -> Decimal:
        """Salary figure contributions are computed from, before the cap.

        ``gosi_calculation_base``, else ``gross_salary``, else zero.  A zero
        base falls through to the gross salary.
        """
        return self.gosi_calculation_base or self.gross_salary or ZERO

    @classmethod
    def from_entity(cls, data: dict[str, Any]) -> PayrollRecord:
        """Build from an entity-store ``Payroll`` record."""
        return cls(
            employee_id=str(data["employee_id"]),
            month=str(data["month"]),
            gosi_calculation_base=to_decimal(data.get("gosi_calculation_base")),
            gross_salary=to_decimal(data.get("gross_salary")),
            basic_salary=to_decimal(data.get("basic_salary")),
            id=_optional_str(data.get("id")),
        )
