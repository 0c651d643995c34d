"""
hr_engines.gosi -- Pure GOSI contribution calculator.

Responsibility:
    Given employee records and payroll records, compute the mandated
    social-insurance contributions for one month, per employee and in
    aggregate, for the monthly GOSI report.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only hr_kernel domain types and hr_config schema dataclasses.

Invariants enforced:
    - Contribution base is capped at ``GOSIConfig.salary_cap`` (45,000 SAR).
    - Saudi:     employee = base x 11%, employer = base x 13%, SANED = base x 2%
      Non-Saudi: employee = 0,          employer = base x 2%,  SANED = 0
      Everyone:  hazards  = base x 2%, reported separately and counted
      with the employer side in the totals.
    - Line items keep full precision; report fields are rounded to 0.01.
    - ``total_contribution == total_employee_contribution + total_employer_contribution``.
    - Purity: no clock access, no I/O.  Same inputs, same report.

Failure modes:
    - InvalidReportMonthError if ``month`` is not ``YYYY-MM``.
    - NoPayrollDataError if no payroll record falls in the requested
      month (and company, when given).  A zero report is never returned.
    - Payroll records whose employee is unknown, or whose employee is not
      GOSI-applicable, are left out of every total and listed on the
      report instead.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from hr_config.schema import GOSIConfig
from hr_kernel.domain.employee import Employee, PayrollRecord, is_saudi_nationality
from hr_kernel.domain.gosi import GOSIContributionLine, GOSIReport, NationalityClass
from hr_kernel.domain.values import ZERO, round_money
from hr_kernel.exceptions import InvalidReportMonthError, NoPayrollDataError
from hr_kernel.logging_config import get_logger
from hr_engines.tracer import traced_engine

logger = get_logger("engines.gosi")

_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_report_month(month: str) -> tuple[int, int]:
    """Validate ``YYYY-MM`` and return ``(year, month)``."""
    if not isinstance(month, str) or not _MONTH_PATTERN.match(month):
        raise InvalidReportMonthError(month)
    year, mon = month.split("-")
    return int(year), int(mon)


def contribution_due_date(month: str, due_day: int) -> date:
    """Contributions for ``month`` fall due on ``due_day`` of the following month."""
    year, mon = parse_report_month(month)
    if mon == 12:
        return date(year + 1, 1, due_day)
    return date(year, mon + 1, due_day)


def classify_nationality(
    employee: Employee,
    config: GOSIConfig | None = None,
) -> NationalityClass:
    config = config or GOSIConfig()
    if is_saudi_nationality(employee.nationality, config.saudi_nationalities):
        return NationalityClass.SAUDI
    return NationalityClass.NON_SAUDI


def cap_contribution_base(amount: Decimal, cap: Decimal) -> Decimal:
    """Apply the regulatory ceiling; capping twice changes nothing."""
    return min(amount, cap)


def compute_contribution_line(
    employee: Employee,
    payroll: PayrollRecord,
    config: GOSIConfig | None = None,
) -> GOSIContributionLine:
    """Contributions for one employee's payroll record (full precision)."""
    config = config or GOSIConfig()
    nationality_class = classify_nationality(employee, config)
    base = cap_contribution_base(payroll.contribution_base_input, config.salary_cap)

    if nationality_class == NationalityClass.SAUDI:
        # pension + SANED on each side
        employee_share = base * config.saudi_employee_rate
        employer_share = base * config.saudi_employer_rate
        saned = base * config.saned_total_rate
    else:
        employee_share = ZERO
        employer_share = base * config.non_saudi_employer_rate
        saned = ZERO

    hazards = base * config.occupational_hazards_rate

    return GOSIContributionLine(
        employee_id=employee.id,
        nationality_class=nationality_class,
        gosi_base=base,
        employee_share=employee_share,
        employer_share=employer_share,
        hazards=hazards,
        saned=saned,
        employee_name=employee.full_name,
        employee_number=employee.employee_number,
        national_id=employee.national_id,
        gosi_number=employee.gosi_number,
        nationality=employee.nationality,
    )


@traced_engine("gosi", "1.0", fingerprint_fields=("month", "company_id"))
def compute_gosi_report(
    employees: Iterable[Employee],
    payrolls: Iterable[PayrollRecord],
    month: str,
    *,
    company_id: str | None = None,
    config: GOSIConfig | None = None,
) -> GOSIReport:
    """Compute the GOSI contribution report for ``month``.

    Args:
        employees: Employee snapshots; looked up by ``id``.
        payrolls: Payroll records of any month; filtered to ``month``.
        month: Report month, ``YYYY-MM``.
        company_id: Restrict to employees of this company.
        config: Rates and cap (defaults to the published GOSI rates).

    Returns:
        GOSIReport with rounded totals and full-precision line items.

    Raises:
        InvalidReportMonthError: ``month`` is malformed.
        NoPayrollDataError: nothing to report for the month.
    """
    config = config or GOSIConfig()
    parse_report_month(month)

    employees_by_id = {e.id: e for e in employees}
    records = [p for p in payrolls if p.month == month]
    if company_id is not None:
        records = [
            p for p in records
            if p.employee_id in employees_by_id
            and employees_by_id[p.employee_id].company_id == company_id
        ]

    if not records:
        logger.warning(
            "gosi_no_payroll_data",
            extra={"month": month, "company_id": company_id},
        )
        raise NoPayrollDataError(month, company_id)

    lines: list[GOSIContributionLine] = []
    unmatched: list[str] = []
    not_applicable: list[str] = []

    for payroll in records:
        employee = employees_by_id.get(payroll.employee_id)
        if employee is None:
            unmatched.append(payroll.employee_id)
            continue
        if not employee.gosi_applicable:
            not_applicable.append(employee.id)
            continue
        lines.append(compute_contribution_line(employee, payroll, config))

    if unmatched:
        logger.warning(
            "gosi_unmatched_payroll_records",
            extra={"month": month, "employee_ids": unmatched, "count": len(unmatched)},
        )

    total_wages = sum((line.gosi_base for line in lines), ZERO)
    total_employee = sum((line.employee_share for line in lines), ZERO)
    total_employer = sum((line.employer_share + line.hazards for line in lines), ZERO)
    hazards = sum((line.hazards for line in lines), ZERO)
    saned = sum((line.saned for line in lines), ZERO)
    saudi_count = sum(1 for line in lines if line.is_saudi)

    total_employee_contribution = round_money(total_employee)
    total_employer_contribution = round_money(total_employer)

    report = GOSIReport(
        report_month=month,
        company_id=company_id,
        total_employees=len(lines),
        saudi_employees=saudi_count,
        non_saudi_employees=len(lines) - saudi_count,
        total_wages=round_money(total_wages),
        total_employee_contribution=total_employee_contribution,
        total_employer_contribution=total_employer_contribution,
        occupational_hazards=round_money(hazards),
        saned_contribution=round_money(saned),
        total_contribution=total_employee_contribution + total_employer_contribution,
        due_date=contribution_due_date(month, config.due_day),
        employee_details=tuple(lines),
        unmatched_employee_ids=tuple(unmatched),
        not_applicable_employee_ids=tuple(not_applicable),
    )

    logger.info(
        "gosi_report_computed",
        extra={
            "month": month,
            "company_id": company_id,
            "total_employees": report.total_employees,
            "saudi_employees": report.saudi_employees,
            "non_saudi_employees": report.non_saudi_employees,
            "total_contribution": str(report.total_contribution),
            "excluded_not_applicable": len(not_applicable),
            "excluded_unmatched": len(unmatched),
        },
    )
    return report
