"""
hr_engines.gosi_report -- Plain-text rendering of a GOSI monthly report.

Pure formatting over a computed ``GOSIReport``: summary block, totals,
due date, then Saudi and non-Saudi employee sections.  Amounts are shown
to 2 decimal places in SAR.
"""

from __future__ import annotations

from decimal import Decimal

from hr_kernel.domain.gosi import GOSIContributionLine, GOSIReport
from hr_kernel.domain.values import round_money

_WIDTH = 80
_LINE = "─" * _WIDTH
_DOUBLE_LINE = "═" * _WIDTH


def format_sar(amount: Decimal | None) -> str:
    return f"{round_money(amount or Decimal('0')):.2f} SAR"


def _label(text: str) -> str:
    return f"{text:<30}"


def _saudi_entry(index: int, line: GOSIContributionLine) -> list[str]:
    return [
        "",
        f"{index}. {line.employee_name} ({line.employee_number or 'N/A'})",
        f"   National ID: {line.national_id or 'N/A'}",
        f"   GOSI Number: {line.gosi_number or 'N/A'}",
        f"   Wage Base:   {format_sar(line.gosi_base)}",
        f"   Employee:    {format_sar(line.employee_share)}",
        f"   Employer:    {format_sar(line.employer_share)}",
        f"   Hazards:     {format_sar(line.hazards)}",
    ]


def _non_saudi_entry(index: int, line: GOSIContributionLine) -> list[str]:
    return [
        "",
        f"{index}. {line.employee_name} ({line.employee_number or 'N/A'})",
        f"   Nationality: {line.nationality or 'N/A'}",
        f"   Wage Base:   {format_sar(line.gosi_base)}",
        f"   Employer:    {format_sar(line.employer_share)}",
        f"   Hazards:     {format_sar(line.hazards)}",
    ]


def render_gosi_report_text(report: GOSIReport) -> str:
    """Render ``report`` as a fixed-width text document."""
    saudi = report.saudi_details
    non_saudi = report.non_saudi_details

    out: list[str] = [
        _DOUBLE_LINE,
        "GOSI MONTHLY CONTRIBUTION REPORT".center(_WIDTH).rstrip(),
        report.report_month.center(_WIDTH).rstrip(),
        _DOUBLE_LINE,
        "",
        "SUMMARY",
        _LINE,
        f"{_label('Total Employees:')}{report.total_employees}",
        f"{_label('Saudi Employees:')}{report.saudi_employees}",
        f"{_label('Non-Saudi Employees:')}{report.non_saudi_employees}",
        "",
        f"{_label('Total Wages:')}{format_sar(report.total_wages)}",
        f"{_label('Employee Contribution:')}{format_sar(report.total_employee_contribution)}",
        f"{_label('Employer Contribution:')}{format_sar(report.total_employer_contribution)}",
        f"{_label('Occupational Hazards:')}{format_sar(report.occupational_hazards)}",
        f"{_label('SANED Contribution:')}{format_sar(report.saned_contribution)}",
        "",
        _DOUBLE_LINE,
        f"{_label('TOTAL CONTRIBUTION:')}{format_sar(report.total_contribution)}",
        _DOUBLE_LINE,
        "",
        f"Due Date: {report.due_date.isoformat()}",
    ]

    if report.unmatched_employee_ids:
        out.append(
            "Unmatched payroll records: " + ", ".join(report.unmatched_employee_ids)
        )

    out += ["", f"SAUDI EMPLOYEES ({len(saudi)})", _LINE]
    for i, line in enumerate(saudi, 1):
        out += _saudi_entry(i, line)

    if non_saudi:
        out += ["", _LINE, f"NON-SAUDI EMPLOYEES ({len(non_saudi)})", _LINE]
        for i, line in enumerate(non_saudi, 1):
            out += _non_saudi_entry(i, line)

    out += ["", _DOUBLE_LINE, "End of Report", _DOUBLE_LINE]
    return "\n".join(out) + "\n"
