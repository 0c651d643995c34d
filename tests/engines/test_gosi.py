"""
Tests for the pure GOSI contribution calculator.

Tests cover:
- compute_contribution_line: Saudi / non-Saudi splits, hazards, SANED
- cap_contribution_base: 45,000 SAR ceiling and idempotence
- compute_gosi_report: month filtering, exclusions, aggregation, rounding,
  empty-input failure, company filter, due date
"""

from datetime import date
from decimal import Decimal

import pytest

from hr_config.schema import GOSIConfig
from hr_engines.gosi import (
    cap_contribution_base,
    classify_nationality,
    compute_contribution_line,
    compute_gosi_report,
    contribution_due_date,
)
from hr_kernel.domain.employee import Employee, PayrollRecord
from hr_kernel.domain.gosi import NationalityClass
from hr_kernel.exceptions import InvalidReportMonthError, NoPayrollDataError


# =========================================================================
# Factory helpers
# =========================================================================


def make_employee(
    employee_id: str = "emp-1",
    nationality: str | None = "Saudi Arabia",
    gosi_applicable: bool = True,
    company_id: str | None = None,
) -> Employee:
    return Employee(
        id=employee_id,
        nationality=nationality,
        gosi_applicable=gosi_applicable,
        first_name="Test",
        last_name=employee_id,
        company_id=company_id,
    )


def make_payroll(
    employee_id: str = "emp-1",
    month: str = "2025-03",
    gosi_calculation_base: str | None = None,
    gross_salary: str | None = None,
) -> PayrollRecord:
    return PayrollRecord(
        employee_id=employee_id,
        month=month,
        gosi_calculation_base=Decimal(gosi_calculation_base) if gosi_calculation_base else None,
        gross_salary=Decimal(gross_salary) if gross_salary else None,
    )


# =========================================================================
# 1. Nationality classification
# =========================================================================


class TestClassifyNationality:

    @pytest.mark.parametrize("value", ["Saudi Arabia", "saudi arabia", "SAUDI", "Saudi", " saudi "])
    def test_saudi_values_case_insensitive(self, value):
        assert classify_nationality(make_employee(nationality=value)) == NationalityClass.SAUDI

    @pytest.mark.parametrize("value", ["Egyptian", "Saudi Arabian", "", None, "KSA"])
    def test_everything_else_is_non_saudi(self, value):
        assert classify_nationality(make_employee(nationality=value)) == NationalityClass.NON_SAUDI


# =========================================================================
# 2. Contribution base cap
# =========================================================================


class TestCapContributionBase:

    def test_below_cap_unchanged(self):
        assert cap_contribution_base(Decimal("10000"), Decimal("45000")) == Decimal("10000")

    def test_above_cap_clamped(self):
        assert cap_contribution_base(Decimal("50000"), Decimal("45000")) == Decimal("45000")

    def test_doubling_capped_salary_changes_nothing(self):
        once = cap_contribution_base(Decimal("60000"), Decimal("45000"))
        twice = cap_contribution_base(Decimal("120000"), Decimal("45000"))
        assert once == twice == Decimal("45000")
        assert cap_contribution_base(once, Decimal("45000")) == once


# =========================================================================
# 3. Per-employee contribution line
# =========================================================================


class TestComputeContributionLine:

    def test_saudi_example(self):
        """Saudi, base 10,000: 1,100 / 1,300 / 200 hazards / 2,600 total."""
        line = compute_contribution_line(
            make_employee(nationality="Saudi Arabia"),
            make_payroll(gosi_calculation_base="10000"),
        )

        assert line.gosi_base == Decimal("10000")
        assert line.employee_share == Decimal("1100")
        assert line.employer_share == Decimal("1300")
        assert line.hazards == Decimal("200")
        assert line.saned == Decimal("200")
        assert line.total == Decimal("2600")
        assert line.is_saudi is True

    def test_non_saudi_example_with_cap(self):
        """Non-Saudi, gross 50,000, no base: capped at 45,000; 0 / 900 / 900 / 1,800."""
        line = compute_contribution_line(
            make_employee(nationality="Indian"),
            make_payroll(gross_salary="50000"),
        )

        assert line.gosi_base == Decimal("45000")
        assert line.employee_share == Decimal("0")
        assert line.employer_share == Decimal("900")
        assert line.hazards == Decimal("900")
        assert line.saned == Decimal("0")
        assert line.total == Decimal("1800")

    def test_gosi_base_preferred_over_gross(self):
        line = compute_contribution_line(
            make_employee(),
            make_payroll(gosi_calculation_base="8000", gross_salary="12000"),
        )
        assert line.gosi_base == Decimal("8000")

    def test_zero_base_falls_through_to_gross(self):
        line = compute_contribution_line(
            make_employee(),
            PayrollRecord(
                employee_id="emp-1",
                month="2025-03",
                gosi_calculation_base=Decimal("0"),
                gross_salary=Decimal("7000"),
            ),
        )
        assert line.gosi_base == Decimal("7000")

    def test_no_salary_figures_gives_zero_base(self):
        line = compute_contribution_line(make_employee(), make_payroll())
        assert line.gosi_base == Decimal("0")
        assert line.total == Decimal("0")

    @pytest.mark.parametrize("base", ["1234.56", "3333.33", "45000", "999.99"])
    def test_saudi_shares_sum_to_total(self, base):
        line = compute_contribution_line(make_employee(), make_payroll(gosi_calculation_base=base))
        assert line.employee_share + line.employer_share + line.hazards == line.total
        assert line.employee_share == line.gosi_base * Decimal("0.11")

    @pytest.mark.parametrize("gross", ["800", "12345.67", "45000.01", "90000"])
    def test_non_saudi_employer_only(self, gross):
        line = compute_contribution_line(
            make_employee(nationality="Egyptian"), make_payroll(gross_salary=gross)
        )
        assert line.employee_share == 0
        assert line.employer_share == line.gosi_base * Decimal("0.02")
        assert line.gosi_base <= Decimal("45000")

    def test_line_keeps_full_precision(self):
        line = compute_contribution_line(make_employee(), make_payroll(gosi_calculation_base="1234.56"))
        assert line.employee_share == Decimal("135.8016")

    def test_custom_rates_used(self):
        config = GOSIConfig(occupational_hazards_rate=Decimal("0.03"), salary_cap=Decimal("20000"))
        line = compute_contribution_line(
            make_employee(nationality="French"),
            make_payroll(gross_salary="30000"),
            config,
        )
        assert line.gosi_base == Decimal("20000")
        assert line.hazards == Decimal("600")

    def test_custom_saned_rates_flow_into_saudi_shares(self):
        config = GOSIConfig(saned_employee_rate=Decimal("0.02"), saned_employer_rate=Decimal("0.015"))
        line = compute_contribution_line(make_employee(), make_payroll(gross_salary="10000"), config)
        assert line.employee_share == Decimal("1200")
        assert line.employer_share == Decimal("1350")
        assert line.saned == Decimal("350")

    def test_configured_nationality_values_classify_as_saudi(self):
        config = GOSIConfig(saudi_nationalities=frozenset({"ksa"}))
        line = compute_contribution_line(
            make_employee(nationality="KSA"), make_payroll(gross_salary="10000"), config
        )
        assert line.nationality_class == NationalityClass.SAUDI
        assert line.employee_share == Decimal("1100")


# =========================================================================
# 4. Report aggregation
# =========================================================================


class TestComputeGOSIReport:

    def test_single_saudi_employee_report(self):
        report = compute_gosi_report(
            [make_employee()],
            [make_payroll(gosi_calculation_base="10000")],
            "2025-03",
        )

        assert report.total_contribution == Decimal("2600.00")
        assert report.total_employee_contribution == Decimal("1100.00")
        assert report.total_employer_contribution == Decimal("1500.00")
        assert report.occupational_hazards == Decimal("200.00")
        assert report.saned_contribution == Decimal("200.00")
        assert report.total_wages == Decimal("10000.00")
        assert report.saudi_employees == 1
        assert report.non_saudi_employees == 0
        assert report.total_employees == 1

    def test_mixed_workforce_totals(self):
        employees = [
            make_employee("emp-a", "Saudi Arabia"),
            make_employee("emp-b", "Pakistani"),
        ]
        payrolls = [
            make_payroll("emp-a", gosi_calculation_base="10000"),
            make_payroll("emp-b", gross_salary="50000"),
        ]

        report = compute_gosi_report(employees, payrolls, "2025-03")

        assert report.total_wages == Decimal("55000.00")
        assert report.total_employee_contribution == Decimal("1100.00")
        # Saudi 1300 + 200 hazards, non-Saudi 900 + 900 hazards
        assert report.total_employer_contribution == Decimal("3300.00")
        assert report.occupational_hazards == Decimal("1100.00")
        assert report.total_contribution == Decimal("4400.00")
        assert report.saudi_employees == 1
        assert report.non_saudi_employees == 1
        assert [l.employee_id for l in report.saudi_details] == ["emp-a"]
        assert [l.employee_id for l in report.non_saudi_details] == ["emp-b"]

    def test_total_equals_employee_plus_employer(self):
        employees = [make_employee(f"emp-{i}", "Saudi" if i % 2 else "Filipino") for i in range(7)]
        payrolls = [
            make_payroll(f"emp-{i}", gosi_calculation_base=str(Decimal("3333.337") * (i + 1)))
            for i in range(7)
        ]

        report = compute_gosi_report(employees, payrolls, "2025-03")

        assert report.total_contribution == (
            report.total_employee_contribution + report.total_employer_contribution
        )

    def test_report_fields_rounded_to_cents(self):
        report = compute_gosi_report(
            [make_employee()],
            [make_payroll(gosi_calculation_base="1234.56")],
            "2025-03",
        )
        assert report.total_employee_contribution == Decimal("135.80")
        assert report.total_employee_contribution.as_tuple().exponent == -2

    def test_only_requested_month_counted(self):
        report = compute_gosi_report(
            [make_employee()],
            [
                make_payroll(month="2025-02", gosi_calculation_base="99999"),
                make_payroll(month="2025-03", gosi_calculation_base="10000"),
            ],
            "2025-03",
        )
        assert report.total_wages == Decimal("10000.00")

    def test_not_applicable_employees_never_in_details(self):
        employees = [
            make_employee("emp-a"),
            make_employee("emp-b", gosi_applicable=False),
        ]
        payrolls = [
            make_payroll("emp-a", gosi_calculation_base="10000"),
            make_payroll("emp-b", gosi_calculation_base="20000"),
        ]

        report = compute_gosi_report(employees, payrolls, "2025-03")

        assert [l.employee_id for l in report.employee_details] == ["emp-a"]
        assert report.not_applicable_employee_ids == ("emp-b",)
        assert report.total_wages == Decimal("10000.00")

    def test_unknown_employee_excluded_and_listed(self):
        report = compute_gosi_report(
            [make_employee("emp-a")],
            [
                make_payroll("emp-a", gosi_calculation_base="10000"),
                make_payroll("ghost", gosi_calculation_base="10000"),
            ],
            "2025-03",
        )

        assert report.total_employees == 1
        assert report.unmatched_employee_ids == ("ghost",)
        assert report.total_contribution == Decimal("2600.00")

    def test_no_records_for_month_raises(self):
        with pytest.raises(NoPayrollDataError) as exc_info:
            compute_gosi_report(
                [make_employee()],
                [make_payroll(month="2025-02", gosi_calculation_base="10000")],
                "2025-03",
            )
        assert exc_info.value.month == "2025-03"
        assert exc_info.value.code == "NO_PAYROLL_DATA"

    def test_empty_payroll_list_raises(self):
        with pytest.raises(NoPayrollDataError):
            compute_gosi_report([make_employee()], [], "2025-03")

    @pytest.mark.parametrize("month", ["2025-3", "2025-13", "March 2025", "", "2025-03-01"])
    def test_malformed_month_rejected(self, month):
        with pytest.raises(InvalidReportMonthError):
            compute_gosi_report([make_employee()], [make_payroll()], month)

    def test_company_filter(self):
        employees = [
            make_employee("emp-a", company_id="co-1"),
            make_employee("emp-b", company_id="co-2"),
        ]
        payrolls = [
            make_payroll("emp-a", gosi_calculation_base="10000"),
            make_payroll("emp-b", gosi_calculation_base="20000"),
        ]

        report = compute_gosi_report(employees, payrolls, "2025-03", company_id="co-2")

        assert report.company_id == "co-2"
        assert [l.employee_id for l in report.employee_details] == ["emp-b"]

    def test_company_without_payroll_raises(self):
        with pytest.raises(NoPayrollDataError) as exc_info:
            compute_gosi_report(
                [make_employee("emp-a", company_id="co-1")],
                [make_payroll("emp-a", gosi_calculation_base="10000")],
                "2025-03",
                company_id="co-9",
            )
        assert exc_info.value.company_id == "co-9"

    def test_deterministic(self):
        employees = [make_employee("emp-a"), make_employee("emp-b", "Yemeni")]
        payrolls = [
            make_payroll("emp-a", gosi_calculation_base="12345.67"),
            make_payroll("emp-b", gross_salary="8765.43"),
        ]
        first = compute_gosi_report(employees, payrolls, "2025-03")
        second = compute_gosi_report(employees, payrolls, "2025-03")
        assert first == second

    def test_due_date_following_month(self):
        report = compute_gosi_report(
            [make_employee()],
            [make_payroll(gosi_calculation_base="10000")],
            "2025-03",
        )
        assert report.due_date == date(2025, 4, 10)


class TestContributionDueDate:

    def test_december_rolls_into_january(self):
        assert contribution_due_date("2024-12", 10) == date(2025, 1, 10)

    def test_custom_due_day(self):
        assert contribution_due_date("2025-06", 15) == date(2025, 7, 15)
