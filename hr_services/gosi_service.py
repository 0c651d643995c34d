"""
hr_services.gosi_service -- Monthly GOSI report generation.

Responsibility:
    Fetch employees and the month's payroll from the entity store, run the
    pure GOSI calculator, and persist the resulting report record.

Architecture position:
    Services.  Calculation is delegated to ``hr_engines.gosi``.

Failure modes:
    - UnauthorizedActionError: caller is not an admin.
    - NoPayrollDataError / InvalidReportMonthError from the engine; no
      report record is written.
"""

from __future__ import annotations

from typing import Any

from hr_config import get_active_config
from hr_config.schema import GOSIConfig
from hr_kernel.domain.clock import Clock, SystemClock
from hr_kernel.domain.collaborators import EntityStore, SessionResolver
from hr_kernel.domain.employee import Employee, PayrollRecord
from hr_kernel.domain.gosi import GOSIReport
from hr_kernel.exceptions import UnauthorizedActionError
from hr_kernel.logging_config import LogContext, get_logger
from hr_engines.gosi import compute_gosi_report, parse_report_month
from hr_engines.gosi_report import render_gosi_report_text

logger = get_logger("services.gosi")

EMPLOYEE_ENTITY = "Employee"
PAYROLL_ENTITY = "Payroll"
GOSI_REPORT_ENTITY = "GOSIReport"


class GOSIReportService:
    """Generates and stores monthly GOSI contribution reports."""

    def __init__(
        self,
        store: EntityStore,
        sessions: SessionResolver,
        clock: Clock | None = None,
        config: GOSIConfig | None = None,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self._clock = clock or SystemClock()
        self._config = config or get_active_config().gosi

    def generate(self, month: str, company_id: str | None = None) -> GOSIReport:
        """Compute and persist the GOSI report for ``month`` (``YYYY-MM``)."""
        principal = self._sessions.current_principal()
        if principal is None or not principal.is_admin:
            raise UnauthorizedActionError(
                "generate GOSI reports",
                principal.user_id if principal else None,
                reason="admin access required",
            )
        parse_report_month(month)

        with LogContext.bind(actor_id=principal.user_id, report_month=month):
            payrolls = [
                PayrollRecord.from_entity(data)
                for data in self._store.collection(PAYROLL_ENTITY).list({"month": month})
            ]
            employees = [
                Employee.from_entity(data)
                for data in self._store.collection(EMPLOYEE_ENTITY).list()
            ]
            report = compute_gosi_report(
                employees,
                payrolls,
                month=month,
                company_id=company_id,
                config=self._config,
            )

            fields: dict[str, Any] = report.to_entity_fields()
            fields["generated_at"] = self._clock.now_utc().isoformat()
            fields["generated_by"] = principal.email or principal.user_id
            created = self._store.collection(GOSI_REPORT_ENTITY).create(fields)

            logger.info(
                "gosi_report_persisted",
                extra={
                    "report_id": created.get("id"),
                    "company_id": company_id,
                    "total_contribution": str(report.total_contribution),
                    "due_date": report.due_date.isoformat(),
                },
            )
            return report

    def render_text(self, report: GOSIReport) -> str:
        return render_gosi_report_text(report)
