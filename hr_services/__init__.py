"""
hr_services -- orchestration over the external entity store.

Services own the I/O boundary (entity store, session, clock) and hand
fetched snapshots to the pure engines in ``hr_engines``.
"""

from hr_services.approval_service import ApprovalService
from hr_services.gosi_service import GOSIReportService

__all__ = [
    "ApprovalService",
    "GOSIReportService",
]
