from .runner import (
    ALL_REPORTS_ORDER,
    ReportRegistration,
    list_registered_reports,
    reports_require_audit,
    run_named_report,
    run_reports,
)

__all__ = [
    "ALL_REPORTS_ORDER",
    "ReportRegistration",
    "list_registered_reports",
    "reports_require_audit",
    "run_named_report",
    "run_reports",
]
