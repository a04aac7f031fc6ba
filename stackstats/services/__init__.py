"""
Service layer: runs a whole batch through extraction, folding and reporting.
No persistence: callers receive the report bundle and decide where it goes.
"""
from .report_service import ReportBundle, build_lineup, build_reports

__all__ = [
    "ReportBundle",
    "build_lineup",
    "build_reports",
]
