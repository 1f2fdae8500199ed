"""Top-level package exposing the backend application factory and reporting core."""

from backend.app import Config, create_app
from backend.app.reporting import REPORTS, ReportBuilder

__all__ = ["Config", "REPORTS", "ReportBuilder", "create_app"]
