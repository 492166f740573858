"""
Utility modules for the package inspector.
Includes logging setup and report projections over aggregated package data.
"""

from .logging_setup import LoggingConfig, PackageInspectorLogFormatter, configure_logging
from .reporting_engine import PackageReportGenerator, ReportFormat

__all__ = [
    'LoggingConfig',
    'PackageInspectorLogFormatter',
    'configure_logging',
    'PackageReportGenerator',
    'ReportFormat',
]
