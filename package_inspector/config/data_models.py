"""Data models for package inspector configuration."""

from dataclasses import dataclass, field
from typing import List, Dict, Any

from ..engine.section_loader import PACKAGE_SETTINGS_SECTION
from ..utils.logging_setup import LoggingConfig

SUPPORTED_REPORT_FORMATS = ("html", "csv", "json")


@dataclass
class InspectorConfig:
    """Settings for aggregating and reporting package information."""
    version: str
    section_name: str
    output_dir: str
    report_formats: List[str] = field(default_factory=lambda: ["html", "csv"])
    csv_table_name: str = "package_list"
    debug_mode: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'version': self.version,
            'section_name': self.section_name,
            'output_dir': self.output_dir,
            'report_formats': list(self.report_formats),
            'csv_table_name': self.csv_table_name,
            'debug_mode': self.debug_mode,
            'logging': self.logging.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InspectorConfig':
        """Create from dictionary loaded from JSON or YAML."""
        report_formats = data.get('report_formats', ["html", "csv"])
        if isinstance(report_formats, str):
            report_formats = [report_formats]

        return cls(
            version=str(data.get('version', '1.0')),
            section_name=data.get('section_name', PACKAGE_SETTINGS_SECTION),
            output_dir=data.get('output_dir', 'reports'),
            report_formats=[str(fmt).lower() for fmt in report_formats],
            csv_table_name=data.get('csv_table_name', 'package_list'),
            debug_mode=bool(data.get('debug_mode', False)),
            logging=LoggingConfig.from_dict(data.get('logging') or {})
        )

    @classmethod
    def default(cls) -> 'InspectorConfig':
        """Create default configuration."""
        return cls(
            version='1.0',
            section_name=PACKAGE_SETTINGS_SECTION,
            output_dir='reports',
            report_formats=["html", "csv"],
            csv_table_name='package_list',
            debug_mode=False,
            logging=LoggingConfig()
        )

    def validate(self) -> List[str]:
        """Return a list of problems, empty when the configuration is usable."""
        errors = []
        for fmt in self.report_formats:
            if fmt not in SUPPORTED_REPORT_FORMATS:
                errors.append(f"Unsupported report format: {fmt}")
        if not self.section_name:
            errors.append("section_name must not be empty")
        if not self.csv_table_name:
            errors.append("csv_table_name must not be empty")
        return errors
