"""
Logging Configuration

Logging setup for the package inspector: console and optional rotating
file output, with simple, detailed or JSON line formats.
"""

import json
import logging
import logging.handlers
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "package_inspector"


@dataclass
class LoggingConfig:
    """Configuration for package inspector logging"""
    log_level: str = "INFO"
    log_format: str = "detailed"  # simple, detailed, json
    enable_file_logging: bool = False
    enable_console_logging: bool = True
    log_directory: str = "logs"
    max_file_size_mb: int = 10
    backup_count: int = 5

    def to_dict(self) -> Dict[str, Any]:
        return {
            'log_level': self.log_level,
            'log_format': self.log_format,
            'enable_file_logging': self.enable_file_logging,
            'enable_console_logging': self.enable_console_logging,
            'log_directory': self.log_directory,
            'max_file_size_mb': self.max_file_size_mb,
            'backup_count': self.backup_count
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoggingConfig':
        defaults = cls()
        return cls(
            log_level=str(data.get('log_level', defaults.log_level)).upper(),
            log_format=data.get('log_format', defaults.log_format),
            enable_file_logging=bool(data.get('enable_file_logging', defaults.enable_file_logging)),
            enable_console_logging=bool(data.get('enable_console_logging', defaults.enable_console_logging)),
            log_directory=data.get('log_directory', defaults.log_directory),
            max_file_size_mb=int(data.get('max_file_size_mb', defaults.max_file_size_mb)),
            backup_count=int(data.get('backup_count', defaults.backup_count))
        )


class PackageInspectorLogFormatter(logging.Formatter):
    """Custom formatter for package inspector logging"""

    def __init__(self, format_type: str = "detailed"):
        self.format_type = format_type

        if format_type == "json":
            super().__init__()
        elif format_type == "detailed":
            fmt = (
                "%(asctime)s | %(levelname)-8s | %(name)-40s | "
                "%(funcName)-24s:%(lineno)-4d | %(message)s"
            )
            super().__init__(fmt)
        else:
            super().__init__("%(asctime)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if self.format_type != "json":
            return super().format(record)

        entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'function': record.funcName,
            'line': record.lineno,
            'message': record.getMessage()
        }
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure the package inspector logger hierarchy.

    Handlers installed by a previous call are replaced, so calling this
    more than once does not duplicate output.

    Args:
        config: Logging configuration, defaults when None

    Returns:
        The package inspector root logger
    """
    config = config or LoggingConfig()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = PackageInspectorLogFormatter(config.log_format)

    if config.enable_console_logging:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if config.enable_file_logging:
        log_dir = Path(config.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "package_inspector.log",
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return root
