"""
Aggregation engine: section loading, the three-pass aggregator and the
query interface consumed by report projections.
"""

from .data_structures import (
    AggregationStatistics,
    Diagnostic,
    PermissionEntry,
    PermissionHolder,
    ReportAnchor,
)
from .package_aggregator import PackageInfoAggregator
from .query_interface import PackageQueryInterface
from .section_loader import (
    PACKAGE_SETTINGS_SECTION,
    MissingSectionError,
    NodeParseError,
    SectionLoaderError,
    UnparseableSectionError,
    load_package_settings,
)

__all__ = [
    'AggregationStatistics',
    'Diagnostic',
    'PermissionEntry',
    'PermissionHolder',
    'ReportAnchor',
    'PackageInfoAggregator',
    'PackageQueryInterface',
    'PACKAGE_SETTINGS_SECTION',
    'MissingSectionError',
    'NodeParseError',
    'SectionLoaderError',
    'UnparseableSectionError',
    'load_package_settings',
]
