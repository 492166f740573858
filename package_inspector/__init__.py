"""
Package Inspector

Aggregates the package registry dump of an Android bug report
(packages.xml) into identities, packages and a permission index, and
renders package information reports from them.
"""

from .engine import PackageInfoAggregator, PackageQueryInterface
from .registry import Identity, Package, PermissionSet

__version__ = "1.0.0"

__all__ = [
    'PackageInfoAggregator',
    'PackageQueryInterface',
    'Identity',
    'Package',
    'PermissionSet',
]
