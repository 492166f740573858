"""
Registry Layer

In-memory registries for identities, packages and the permission index
built from a package registry document.
"""

from .data_models import (
    KERNEL_NAME,
    KERNEL_UID,
    Identity,
    Package,
    PackagePatchState,
    PermissionSet,
)
from .identity_registry import IdentityRegistry
from .package_registry import PackageRegistry
from .permission_index import PermissionIndex

__all__ = [
    'KERNEL_NAME',
    'KERNEL_UID',
    'Identity',
    'Package',
    'PackagePatchState',
    'PermissionSet',
    'IdentityRegistry',
    'PackageRegistry',
    'PermissionIndex',
]
