"""
Query interface for aggregated package information.

Read-only views over the registries built by PackageInfoAggregator:
package -> owner -> permissions, identity -> packages and
permission -> identities/packages.
"""

import logging
from typing import List, Optional

from ..registry.data_models import Identity, Package
from .data_structures import PermissionEntry, PermissionHolder, ReportAnchor
from .package_aggregator import PackageInfoAggregator

logger = logging.getLogger(__name__)


class PackageQueryInterface:
    """
    Query the registries of a finished aggregation run.

    Must only be used after PackageInfoAggregator.load() has returned.
    """

    def __init__(self, aggregator: PackageInfoAggregator):
        """
        Initialize query interface.

        Args:
            aggregator: Aggregator whose registries are queried
        """
        self.aggregator = aggregator

    @property
    def loaded(self) -> bool:
        return self.aggregator.loaded

    def packages(self) -> List[Package]:
        """All packages, in registration order"""
        return self.aggregator.get_packages()

    def packages_sorted(self) -> List[Package]:
        return sorted(self.packages(), key=lambda package: (package.name, package.sequence_id))

    def get_package(self, name: str) -> Optional[Package]:
        return self.aggregator.packages.get(name)

    def identities(self) -> List[Identity]:
        """All identities sorted by uid"""
        return self.aggregator.identities.sorted_identities()

    def get_identity(self, uid: int) -> Optional[Identity]:
        return self.aggregator.get_uid(uid)

    def packages_of(self, identity: Identity) -> List[Package]:
        return self.aggregator.packages.packages_of(identity)

    def owner_of(self, package: Package) -> Optional[Identity]:
        return self.aggregator.identities.get(package.owner_uid)

    def permission_names(self) -> List[str]:
        return self.aggregator.permissions.permission_names()

    def holders_of(self, permission: str) -> List[Identity]:
        """Identities credited with a permission, in the order they were credited"""
        holders = []
        for uid in self.aggregator.permissions.holders(permission):
            identity = self.aggregator.identities.get(uid)
            if identity is not None:
                holders.append(identity)
        return holders

    def permission_listing(self) -> List[PermissionEntry]:
        """
        Build the permission listing.

        For each permission (sorted by name) and each credited identity,
        an identity without packages yields one direct line; otherwise one
        line per owned package declaring the permission.

        This deliberately adds a third case to the two-case rule: an
        identity that owns packages, none of which declares the permission
        (granted through its shared-user record only), still yields one
        direct line. The strict two-case rule would drop such a holder
        from the listing although the index credits it.

        Returns:
            List of PermissionEntry objects
        """
        listing = []
        for permission in self.permission_names():
            entry = PermissionEntry(name=permission)
            for identity in self.holders_of(permission):
                owned = self.packages_of(identity)
                declaring = [package for package in owned if permission in package.permissions]
                if not declaring:
                    entry.holders.append(PermissionHolder(identity=identity))
                    continue
                for package in declaring:
                    entry.holders.append(PermissionHolder(identity=identity, package=package))
            listing.append(entry)
        return listing

    def anchor_for(self, identity: Optional[Identity]) -> Optional[ReportAnchor]:
        if identity is None:
            return None
        return self.aggregator.anchors.get(identity.uid)

    def link_to_uid(self, identity: Optional[Identity]) -> Optional[str]:
        """
        Resolve an identity to the href of its report section.

        Returns:
            "#<anchor id>", or None for a missing identity or anchor
        """
        anchor = self.anchor_for(identity)
        if anchor is None:
            return None
        return anchor.href
