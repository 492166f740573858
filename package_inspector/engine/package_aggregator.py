"""
Package Aggregator

Builds the identity registry, the package registry and the permission
index from a package registry document (packages.xml as dumped into a
bug report).

The document is walked in three ordered passes, each in document order:

1. shared-user      - named identities and the permissions granted to them
2. package          - installed packages and their owner identities
3. updated-package  - patches recording the original path of updated
                      system packages and extra permissions

Packages may reference an identity that is declared later in the document
(or never), so identities are created lazily in every pass.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Sequence

from ..registry.data_models import KERNEL_NAME, KERNEL_UID, Identity, Package, PermissionSet
from ..registry.identity_registry import IdentityRegistry
from ..registry.package_registry import PackageRegistry
from ..registry.permission_index import PermissionIndex
from .data_structures import AggregationStatistics, Diagnostic, ReportAnchor
from .section_loader import (
    PACKAGE_SETTINGS_SECTION,
    MissingSectionError,
    NodeParseError,
    SectionLoaderError,
    UnparseableSectionError,
    load_package_settings,
    read_flags,
    read_owner_uid,
    read_uid,
    require_attr,
)

logger = logging.getLogger(__name__)

SHARED_USER_TAG = "shared-user"
PACKAGE_TAG = "package"
UPDATED_PACKAGE_TAG = "updated-package"
PERMISSION_GROUP_TAG = "perms"
PERMISSION_ITEM_TAG = "item"


class PackageInfoAggregator:
    """
    Aggregates the package registry document into cross-referenced registries.

    Every call to load() starts from empty registries. Once load() returns,
    the registries are only read by the query interface and the report
    projections.
    """

    def __init__(self, section_name: str = PACKAGE_SETTINGS_SECTION, debug_mode: bool = False):
        """
        Initialize Package Aggregator.

        Args:
            section_name: Name of the bug report section holding packages.xml
            debug_mode: Enable debug logging
        """
        self.section_name = section_name
        self.debug_mode = debug_mode

        self.identities = IdentityRegistry(debug_mode=debug_mode)
        self.packages = PackageRegistry()
        self.permissions = PermissionIndex()
        self.statistics = AggregationStatistics()
        self.anchors: Dict[int, ReportAnchor] = {}
        self.loaded = False

    @classmethod
    def from_config(cls, config) -> 'PackageInfoAggregator':
        """Create an aggregator from an InspectorConfig"""
        return cls(section_name=config.section_name, debug_mode=config.debug_mode)

    def reset(self):
        """Drop everything collected by a previous run"""
        self.identities.clear()
        self.packages.clear()
        self.permissions.clear()
        self.statistics = AggregationStatistics()
        self.anchors = {}
        self.loaded = False

    def load(self, lines: Optional[Sequence[str]]) -> bool:
        """
        Load the package settings section and aggregate it.

        Args:
            lines: Section lines, None if the bug report has no such section

        Returns:
            True if the document was aggregated, False if the section was
            missing or could not be parsed (registries are left empty)
        """
        self.reset()

        try:
            root = load_package_settings(lines, self.section_name)
        except (MissingSectionError, UnparseableSectionError) as e:
            self._report_section_fault(e)
            return False

        self.aggregate(root)
        return True

    def aggregate(self, root: ET.Element):
        """
        Run the three aggregation passes over an already parsed document.

        Args:
            root: Root element whose children are shared-user, package and
                updated-package nodes
        """
        self.identities.reserve(KERNEL_UID, KERNEL_NAME)

        self._process_shared_users(root)
        self._process_packages(root)
        self._process_updated_packages(root)
        self._allocate_anchors()

        self.loaded = True
        logger.info(
            f"[PackageAggregator] Aggregated {len(self.packages)} packages, "
            f"{len(self.identities)} user ids, {len(self.permissions)} permissions "
            f"({self.statistics.skipped_nodes} nodes skipped)"
        )

    def _report_section_fault(self, error: SectionLoaderError):
        level = getattr(error, 'level', 3)
        message = str(error)
        self.statistics.diagnostics.append(Diagnostic(level=level, message=message))
        self.statistics.error_details.append(message)
        logger.error(f"[PackageAggregator] {message}")

    def _skip_node(self, node: ET.Element, error: NodeParseError):
        self.statistics.skipped_nodes += 1
        self.statistics.error_details.append(str(error))
        logger.warning(f"[PackageAggregator] Skipping <{node.tag}> node: {error}")

    def _process_shared_users(self, root: ET.Element):
        for node in root.findall(SHARED_USER_TAG):
            try:
                name = node.get('name')
                uid = read_uid(node, 'userId')
            except NodeParseError as e:
                self._skip_node(node, e)
                continue

            identity = self.identities.get_or_create(uid)
            if name is not None:
                identity.declare_name(name)
            self.collect_permissions(identity.permissions, identity, node)
            self.statistics.shared_users_processed += 1

    def _process_packages(self, root: ET.Element):
        for node in root.findall(PACKAGE_TAG):
            try:
                name = require_attr(node, 'name')
                uid = read_owner_uid(node)
                flags = read_flags(node)
            except NodeParseError as e:
                self._skip_node(node, e)
                continue

            owner = self.identities.get_or_create(uid)
            previous = self.packages.get(name)
            package = self.packages.register(
                name, node.get('codePath'), flags, owner, identities=self.identities
            )
            if previous is not None:
                self._withdraw_credits(previous)
            self.collect_permissions(package.permissions, owner, node, source=name)
            self.statistics.packages_processed += 1

        self.statistics.duplicate_packages = self.packages.duplicate_count

    def _withdraw_credits(self, replaced: Package):
        dropped = self.permissions.revoke_source(replaced.owner_uid, replaced.name)
        if dropped:
            logger.debug(
                f"[PackageAggregator] uid {replaced.owner_uid} lost {len(dropped)} permissions "
                f"with replaced package {replaced.name}"
            )

    def _process_updated_packages(self, root: ET.Element):
        for node in root.findall(UPDATED_PACKAGE_TAG):
            try:
                name = require_attr(node, 'name')
            except NodeParseError as e:
                self._skip_node(node, e)
                continue

            package = self.packages.get(name)
            if package is None:
                message = f"Could not find package for updated-package item: {name}"
                self.statistics.dangling_patches += 1
                self.statistics.warnings.append(message)
                logger.warning(f"[PackageAggregator] {message}")
                continue

            package.patch.original_path = node.get('codePath')
            package.patch.applied_patches += 1
            owner = self.identities.get_or_create(package.owner_uid)
            self.collect_permissions(package.permissions, owner, node, source=package.name)
            self.statistics.patches_applied += 1

    def collect_permissions(self, target: PermissionSet, identity: Identity, node: ET.Element,
                            source: Optional[str] = None):
        """
        Collect the permissions listed under a node's permission group.

        Each permission is added to target and the identity is credited for
        it in the permission index. target is sorted once afterwards.

        Args:
            target: Permission set of the identity or package being built
            identity: Identity credited in the permission index
            node: shared-user, package or updated-package node
            source: Name of the package making the credit, None for a
                shared-user record
        """
        group = node.find(PERMISSION_GROUP_TAG)
        if group is None:
            return

        for item in group.findall(PERMISSION_ITEM_TAG):
            permission = item.get('name')
            if permission is None:
                if self.debug_mode:
                    logger.debug(f"[PackageAggregator] Ignoring unnamed permission item under <{node.tag}>")
                continue
            target.add(permission)
            self.permissions.grant(permission, identity.uid, source)

        target.sort()

    def _allocate_anchors(self):
        # One link target per identity so other report sections can refer to it
        for identity in self.identities.sorted_identities():
            self.anchors[identity.uid] = ReportAnchor(
                anchor_id=f"uid_{identity.uid}",
                title=identity.full_name,
            )

    def get_uid(self, uid: int) -> Optional[Identity]:
        """Look up an identity without creating it"""
        return self.identities.get(uid)

    def get_packages(self) -> List[Package]:
        return self.packages.packages()

    def is_empty(self) -> bool:
        return self.packages.is_empty()
