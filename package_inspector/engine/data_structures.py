"""
Engine data structures.

Result, statistics and query records shared by the aggregation engine,
the query interface and the report projections.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..registry.data_models import Identity, Package


@dataclass
class Diagnostic:
    """
    Leveled diagnostic for the caller.

    Lower levels are more important; the section loader uses 3 for a
    missing section and 4 for a section that cannot be parsed.
    """
    level: int
    message: str


@dataclass
class AggregationStatistics:
    """Statistics for one aggregation run"""
    shared_users_processed: int = 0
    packages_processed: int = 0
    patches_applied: int = 0
    duplicate_packages: int = 0
    skipped_nodes: int = 0
    dangling_patches: int = 0
    error_details: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class ReportAnchor:
    """Link target allocated for one identity's report section"""
    anchor_id: str
    title: str

    @property
    def href(self) -> str:
        return f"#{self.anchor_id}"


@dataclass
class PermissionHolder:
    """
    One line of the permission listing.

    package is None when the identity holds the permission directly.
    """
    identity: Identity
    package: Optional[Package] = None

    @property
    def label(self) -> str:
        if self.package is None:
            return self.identity.full_name
        return f"{self.identity.full_name}: {self.package.name}"


@dataclass
class PermissionEntry:
    """A permission and the identities/packages holding it"""
    name: str
    holders: List[PermissionHolder] = field(default_factory=list)
