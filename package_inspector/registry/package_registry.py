"""
Package Registry

Owns the installed package records, keyed by package name. Each package
is linked to exactly one owner identity by uid; the owner keeps the package
name in its own package list.
"""

import logging
from typing import Dict, List, Optional

from .data_models import Identity, Package
from .identity_registry import IdentityRegistry

logger = logging.getLogger(__name__)


class PackageRegistry:
    """
    Registry of packages keyed by name.

    Sequence ids are handed out in registration order, starting at 1.
    A second registration under an existing name replaces the earlier
    record (last one wins).
    """

    def __init__(self):
        self._packages: Dict[str, Package] = {}
        self._next_sequence_id = 1
        self.duplicate_count = 0

    def register(self, name: str, install_path: Optional[str], flags: int,
                 owner: Identity, identities: Optional[IdentityRegistry] = None) -> Package:
        """
        Create a package record and link it to its owner.

        Args:
            name: Package name (unique key)
            install_path: Code path of the package
            flags: Package flag word
            owner: Owning identity
            identities: Registry used to unlink a replaced record from its
                previous owner

        Returns:
            The newly registered Package
        """
        previous = self._packages.get(name)
        if previous is not None:
            self.duplicate_count += 1
            logger.warning(
                f"[PackageRegistry] Package {name} registered again, "
                f"replacing record #{previous.sequence_id}"
            )
            self._unlink(previous, owner, identities)

        package = Package(
            sequence_id=self._next_sequence_id,
            name=name,
            install_path=install_path,
            owner_uid=owner.uid,
            flags=flags,
        )
        self._next_sequence_id += 1
        self._packages[name] = package

        owner.package_names.append(name)
        owner.infer_name(name)
        return package

    def _unlink(self, previous: Package, owner: Identity,
                identities: Optional[IdentityRegistry]):
        previous_owner = owner if previous.owner_uid == owner.uid else None
        if previous_owner is None and identities is not None:
            previous_owner = identities.get(previous.owner_uid)
        if previous_owner is None:
            return
        if previous.name in previous_owner.package_names:
            previous_owner.package_names.remove(previous.name)
        # The inferred name follows the first package the owner still has
        if previous_owner.inferred_name == previous.name:
            remaining = previous_owner.package_names
            previous_owner.inferred_name = remaining[0] if remaining else None

    def get(self, name: str) -> Optional[Package]:
        return self._packages.get(name)

    def packages(self) -> List[Package]:
        """All packages in registration order"""
        return list(self._packages.values())

    def packages_of(self, identity: Identity) -> List[Package]:
        """Packages owned by an identity, in discovery order"""
        return [self._packages[name] for name in identity.package_names if name in self._packages]

    def is_empty(self) -> bool:
        return not self._packages

    def clear(self):
        self._packages.clear()
        self._next_sequence_id = 1
        self.duplicate_count = 0

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __len__(self) -> int:
        return len(self._packages)
