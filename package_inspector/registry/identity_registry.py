"""
Identity Registry

Owns every owner identity (uid) seen while aggregating a package registry
document. Identities are created lazily the first time a uid is referenced
and retained until the registry is cleared.
"""

import logging
from typing import Dict, Iterator, List, Optional

from .data_models import Identity

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """
    Registry of identities keyed by numeric uid.

    Insertion order is preserved for iteration; sorted_identities() gives
    the ascending-uid view used by reports.
    """

    def __init__(self, debug_mode: bool = False):
        """
        Initialize empty identity registry.

        Args:
            debug_mode: Enable debug logging
        """
        self._identities: Dict[int, Identity] = {}
        self.debug_mode = debug_mode

    def get_or_create(self, uid: int) -> Identity:
        """
        Get the identity for a uid, creating it (unnamed) if needed.

        Args:
            uid: Numeric owner id

        Returns:
            Identity registered under uid
        """
        identity = self._identities.get(uid)
        if identity is None:
            identity = Identity(uid=uid)
            self._identities[uid] = identity
            if self.debug_mode:
                logger.debug(f"[IdentityRegistry] Created identity {uid}")
        return identity

    def get(self, uid: int) -> Optional[Identity]:
        """Look up an identity without creating it"""
        return self._identities.get(uid)

    def reserve(self, uid: int, name: str) -> Identity:
        """
        Create (or take over) an identity whose name is fixed.

        Args:
            uid: Numeric owner id
            name: Name that later declarations cannot replace

        Returns:
            The reserved Identity
        """
        identity = self.get_or_create(uid)
        identity.reserved = False
        identity.declare_name(name)
        identity.reserved = True
        return identity

    def sorted_identities(self) -> List[Identity]:
        return sorted(self._identities.values(), key=lambda identity: identity.uid)

    def clear(self):
        self._identities.clear()

    def __contains__(self, uid: object) -> bool:
        return uid in self._identities

    def __iter__(self) -> Iterator[Identity]:
        return iter(self._identities.values())

    def __len__(self) -> int:
        return len(self._identities)
