"""
Permission Index

Maps a permission name to the distinct identities (by uid) that were
granted it, either directly through a shared-user record or through any
package they own.

Every credit remembers where it came from (the shared-user record or a
package name), so replacing a package can withdraw exactly the credits
that package contributed.
"""

from typing import Dict, List, Optional, Set

# Source of credits made by a shared-user record
SHARED_USER_SOURCE = "<shared-user>"


class PermissionIndex:
    """Permission name -> ordered, duplicate-free list of uids"""

    def __init__(self):
        self._holders: Dict[str, List[int]] = {}
        self._sources: Dict[str, Dict[int, Set[str]]] = {}

    def grant(self, permission: str, uid: int, source: Optional[str] = None) -> bool:
        """
        Credit a uid with a permission.

        Args:
            permission: Permission name
            uid: Credited identity
            source: Package name, or SHARED_USER_SOURCE (the default)

        Returns:
            True if the uid was added, False if it already held the permission
        """
        sources = self._sources.setdefault(permission, {}).setdefault(uid, set())
        sources.add(source or SHARED_USER_SOURCE)

        holders = self._holders.setdefault(permission, [])
        if uid in holders:
            return False
        holders.append(uid)
        return True

    def revoke_source(self, uid: int, source: str) -> List[str]:
        """
        Withdraw every credit a source made for a uid.

        A uid stays credited for a permission while another source still
        grants it.

        Returns:
            Permissions the uid no longer holds
        """
        dropped = []
        for permission in list(self._sources):
            by_uid = self._sources[permission]
            sources = by_uid.get(uid)
            if not sources or source not in sources:
                continue
            sources.discard(source)
            if sources:
                continue

            del by_uid[uid]
            self._holders[permission].remove(uid)
            dropped.append(permission)
            if not self._holders[permission]:
                del self._holders[permission]
                del self._sources[permission]
        return dropped

    def holders(self, permission: str) -> List[int]:
        return list(self._holders.get(permission, []))

    def permission_names(self) -> List[str]:
        return sorted(self._holders)

    def clear(self):
        self._holders.clear()
        self._sources.clear()

    def __contains__(self, permission: object) -> bool:
        return permission in self._holders

    def __len__(self) -> int:
        return len(self._holders)
