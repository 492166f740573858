"""
Registry Data Models

Identities (owner uids), installed packages and the permission sets they carry.
Cross references between identities and packages are stored as keys
(uid / package name), never as object pointers.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

# uid 0 is owned by the kernel and always present after aggregation
KERNEL_UID = 0
KERNEL_NAME = "kernel/root"


class PermissionSet:
    """Permission names with set semantics, kept sorted for display"""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names: List[str] = []
        if names:
            for name in names:
                self.add(name)
            self.sort()

    def add(self, name: str) -> bool:
        """
        Add a permission name.

        Returns:
            True if the name was new, False if it was already present
        """
        if name in self._names:
            return False
        self._names.append(name)
        return True

    def sort(self):
        self._names.sort()

    def names(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PermissionSet):
            return self._names == other._names
        return NotImplemented

    def __repr__(self) -> str:
        return f"PermissionSet({self._names!r})"


@dataclass(eq=False)
class Identity:
    """
    Owner identity (uid) of one or more packages.

    The name is resolved from two slots: a name declared by a shared-user
    record always wins over a name inferred from the first package assigned
    to the identity.
    """
    uid: int
    declared_name: Optional[str] = None
    inferred_name: Optional[str] = None
    package_names: List[str] = field(default_factory=list)
    permissions: PermissionSet = field(default_factory=PermissionSet)
    reserved: bool = False

    def declare_name(self, name: Optional[str]):
        """Set the declared name; reserved identities keep their name"""
        if self.reserved:
            return
        self.declared_name = name

    def infer_name(self, name: Optional[str]):
        """Record a name inferred from a package if none was inferred yet"""
        if self.inferred_name is None:
            self.inferred_name = name

    @property
    def display_name(self) -> Optional[str]:
        if self.declared_name is not None:
            return self.declared_name
        return self.inferred_name

    @property
    def full_name(self) -> str:
        """Stable display name: "<name>(<uid>)" or the bare uid"""
        name = self.display_name
        if name is None:
            return str(self.uid)
        return f"{name}({self.uid})"

    def get_package_count(self) -> int:
        return len(self.package_names)

    def __hash__(self) -> int:
        return hash(self.uid)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Identity):
            return self.uid == other.uid
        return NotImplemented


@dataclass
class PackagePatchState:
    """Mutable part of a package, written only by updated-package records"""
    original_path: Optional[str] = None
    applied_patches: int = 0


@dataclass(frozen=True)
class Package:
    """Installed application package"""
    sequence_id: int
    name: str
    install_path: Optional[str]
    owner_uid: int
    flags: int = 0
    permissions: PermissionSet = field(default_factory=PermissionSet, compare=False)
    patch: PackagePatchState = field(default_factory=PackagePatchState, compare=False)

    @property
    def original_path(self) -> Optional[str]:
        return self.patch.original_path

    @property
    def flags_hex(self) -> str:
        # Two's complement view for negative flag words, like the device prints them
        return format(self.flags & 0xFFFFFFFF, 'x')

    def dump_info(self) -> List[str]:
        """Lines of the per-package info box"""
        lines = [
            f"Name:        {self.name}",
            f"Path:        {self.install_path}",
            f"OrigPath:    {self.original_path}",
            f"Flags:       0x{self.flags_hex}",
            "Permissions: ",
        ]
        for permission in self.permissions:
            lines.append(f"             {permission}")
        return lines
