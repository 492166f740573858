"""Unit tests for the identity/package registries and the permission index."""

import unittest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from package_inspector.registry import (
    KERNEL_NAME,
    Identity,
    IdentityRegistry,
    PackageRegistry,
    PermissionIndex,
    PermissionSet,
)


class TestPermissionSet(unittest.TestCase):
    """Test cases for permission sets."""

    def test_duplicates_collapse(self):
        perms = PermissionSet()
        self.assertTrue(perms.add("NET"))
        self.assertFalse(perms.add("NET"))
        self.assertEqual(len(perms), 1)

    def test_sort_is_lexicographic(self):
        perms = PermissionSet()
        for name in ("b.PERM", "a.PERM", "C.PERM"):
            perms.add(name)
        perms.sort()
        self.assertEqual(perms.names(), ["C.PERM", "a.PERM", "b.PERM"])

    def test_constructor_sorts(self):
        self.assertEqual(PermissionSet(["z", "y", "z"]).names(), ["y", "z"])


class TestIdentity(unittest.TestCase):
    """Test cases for identity naming."""

    def test_full_name_without_name(self):
        self.assertEqual(Identity(uid=10005).full_name, "10005")

    def test_declared_name_beats_inferred(self):
        identity = Identity(uid=1000)
        identity.infer_name("com.android.settings")
        identity.declare_name("android.uid.system")
        self.assertEqual(identity.full_name, "android.uid.system(1000)")

    def test_first_inferred_name_kept(self):
        identity = Identity(uid=10001)
        identity.infer_name("com.first")
        identity.infer_name("com.second")
        self.assertEqual(identity.display_name, "com.first")

    def test_reserved_identity_keeps_name(self):
        registry = IdentityRegistry()
        kernel = registry.reserve(0, KERNEL_NAME)
        kernel.declare_name("something.else")
        self.assertEqual(kernel.full_name, "kernel/root(0)")


class TestIdentityRegistry(unittest.TestCase):
    """Test cases for the identity registry."""

    def setUp(self):
        self.registry = IdentityRegistry()

    def test_get_or_create_is_stable(self):
        first = self.registry.get_or_create(10001)
        second = self.registry.get_or_create(10001)
        self.assertIs(first, second)
        self.assertEqual(len(self.registry), 1)

    def test_get_never_creates(self):
        self.assertIsNone(self.registry.get(42))
        self.assertEqual(len(self.registry), 0)

    def test_sorted_identities(self):
        for uid in (10010, 0, 1000):
            self.registry.get_or_create(uid)
        self.assertEqual([i.uid for i in self.registry.sorted_identities()], [0, 1000, 10010])


class TestPackageRegistry(unittest.TestCase):
    """Test cases for the package registry."""

    def setUp(self):
        self.identities = IdentityRegistry()
        self.registry = PackageRegistry()

    def test_sequence_ids_and_owner_link(self):
        owner = self.identities.get_or_create(10001)
        first = self.registry.register("com.a", "/data/app/a", 0, owner)
        second = self.registry.register("com.b", "/data/app/b", 4, owner)

        self.assertEqual((first.sequence_id, second.sequence_id), (1, 2))
        self.assertEqual(owner.package_names, ["com.a", "com.b"])
        self.assertEqual(owner.display_name, "com.a")
        self.assertEqual(self.registry.packages_of(owner), [first, second])

    def test_duplicate_name_last_wins(self):
        old_owner = self.identities.get_or_create(10001)
        new_owner = self.identities.get_or_create(10002)
        self.registry.register("com.a", "/data/app/a-1", 0, old_owner, self.identities)
        replacement = self.registry.register("com.a", "/data/app/a-2", 0, new_owner, self.identities)

        self.assertEqual(len(self.registry), 1)
        self.assertIs(self.registry.get("com.a"), replacement)
        self.assertEqual(old_owner.package_names, [])
        self.assertEqual(new_owner.package_names, ["com.a"])
        self.assertEqual(self.registry.duplicate_count, 1)
        self.assertIsNone(old_owner.inferred_name)
        self.assertEqual(old_owner.full_name, "10001")
        self.assertEqual(new_owner.full_name, "com.a(10002)")

    def test_duplicate_name_reinfers_from_remaining_package(self):
        old_owner = self.identities.get_or_create(10001)
        new_owner = self.identities.get_or_create(10002)
        self.registry.register("com.a", "/data/app/a-1", 0, old_owner, self.identities)
        self.registry.register("com.b", "/data/app/b-1", 0, old_owner, self.identities)
        self.registry.register("com.a", "/data/app/a-2", 0, new_owner, self.identities)

        self.assertEqual(old_owner.package_names, ["com.b"])
        self.assertEqual(old_owner.inferred_name, "com.b")

    def test_duplicate_name_same_owner_listed_once(self):
        owner = self.identities.get_or_create(10001)
        self.registry.register("com.a", "/data/app/a-1", 0, owner, self.identities)
        self.registry.register("com.a", "/data/app/a-2", 0, owner, self.identities)
        self.assertEqual(owner.package_names, ["com.a"])

    def test_flags_hex(self):
        owner = self.identities.get_or_create(1000)
        package = self.registry.register("android", "/system/framework", -1, owner)
        self.assertEqual(package.flags_hex, "ffffffff")

    def test_clear_resets_sequence(self):
        owner = self.identities.get_or_create(1000)
        self.registry.register("android", "/system/framework", 0, owner)
        self.registry.clear()
        self.assertTrue(self.registry.is_empty())
        self.assertEqual(self.registry.register("android", None, 0, owner).sequence_id, 1)


class TestPermissionIndex(unittest.TestCase):
    """Test cases for the permission index."""

    def test_grant_is_idempotent(self):
        index = PermissionIndex()
        self.assertTrue(index.grant("NET", 10001))
        self.assertFalse(index.grant("NET", 10001))
        index.grant("NET", 1000)
        self.assertEqual(index.holders("NET"), [10001, 1000])

    def test_permission_names_sorted(self):
        index = PermissionIndex()
        index.grant("b", 1)
        index.grant("a", 1)
        self.assertEqual(index.permission_names(), ["a", "b"])
        self.assertEqual(index.holders("missing"), [])

    def test_revoke_source_drops_sole_credit(self):
        index = PermissionIndex()
        index.grant("CAMERA", 10001, "com.a")
        index.grant("CAMERA", 10002, "com.b")

        self.assertEqual(index.revoke_source(10001, "com.a"), ["CAMERA"])
        self.assertEqual(index.holders("CAMERA"), [10002])

        self.assertEqual(index.revoke_source(10002, "com.b"), ["CAMERA"])
        self.assertNotIn("CAMERA", index)
        self.assertEqual(len(index), 0)

    def test_revoke_source_keeps_credit_with_other_sources(self):
        index = PermissionIndex()
        index.grant("NET", 1000)
        index.grant("NET", 1000, "com.a")
        index.grant("NFC", 1000, "com.a")
        index.grant("NFC", 1000, "com.b")

        self.assertEqual(index.revoke_source(1000, "com.a"), [])
        self.assertEqual(index.holders("NET"), [1000])
        self.assertEqual(index.holders("NFC"), [1000])

    def test_revoke_unknown_source_is_noop(self):
        index = PermissionIndex()
        index.grant("NET", 10001, "com.a")
        self.assertEqual(index.revoke_source(10001, "com.z"), [])
        self.assertEqual(index.revoke_source(10002, "com.a"), [])
        self.assertEqual(index.holders("NET"), [10001])


if __name__ == '__main__':
    unittest.main()
