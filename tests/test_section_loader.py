"""Unit tests for loading the package settings section."""

import unittest
import xml.etree.ElementTree as ET
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from package_inspector.engine.section_loader import (
    MissingSectionError,
    NodeParseError,
    UnparseableSectionError,
    load_package_settings,
    parse_int,
    read_flags,
    read_owner_uid,
    read_uid,
)


class TestLoadPackageSettings(unittest.TestCase):
    """Test cases for section level parsing."""

    def test_missing_section(self):
        with self.assertRaises(MissingSectionError) as ctx:
            load_package_settings(None)
        self.assertEqual(ctx.exception.level, 3)
        self.assertIn("PACKAGE SETTINGS", str(ctx.exception))

    def test_empty_section(self):
        with self.assertRaises(UnparseableSectionError) as ctx:
            load_package_settings([])
        self.assertEqual(ctx.exception.level, 4)

    def test_failed_dump_marker(self):
        with self.assertRaises(UnparseableSectionError):
            load_package_settings(["*** /data/system/packages.xml: No such file or directory"])

    def test_malformed_xml(self):
        with self.assertRaises(UnparseableSectionError):
            load_package_settings(["<packages>", "<package name='x'>"])

    def test_parses_lines(self):
        root = load_package_settings([
            "<?xml version='1.0' encoding='utf-8' standalone='yes' ?>\n",
            "<packages>\n",
            "<package name=\"com.x\" codePath=\"/data/app/x\" userId=\"10001\" />\n",
            "</packages>\n",
        ])
        self.assertEqual(root.tag, "packages")
        self.assertEqual(len(root.findall("package")), 1)


class TestAttributeReaders(unittest.TestCase):
    """Test cases for attribute parsing helpers."""

    def test_parse_int(self):
        self.assertEqual(parse_int("10001"), 10001)
        self.assertEqual(parse_int("0x1"), 1)
        self.assertEqual(parse_int("0XfF"), 255)
        self.assertEqual(parse_int("-1459077"), -1459077)
        with self.assertRaises(ValueError):
            parse_int("abc")
        with self.assertRaises(ValueError):
            parse_int("")

    def test_owner_uid_prefers_user_id(self):
        node = ET.fromstring('<package name="a" userId="10002" sharedUserId="1000" />')
        self.assertEqual(read_owner_uid(node), 10002)

    def test_owner_uid_falls_back_to_shared_user_id(self):
        node = ET.fromstring('<package name="a" sharedUserId="1000" />')
        self.assertEqual(read_owner_uid(node), 1000)

    def test_owner_uid_missing(self):
        node = ET.fromstring('<package name="a" />')
        with self.assertRaises(NodeParseError):
            read_owner_uid(node)

    def test_owner_uid_non_numeric(self):
        node = ET.fromstring('<package name="a" userId="system" />')
        with self.assertRaises(NodeParseError):
            read_owner_uid(node)

    def test_parse_int_rejects_loose_literals(self):
        for value in ("1_0", "--7", "+-7", "0x-3", "0x", "1 0"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_int(value)

    def test_owner_uid_rejects_malformed_values(self):
        for value in ("1_0", "--7", "0x-3", "-5"):
            with self.subTest(value=value):
                node = ET.fromstring(f'<package name="a" userId="{value}" />')
                with self.assertRaises(NodeParseError):
                    read_owner_uid(node)

    def test_shared_user_uid_must_not_be_negative(self):
        node = ET.fromstring('<shared-user name="a" userId="-1000" />')
        with self.assertRaises(NodeParseError):
            read_uid(node, 'userId')

    def test_flags_default_and_malformed(self):
        self.assertEqual(read_flags(ET.fromstring('<package name="a" />')), 0)
        self.assertEqual(read_flags(ET.fromstring('<package flags="572996" />')), 572996)
        with self.assertRaises(NodeParseError):
            read_flags(ET.fromstring('<package flags="0xZZ" />'))


if __name__ == '__main__':
    unittest.main()
