"""
Section Loader

Turns the "PACKAGE SETTINGS" section of a bug report (the device's
packages.xml dump) into an XML element tree and provides the attribute
readers used by the aggregation passes.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

PACKAGE_SETTINGS_SECTION = "PACKAGE SETTINGS"

# The bug report tool writes a line starting with this marker when it
# failed to dump a section
SECTION_FAILURE_MARKER = "***"

INTEGER_PATTERN = re.compile(r"(?P<sign>[+-])?(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<dec>[0-9]+))")


# Exception hierarchy for section loading errors
class SectionLoaderError(Exception):
    """Base exception for section loading errors"""
    pass


class MissingSectionError(SectionLoaderError):
    """The package settings section is not present in the bug report"""
    level = 3


class UnparseableSectionError(SectionLoaderError):
    """The package settings section is empty, failed or not valid XML"""
    level = 4


class NodeParseError(SectionLoaderError):
    """A single XML node lacks a required attribute or carries a bad value"""
    pass


def load_package_settings(lines: Optional[Sequence[str]],
                          section_name: str = PACKAGE_SETTINGS_SECTION) -> ET.Element:
    """
    Parse the package settings section into an element tree.

    Args:
        lines: Section lines, or None when the bug report has no such section
        section_name: Section name used in error messages

    Returns:
        Root element of the package registry document

    Raises:
        MissingSectionError: lines is None
        UnparseableSectionError: section is empty, marked as failed or not XML
    """
    if lines is None:
        raise MissingSectionError(f"Cannot find section: {section_name}")

    if len(lines) == 0 or lines[0].startswith(SECTION_FAILURE_MARKER):
        raise UnparseableSectionError(f"Cannot parse section: {section_name}")

    text = "\n".join(line.rstrip("\r\n") for line in lines)
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise UnparseableSectionError(f"Cannot parse section: {section_name} ({e})") from e

    logger.debug(f"[SectionLoader] Parsed {section_name}: {len(root)} top level nodes")
    return root


def parse_int(value: str) -> int:
    """
    Parse a decimal or 0x-prefixed hexadecimal integer attribute.

    Only an optional single sign followed by digits is accepted; Python
    literal extras such as underscores are rejected.

    Raises:
        ValueError: value is not a number
    """
    match = INTEGER_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"not an integer: {value!r}")
    sign = -1 if match.group('sign') == '-' else 1
    if match.group('hex') is not None:
        return sign * int(match.group('hex'), 16)
    return sign * int(match.group('dec'), 10)


def require_attr(node: ET.Element, name: str) -> str:
    """Read a mandatory attribute or raise NodeParseError"""
    value = node.get(name)
    if value is None:
        raise NodeParseError(f"<{node.tag}> is missing attribute '{name}'")
    return value


def read_uid(node: ET.Element, attr: str) -> int:
    """Read a numeric uid from a mandatory attribute"""
    value = require_attr(node, attr)
    try:
        uid = parse_int(value)
    except ValueError as e:
        raise NodeParseError(f"<{node.tag}> has non-numeric {attr}='{value}'") from e
    if uid < 0:
        raise NodeParseError(f"<{node.tag}> has negative {attr}='{value}'")
    return uid


def read_owner_uid(node: ET.Element) -> int:
    """
    Read the owner uid of a package node.

    userId is used when present, sharedUserId otherwise.

    Raises:
        NodeParseError: neither attribute is present or the value is not numeric
    """
    attr = 'userId' if node.get('userId') is not None else 'sharedUserId'
    if node.get(attr) is None:
        raise NodeParseError(f"<{node.tag}> has neither userId nor sharedUserId")
    return read_uid(node, attr)


def read_flags(node: ET.Element) -> int:
    """Read the flags attribute, 0 when absent"""
    value = node.get('flags')
    if value is None:
        return 0
    try:
        return parse_int(value)
    except ValueError as e:
        raise NodeParseError(f"<{node.tag}> has malformed flags='{value}'") from e
