"""Tests for version normalization and npm-style ranges."""

import pytest

from stackaudit.core.versions import clean_version, parse_range, satisfies


@pytest.mark.parametrize("raw, expected", [
    ("v20.11.1", "20.11.1"),
    ("v20.11.1\n", "20.11.1"),
    ("  10.2.4  ", "10.2.4"),
    ("=1.2.3", "1.2.3"),
    ("V3.0.0", "3.0.0"),
    ("1.0.0-beta.1", "1.0.0-beta.1"),
    ("20.1", None),
    ("Python 3.12.1", None),
    ("", None),
    ("not a version", None),
])
def test_clean_version(raw, expected):
    assert clean_version(raw) == expected


@pytest.mark.parametrize("requirement, version, expected", [
    (">=18.0.0", "20.11.1", True),
    (">=18.0.0", "16.20.0", False),
    ("^20.0.0", "20.11.1", True),
    ("^20.0.0", "21.0.0", False),
    ("~1.2.0", "1.2.9", True),
    ("~1.2.0", "1.3.0", False),
    ("18.x || 20.x", "20.1.0", True),
    (">=3.10.0 <4.0.0", "3.12.1", True),
])
def test_satisfies(requirement, version, expected):
    spec = parse_range(requirement)
    assert spec is not None
    assert satisfies(version, spec) is expected


@pytest.mark.parametrize("requirement", ["not-a-range", ">>=1", "^^1.0.0"])
def test_invalid_range(requirement):
    assert parse_range(requirement) is None
