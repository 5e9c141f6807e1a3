"""
Version normalization and npm-style range matching.
"""

from typing import Optional

from semantic_version import NpmSpec, Version


def clean_version(raw: str) -> Optional[str]:
    """
    Normalize a version string the way `semver.clean` does.

        "v20.11.1\\n" -> "20.11.1"
        "=10.2.4"     -> "10.2.4"
        "Python 3.12" -> None

    Returns None when the result is not a strict SemVer version.
    """
    text = raw.strip().lstrip("=").strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return str(Version(text))
    except ValueError:
        return None


def parse_range(requirement: str) -> Optional[NpmSpec]:
    """Parse an npm range (">=18", "^20.1.0", "18.x || 20.x"). None if invalid."""
    try:
        return NpmSpec(requirement.strip())
    except ValueError:
        return None


def satisfies(version: str, spec: NpmSpec) -> bool:
    return Version(version) in spec
