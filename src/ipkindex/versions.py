"""Version ordering used to pick the newest archive of a package.

This is not Debian version comparison. Every non-digit character is dropped
and the remaining digits are left-padded to a fixed width, then compared as
integers, so "1.2-beta" and "1.2" compare equal. Existing published indices
were produced with this rule, so it has to stay as is.
"""

from ipkindex.constants import VERSION_PAD_WIDTH


def normalize_version(version: str, width: int = VERSION_PAD_WIDTH) -> str:
    """Reduce a version string to its zero-padded digits.

    Examples:
        >>> normalize_version("1.2.0")
        '00000120'
        >>> normalize_version("v2-rc1")
        '00000021'
    """
    digits = "".join(ch for ch in version if "0" <= ch <= "9")
    return digits.rjust(width, "0")


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as `left` is older than, equal to, or newer than `right`."""
    a = int(normalize_version(left))
    b = int(normalize_version(right))
    return (a > b) - (a < b)


def is_newer(version: str, than: str) -> bool:
    return compare_versions(version, than) > 0
