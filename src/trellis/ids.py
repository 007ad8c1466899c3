"""Identity comparison and generation."""

import re
from collections.abc import Iterable


def compare_ids(left: str, right: str) -> int:
    """Compare two numeric suffixes, padding with leading zeros.

    Returns -1 if left < right, 0 if equal, 1 if left > right.
    """
    max_len = max(len(left), len(right))
    left_padded = left.zfill(max_len)
    right_padded = right.zfill(max_len)

    if left_padded < right_padded:
        return -1
    if left_padded > right_padded:
        return 1
    return 0


def max_id(ids: list[str]) -> str | None:
    """Find the highest ID from a list, or None if empty."""
    if not ids:
        return None

    highest = ids[0]
    for id_ in ids[1:]:
        if compare_ids(id_, highest) > 0:
            highest = id_
    return highest


def next_id(current_max: str | None) -> str:
    """Generate the next ID after current_max.

    - If None, returns "1"
    - If numeric (e.g., "9"), returns str(int + 1) (e.g., "10")
    """
    if current_max is None:
        return "1"
    return str(int(current_max) + 1)


def suffixes(prefix: str, existing: Iterable[str]) -> list[str]:
    """Numeric suffixes of ids shaped like ``{prefix}-{n}``."""
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d+)$")
    found = []
    for id_ in existing:
        match = pattern.match(id_)
        if match:
            found.append(match.group(1))
    return found


def new_id(prefix: str, existing: Iterable[str]) -> str:
    """Mint ``{prefix}-{n}`` with n one past the highest suffix in use.

    "card" with {"card-1", "card-9"} → "card-10"
    """
    return f"{prefix}-{next_id(max_id(suffixes(prefix, existing)))}"


def unique_id(desired: str, existing: set[str]) -> str:
    """Return desired if unused, otherwise append -1, -2, etc."""
    if desired not in existing:
        return desired
    n = 1
    while f"{desired}-{n}" in existing:
        n += 1
    return f"{desired}-{n}"
