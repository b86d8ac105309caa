"""
Query string parsing shared by the read endpoints.
"""
from typing import Iterable, List, Optional

from member_stats.api.exceptions import BadRequestError


def parse_comma_separated(value: Optional[str], allowed: Optional[Iterable[str]] = None) -> Optional[List[str]]:
    """
    Split a comma separated query value.

    Args:
        value: Raw query value; None or "" means "not given"
        allowed: Optional allow-list every entry must belong to

    Returns:
        Entries in the order given, or None when the value was not given

    Raises:
        BadRequestError: On an empty entry, an entry outside `allowed`
            or a repeated entry
    """
    if not value:
        return None
    allowed_set = set(allowed) if allowed is not None else None
    entries = value.split(",")
    seen = set()
    for entry in entries:
        if not entry.strip():
            raise BadRequestError("Empty value.")
        if allowed_set is not None and entry not in allowed_set:
            raise BadRequestError(f"Invalid value: {entry}")
        if entry in seen:
            raise BadRequestError(f"Duplicate values: {entry}")
        seen.add(entry)
    return entries


def parse_group_ids(value: Optional[str]) -> Optional[List[int]]:
    """Parse the `groupIds` query value into integers."""
    entries = parse_comma_separated(value)
    if entries is None:
        return None
    group_ids = []
    for entry in entries:
        try:
            group_ids.append(int(entry.strip()))
        except ValueError:
            raise BadRequestError(f"Invalid group id: {entry}")
    return group_ids
