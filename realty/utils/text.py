"""
Small text helpers shared by models and services.
"""

import re
from typing import Iterable, List, Optional, Union

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lower-case the value and collapse every run of non alphanumerics to '-'."""
    slug = _NON_ALNUM.sub("-", (value or "").strip().lower())
    return slug.strip("-")


def split_amenities(value: Optional[Union[str, Iterable[str]]]) -> List[str]:
    """
    Normalise amenities into a list of trimmed, non-empty strings.

    Accepts either a list or a comma separated string such as "wifi, gym,".
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return [str(item).strip() for item in items if str(item).strip()]
