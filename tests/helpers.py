"""Helpers for reading the rendered list page."""

import re

_LIST_ITEM_PATTERN = re.compile(r"<li>(.*?)</li>", re.DOTALL)


def listed_items(html: str) -> list[str]:
    """Return the text of every <li> entry on the list page."""
    return [entry.strip() for entry in _LIST_ITEM_PATTERN.findall(html)]
