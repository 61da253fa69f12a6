"""Hunt naming rules.

A hunt has no record of its own; its channels and role are found by name.
Everything that derives one of those names lives here.
"""

from __future__ import annotations

import re
from datetime import datetime

ROLE_PREFIX = "hunt-"

_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9-]")


def normalize(name: str) -> str:
    """Turn a free-text hunt name into a channel-safe slug.

    Lower-cases, turns spaces into hyphens, then drops anything that is not
    alphanumeric or a hyphen. Length is not checked here; Discord rejects
    names it does not like. An input made only of disallowed characters
    yields an empty slug.

    >>> normalize("Mystery Hunt 2024!")
    'mystery-hunt-2024'
    """
    return _DISALLOWED_CHARS.sub("", name.lower().replace(" ", "-"))


def role_name_for(slug: str) -> str:
    """Name of the role that grants access to a hunt's channels."""
    return f"{ROLE_PREFIX}{slug}"


def archived_name(name: str, when: datetime) -> str:
    """Prefix a channel name with the year and month it was archived."""
    return f"{when:%Y-%m}-{name}"
