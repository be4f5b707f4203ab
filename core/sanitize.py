"""Quoting of label and relationship type names for use in Cypher."""
from __future__ import annotations

import re
from typing import Optional

_IDENTIFIER = re.compile(r"^[^\W\d]\w*$", re.UNICODE)
_QUOTED = re.compile(r"^`(.*)`$", re.DOTALL)


def sanitize_name(name: Optional[str]) -> Optional[str]:
    """Return ``name`` as it has to be written in a Cypher statement.

    Plain identifiers are returned as they are, everything else is wrapped in
    back-ticks with embedded back-ticks doubled. Names that are already quoted
    are unquoted first. Returns ``None`` when there is nothing to sanitize.
    """
    if name is None or not name.strip():
        return None

    match = _QUOTED.match(name)
    if match:
        name = match.group(1).replace('``', '`')
        if not name.strip():
            return None

    if _IDENTIFIER.match(name):
        return name
    return "`" + name.replace('`', '``') + "`"
