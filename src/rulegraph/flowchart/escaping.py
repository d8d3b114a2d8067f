"""Label sanitising for flowchart node and edge declarations.

Every piece of free text is truncated, then rewritten so it cannot break
the line syntax of the document it is embedded in:

- ``"`` becomes ``'`` (labels are written inside double quotes)
- ``#`` ``<`` ``>`` become the entity codes ``#35;`` ``#lt;`` ``#gt;``
- ``{`` and ``}`` are dropped (shape delimiters)
- ``|`` becomes ``/`` (edge label delimiter)
- newlines and other control characters become spaces
"""

from __future__ import annotations

import re

__all__ = ["DEFAULT_MAX_LABEL_LENGTH", "escape_label"]

DEFAULT_MAX_LABEL_LENGTH = 50

# Single pass: the '#' inside produced entity codes is never re-encoded
_TRANSLATION = str.maketrans(
    {
        '"': "'",
        "#": "#35;",
        "<": "#lt;",
        ">": "#gt;",
        "{": None,
        "}": None,
        "|": "/",
    }
)

_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


def escape_label(text: str, max_length: int = DEFAULT_MAX_LABEL_LENGTH) -> str:
    """Return ``text`` truncated to ``max_length`` and made safe to embed.

    Truncation happens before encoding so an entity code is never cut in half.
    """
    return _CONTROL.sub(" ", text[:max_length]).translate(_TRANSLATION)
