"""Split a raw search string into tokens.

Token shapes, tried in this order at each position:

- ``key:"quoted value"``
- ``key:value`` (no whitespace in the value)
- ``"quoted phrase"``
- any other run of non-whitespace characters

Quotes stay on the token; the parser strips them.
"""

from __future__ import annotations

import re

_TOKEN_RE = re.compile(r'\w+:"[^"]*"|\w+:\S*|"[^"]*"|\S+')


def tokenize(raw: str) -> list[str]:
    """Return the tokens of ``raw`` in input order.

    Never raises. An unterminated quote simply falls back to
    whitespace-separated words.
    """
    if not raw:
        return []
    return _TOKEN_RE.findall(raw)
