"""Query string encoding for list options."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit


def add_options(path: str, opts: Any) -> str:
    """Append the present values of *opts* to *path* as a query string.

    *opts* must provide ``query_pairs()`` returning ``(key, value)``
    tuples in a fixed order; pairs whose value is None or empty are
    skipped. ``opts=None`` or no present values leaves *path* untouched.
    """
    if opts is None:
        return path

    pairs = [(k, v) for k, v in opts.query_pairs() if v is not None and v != ""]
    if not pairs:
        return path

    parts = urlsplit(path)
    return urlunsplit(parts._replace(query=urlencode(pairs)))
