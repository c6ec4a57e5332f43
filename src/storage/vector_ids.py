"""Deterministic vector ids derived from (source URL, chunk index).

Because every id can be recomputed from the URL alone, all chunks of a
page can be deleted without a secondary lookup index.
"""

import base64
import binascii

CHUNK_SEPARATOR = "_chunk_"


def url_prefix(url: str) -> str:
    """Return the standard base64 encoding of the UTF-8 URL."""
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


def vector_id(url: str, chunk_index: int) -> str:
    """Build the id of one chunk, e.g. ``aHR0cDovL2EuY29t_chunk_0``."""
    return f"{url_prefix(url)}{CHUNK_SEPARATOR}{chunk_index}"


def vector_ids_for_url(url: str, slots: int, start: int = 0) -> list[str]:
    """Return the ids for chunk indices ``start`` .. ``slots - 1``."""
    prefix = url_prefix(url)
    return [f"{prefix}{CHUNK_SEPARATOR}{i}" for i in range(start, slots)]


def parse_vector_id(vid: str) -> tuple[str, int] | None:
    """Recover (url, chunk_index) from an id, or None if it is foreign.

    Base64 output never contains ``_``, so the last separator is the one
    appended by :func:`vector_id`.
    """
    prefix, sep, index = vid.rpartition(CHUNK_SEPARATOR)
    if not sep or not index.isdigit():
        return None
    try:
        url = base64.b64decode(prefix, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    return url, int(index)
