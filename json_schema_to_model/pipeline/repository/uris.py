"""
Helpers for the URIs that identify schema locations.

A location is a document URI, optionally followed by a JSON pointer
fragment (``glTF.schema.json#/properties/asset``). All helpers return
normalized URIs, and normalization is idempotent.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from urllib.parse import quote, unquote, urljoin, urlsplit, urlunsplit

# Characters that may stay unescaped in a fragment (RFC 3986, minus "/")
_FRAGMENT_SAFE = "~!$&'()*+,;=:@"


def is_absolute(uri: str) -> bool:
    """Whether the URI carries a scheme. Single letters are drive names."""
    return len(urlsplit(uri).scheme) > 1


def _normalize_path(path: str) -> str:
    if not path:
        return path
    normalized = posixpath.normpath(path)
    if normalized == ".":
        return ""
    # normpath keeps a leading "//" but not "///"; a path never starts with it here
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if path.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def normalize(uri: str) -> str:
    """
    Normalize a URI.

    Dot segments are removed from the path and an empty fragment is
    dropped, so that ``a/./b.json#`` becomes ``a/b.json``.

    Args:
        uri: The URI to normalize

    Returns:
        The normalized URI
    """
    parts = urlsplit(uri)
    return urlunsplit((parts.scheme, parts.netloc, _normalize_path(parts.path), parts.query, parts.fragment))


def to_uri(location: str) -> str:
    """
    Convert a location given by a user into an absolute URI.

    Plain file system paths become ``file:`` URIs. Anything that already
    has a scheme is only normalized.
    """
    if is_absolute(location):
        return normalize(location)
    path, sep, fragment = location.partition("#")
    return normalize(Path(path).resolve().as_uri() + sep + fragment)


def without_fragment(uri: str) -> str:
    return uri.partition("#")[0]


def fragment_of(uri: str) -> str:
    """Return the raw (still percent-encoded) fragment, or an empty string."""
    return uri.partition("#")[2]


def has_fragment(uri: str) -> bool:
    return bool(fragment_of(uri))


def escape_segment(segment: str | int) -> str:
    """Escape a single JSON pointer segment so that it can be put into a fragment."""
    escaped = str(segment).replace("~", "~0").replace("/", "~1")
    return quote(escaped, safe=_FRAGMENT_SAFE)


def append_to_fragment(uri: str, segment: str | int) -> str:
    """
    Append a JSON pointer segment to the fragment of a URI.

    Examples:
        ("a.json", "properties") -> "a.json#/properties"
        ("a.json#/properties", "x") -> "a.json#/properties/x"

    Args:
        uri: The URI
        segment: The unescaped segment (a property name or an array index)

    Returns:
        The extended URI
    """
    base, _, fragment = uri.partition("#")
    return f"{base}#{fragment}/{escape_segment(segment)}"


def decode_fragment(uri: str) -> str:
    """Return the fragment as a JSON pointer string (percent-decoded)."""
    return unquote(fragment_of(uri))


def resolve_reference(base: str, reference: str) -> str:
    """Resolve a reference pointer against the URI of the document containing it."""
    return normalize(urljoin(base, reference))


def base_directory(uri: str) -> str:
    """Return the URI of the directory that contains the given document."""
    return urljoin(without_fragment(uri), ".")


def extract_schema_name(uri: str) -> str:
    """
    Return the file name part of a URI.

    Example:
        "https://example.com/schema/accessor.schema.json#/properties/x" -> "accessor.schema.json"
    """
    path = urlsplit(without_fragment(uri)).path
    return unquote(path.rstrip("/").rpartition("/")[2])
