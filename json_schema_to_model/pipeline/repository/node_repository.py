"""
Loading and caching of parsed JSON documents.

The repository maps URIs to parsed nodes. Documents are fetched at most
once, either from the file system or over HTTP, and JSON pointer
fragments are resolved against the loaded document. Relative URIs are
tried against the registered search locations in registration order.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NamedTuple
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

import requests
from jsonpointer import EndOfList, JsonPointer, JsonPointerException

from ...errors import FragmentError, LoadError
from .uris import decode_fragment, is_absolute, normalize, resolve_reference, to_uri, without_fragment

logger = logging.getLogger(__name__)


class ResolvedNode(NamedTuple):
    """A parsed node together with the absolute URI it was loaded from."""

    uri: str
    node: Any


class NodeRepository:
    """Resolves URIs to nodes of parsed JSON documents."""

    def __init__(self, search_locations: list[str] | None = None, timeout: float = 30):
        """
        Initialize the repository.

        Args:
            search_locations: Directories or documents that relative URIs are resolved against
            timeout: Timeout in seconds for HTTP requests
        """
        self.timeout = timeout
        self._search_locations: list[str] = []
        self._documents: dict[str, Any] = {}
        self._resolved: dict[str, ResolvedNode] = {}
        self._canonical: dict[str, str] = {}
        self._roots: list[ResolvedNode] = []
        for location in search_locations or []:
            self.add_search_location(location)

    @property
    def roots(self) -> list[ResolvedNode]:
        return list(self._roots)

    @property
    def search_locations(self) -> list[str]:
        return list(self._search_locations)

    def add_search_location(self, location: str) -> None:
        """Register a directory (or a document in a directory) for relative lookups."""
        uri = to_uri(location)
        if not is_absolute(location) and Path(location).is_dir() and not uri.endswith("/"):
            uri += "/"
        if uri not in self._search_locations:
            self._search_locations.append(uri)

    def add_root(self, location: str) -> Any:
        """
        Load a root document.

        The document also becomes a search location for relative lookups.

        Args:
            location: A path or URI

        Returns:
            The parsed root node

        Raises:
            LoadError: If the document is unreachable or not valid JSON
        """
        resolved = self.locate(to_uri(location))
        self._roots.append(resolved)
        base = without_fragment(resolved.uri)
        if base not in self._search_locations:
            self._search_locations.append(base)
        logger.debug("Added root %s", resolved.uri)
        return resolved.node

    def resolve(self, uri: str) -> Any:
        """
        Return the node that is denoted by the given URI.

        Raises:
            LoadError: If no document could be loaded for the URI
            FragmentError: If the fragment does not denote a node
        """
        return self.locate(uri).node

    def locate(self, uri: str) -> ResolvedNode:
        """Like ``resolve``, but also return the absolute URI the node was loaded from."""
        key = normalize(uri)
        cached = self._resolved.get(key)
        if cached is not None:
            return cached
        if is_absolute(key):
            resolved = self._load_location(key)
        else:
            resolved = self._load_relative(key)
        self._resolved[key] = resolved
        self._resolved.setdefault(resolved.uri, resolved)
        return resolved

    def record_canonical(self, uri: str, target: str) -> None:
        """Record that ``uri`` is a reference pointing to ``target``."""
        uri = normalize(uri)
        target = normalize(target)
        if uri != target:
            self._canonical[uri] = target

    def canonicalize(self, uri: str) -> str:
        """
        Return the location that the given URI ultimately points to.

        Chains of references are followed. A URI that was never reached
        through a reference is returned (normalized) as it is.
        """
        current = normalize(uri)
        seen = {current}
        while current in self._canonical:
            target = self._canonical[current]
            if target in seen:
                logger.debug("Cyclic reference chain through %s", target)
                break
            seen.add(target)
            current = target
        return current

    def _load_relative(self, uri: str) -> ResolvedNode:
        for location in self._search_locations:
            candidate = resolve_reference(location, uri)
            try:
                return self._load_location(candidate)
            except LoadError as e:
                logger.debug("Not found in search location %s: %s", location, e.reason)
        raise LoadError(uri, "not found in any search location")

    def _load_location(self, uri: str) -> ResolvedNode:
        document = self._load_document(without_fragment(uri))
        node = self._walk(uri, document, decode_fragment(uri))
        return ResolvedNode(uri, node)

    def _load_document(self, document_uri: str) -> Any:
        if document_uri in self._documents:
            return self._documents[document_uri]
        text = self._fetch(document_uri)
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise LoadError(document_uri, f"invalid JSON: {e}") from e
        self._documents[document_uri] = document
        logger.debug("Loaded %s", document_uri)
        return document

    def _fetch(self, document_uri: str) -> str:
        parsed = urlsplit(document_uri)
        if parsed.scheme in ("http", "https"):
            try:
                response = requests.get(document_uri, timeout=self.timeout)
                # Raises an HTTPError if the response status code is 4XX/5XX
                response.raise_for_status()
            except requests.RequestException as e:
                raise LoadError(document_uri, str(e)) from e
            return response.text
        if parsed.scheme == "file":
            file_path = url2pathname(unquote(parsed.path))
            try:
                with open(file_path, encoding="utf-8") as f:
                    return f.read()
            except (OSError, UnicodeDecodeError) as e:
                raise LoadError(document_uri, str(e)) from e
        raise LoadError(document_uri, f"unsupported URI scheme '{parsed.scheme}'")

    @staticmethod
    def _walk(uri: str, document: Any, pointer: str) -> Any:
        if not pointer:
            return document
        try:
            json_pointer = JsonPointer(pointer)
        except JsonPointerException:
            raise FragmentError(uri, pointer) from None
        node = document
        for part in json_pointer.parts:
            if not isinstance(node, (dict, list)):
                raise FragmentError(uri, part)
            try:
                node = json_pointer.walk(node, part)
            except JsonPointerException:
                raise FragmentError(uri, part) from None
            if isinstance(node, EndOfList):
                raise FragmentError(uri, part)
        return node
