"""
Node repository: loads JSON documents and resolves URIs to parsed nodes.
"""

from __future__ import annotations

from .node_repository import NodeRepository, ResolvedNode

__all__ = ["NodeRepository", "ResolvedNode"]
